"""
SQLAlchemy adapter for the RaidRepository port.

save() is a full replace: scalar columns are overwritten and the child
collections are deleted and re-inserted in aggregate order. There are no
partial field updates.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from raidloot.domain.raid import (
    Encounter,
    RaidDifficulty,
    RaidEvent,
    RaidStatus,
    Signup,
    SignupStatus,
)
from raidloot.domain.roles import Role
from raidloot.models.raid import RaidEncounterRow, RaidEventRow, RaidSignupRow


def _to_domain(row: RaidEventRow) -> RaidEvent:
    return RaidEvent(
        id=row.id,
        guild_id=row.guild_id,
        scheduled_date=row.scheduled_date,
        status=RaidStatus(row.status),
        start_time=row.start_time,
        end_time=row.end_time,
        instance=row.instance,
        difficulty=RaidDifficulty(row.difficulty) if row.difficulty else None,
        optional=row.optional,
        notes=row.notes,
        encounters=tuple(
            Encounter(
                id=e.id,
                name=e.name,
                encounter_ref=e.encounter_ref,
                enabled=e.enabled,
                extra=e.extra,
                notes=e.notes,
            )
            for e in row.encounters
        ),
        signups=tuple(
            Signup(
                raider_id=s.raider_id,
                role=Role(s.role),
                status=SignupStatus(s.status),
                comment=s.comment,
                selected=s.selected,
            )
            for s in row.signups
        ),
    )


class SqlRaidRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return select(RaidEventRow).options(
            selectinload(RaidEventRow.encounters),
            selectinload(RaidEventRow.signups),
        )

    def find_by_id(self, raid_id: str) -> Optional[RaidEvent]:
        row = self.db.scalars(self._query().where(RaidEventRow.id == raid_id)).first()
        return _to_domain(row) if row is not None else None

    def find_by_guild_and_date(self, guild_id: str, day: date) -> list[RaidEvent]:
        rows = self.db.scalars(
            self._query()
            .where(RaidEventRow.guild_id == guild_id, RaidEventRow.scheduled_date == day)
            .order_by(RaidEventRow.created_at)
        ).all()
        return [_to_domain(row) for row in rows]

    def save(self, raid: RaidEvent) -> RaidEvent:
        row = self.db.get(RaidEventRow, raid.id)
        if row is None:
            row = RaidEventRow(id=raid.id)
            self.db.add(row)

        row.guild_id = raid.guild_id
        row.scheduled_date = raid.scheduled_date
        row.start_time = raid.start_time
        row.end_time = raid.end_time
        row.instance = raid.instance
        row.difficulty = raid.difficulty.value if raid.difficulty else None
        row.optional = raid.optional
        row.notes = raid.notes
        row.status = raid.status

        # Children are replaced wholesale; flush the deletes before re-inserting
        # so the (raid_id, raider_id) unique constraint never sees both.
        row.encounters.clear()
        row.signups.clear()
        self.db.flush()

        row.encounters.extend(
            RaidEncounterRow(
                id=e.id,
                position=index,
                encounter_ref=e.encounter_ref,
                name=e.name,
                enabled=e.enabled,
                extra=e.extra,
                notes=e.notes,
            )
            for index, e in enumerate(raid.encounters)
        )
        row.signups.extend(
            RaidSignupRow(
                position=index,
                raider_id=s.raider_id,
                role=s.role,
                status=s.status,
                comment=s.comment,
                selected=s.selected,
            )
            for index, s in enumerate(raid.signups)
        )

        self.db.commit()
        self.db.refresh(row)
        return _to_domain(row)
