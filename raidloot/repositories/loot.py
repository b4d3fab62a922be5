from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from raidloot.db.base import as_utc
from raidloot.domain.loot import LootAward, LootAwardStatus, LootBan, LootTier
from raidloot.domain.scores import FlpsScore
from raidloot.models.loot import LootAwardRow, LootBanRow


def _award_to_domain(row: LootAwardRow) -> LootAward:
    return LootAward(
        id=row.id,
        item_id=row.item_id,
        raider_id=row.raider_id,
        guild_id=row.guild_id,
        awarded_at=as_utc(row.awarded_at),
        flps_score=FlpsScore.of(row.flps_score),
        tier=LootTier(row.tier),
        status=LootAwardStatus(row.status),
        revoke_reason=row.revoke_reason,
    )


def _ban_to_domain(row: LootBanRow) -> LootBan:
    return LootBan(
        id=row.id,
        raider_id=row.raider_id,
        guild_id=row.guild_id,
        reason=row.reason,
        banned_at=as_utc(row.banned_at),
        expires_at=as_utc(row.expires_at),
        lifted=row.lifted,
    )


class SqlLootRepository:
    def __init__(self, db: Session):
        self.db = db

    # --- awards -------------------------------------------------------------

    def find_award(self, award_id: str) -> Optional[LootAward]:
        row = self.db.get(LootAwardRow, award_id)
        return _award_to_domain(row) if row is not None else None

    def find_awards(self, guild_id: str, raider_id: str) -> list[LootAward]:
        rows = self.db.scalars(
            select(LootAwardRow)
            .where(LootAwardRow.guild_id == guild_id, LootAwardRow.raider_id == raider_id)
            .order_by(LootAwardRow.awarded_at)
        ).all()
        return [_award_to_domain(row) for row in rows]

    def save_award(self, award: LootAward) -> LootAward:
        row = self.db.get(LootAwardRow, award.id)
        if row is None:
            row = LootAwardRow(id=award.id)
            self.db.add(row)
        row.guild_id = award.guild_id
        row.raider_id = award.raider_id
        row.item_id = award.item_id
        row.awarded_at = award.awarded_at
        row.flps_score = award.flps_score.value
        row.tier = award.tier
        row.status = award.status
        row.revoke_reason = award.revoke_reason
        self.db.commit()
        self.db.refresh(row)
        return _award_to_domain(row)

    # --- bans ---------------------------------------------------------------

    def find_ban(self, ban_id: str) -> Optional[LootBan]:
        row = self.db.get(LootBanRow, ban_id)
        return _ban_to_domain(row) if row is not None else None

    def find_bans(self, guild_id: str, raider_id: str) -> list[LootBan]:
        rows = self.db.scalars(
            select(LootBanRow)
            .where(LootBanRow.guild_id == guild_id, LootBanRow.raider_id == raider_id)
            .order_by(LootBanRow.banned_at)
        ).all()
        return [_ban_to_domain(row) for row in rows]

    def save_ban(self, ban: LootBan) -> LootBan:
        row = self.db.get(LootBanRow, ban.id)
        if row is None:
            row = LootBanRow(id=ban.id)
            self.db.add(row)
        row.guild_id = ban.guild_id
        row.raider_id = ban.raider_id
        row.reason = ban.reason
        row.banned_at = ban.banned_at
        row.expires_at = ban.expires_at
        row.lifted = ban.lifted
        self.db.commit()
        self.db.refresh(row)
        return _ban_to_domain(row)
