"""
Raid use cases.

Each command loads the RaidEvent through the RaidRepository port, applies
one aggregate operation and saves the new snapshot (replace-on-save). The
result is always a Result: Ok(raid) on success, Err(RaidLootError)
otherwise. Domain errors never escape these methods.

Guild scoping: every command carries the guild id, and a raid stored
under another guild is reported as not found.

Public API
----------
RaidUseCases(raids, attendance, today)
  .schedule(cmd)                      -> Result[RaidEvent]
  .get(guild_id, raid_id)             -> Result[RaidEvent]
  .list_on_date(guild_id, day)        -> Result[list[RaidEvent]]
  .add_encounter / .remove_encounter / .set_encounter_enabled
  .add_signup / .remove_signup / .update_signup_status
  .select_signup / .deselect_signup
  .start / .complete / .cancel
  .composition(guild_id, raid_id, target) -> Result[CompositionReport]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Callable, Optional, Protocol, TypeVar

from raidloot.core.errors import (
    AttendanceNotRecordedError,
    RaidLootError,
    RaidNotFoundError,
    ScheduleRejectedError,
)
from raidloot.core.result import Err, Ok, Result
from raidloot.domain.attendance import AttendanceRecord
from raidloot.domain.loot import IdFactory, new_id
from raidloot.domain.raid import Encounter, RaidDifficulty, RaidEvent, SignupStatus
from raidloot.domain.roles import Role
from raidloot.services.attendance import records_for_completed_raid
from raidloot.services.scheduling import (
    DEFAULT_MIN_CONFIRMED_SIGNUPS,
    DEFAULT_TARGET_COMPOSITION,
    RaidComposition,
    analyze_composition,
    can_start_raid,
    is_viable_composition,
    schedule_rejection,
    suggest_missing_roles,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------

class RaidRepository(Protocol):
    def find_by_id(self, raid_id: str) -> Optional[RaidEvent]: ...

    def find_by_guild_and_date(self, guild_id: str, day: date) -> list[RaidEvent]: ...

    def save(self, raid: RaidEvent) -> RaidEvent: ...


class AttendanceRepository(Protocol):
    # save_all joins the unit of work that RaidRepository.save commits.
    def save_all(self, records: list[AttendanceRecord]) -> list[AttendanceRecord]: ...

    def find_records(
        self,
        raider_id: str,
        guild_id: str,
        start_date: date,
        end_date: date,
    ) -> list[AttendanceRecord]: ...


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScheduleRaidCommand:
    guild_id: str
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    instance: Optional[str] = None
    difficulty: Optional[str] = None
    optional: bool = False
    notes: Optional[str] = None


@dataclass(frozen=True)
class AddSignupCommand:
    guild_id: str
    raid_id: str
    raider_id: str
    role: str
    comment: Optional[str] = None
    status: str = SignupStatus.confirmed.value


@dataclass(frozen=True)
class AddEncounterCommand:
    guild_id: str
    raid_id: str
    name: str
    encounter_ref: Optional[int] = None
    enabled: bool = True
    extra: bool = False
    notes: Optional[str] = None


@dataclass
class CompositionReport:
    composition: RaidComposition
    viable: bool
    missing_roles: list[Role]
    ready_to_start: bool


def _utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


# ---------------------------------------------------------------------------
# Use cases
# ---------------------------------------------------------------------------

class RaidUseCases:
    def __init__(
        self,
        raids: RaidRepository,
        attendance: Optional[AttendanceRepository] = None,
        today: Callable[[], date] = _utc_today,
        id_factory: IdFactory = new_id,
    ):
        self._raids = raids
        self._attendance = attendance
        self._today = today
        self._new_id = id_factory

    # --- plumbing -----------------------------------------------------------

    def _run(self, action: str, fn: Callable[[], T]) -> Result[T]:
        try:
            return Ok(fn())
        except RaidLootError as exc:
            logger.warning("%s rejected: %s %s", action, exc.code, exc.message)
            return Err(exc)

    def _load(self, guild_id: str, raid_id: str) -> RaidEvent:
        raid = self._raids.find_by_id(raid_id)
        if raid is None or raid.guild_id != guild_id:
            raise RaidNotFoundError(raid_id)
        return raid

    def _mutate(
        self,
        action: str,
        guild_id: str,
        raid_id: str,
        op: Callable[[RaidEvent], RaidEvent],
    ) -> Result[RaidEvent]:
        def apply() -> RaidEvent:
            return self._raids.save(op(self._load(guild_id, raid_id)))
        return self._run(action, apply)

    def _transition(
        self,
        action: str,
        guild_id: str,
        raid_id: str,
        op: Callable[[RaidEvent], RaidEvent],
    ) -> Result[RaidEvent]:
        result = self._mutate(action, guild_id, raid_id, op)
        if result.is_ok():
            logger.info("raid %s (guild %s) is now %s", raid_id, guild_id, result.value.status.value)
        return result

    # --- queries ------------------------------------------------------------

    def get(self, guild_id: str, raid_id: str) -> Result[RaidEvent]:
        return self._run("get raid", lambda: self._load(guild_id, raid_id))

    def list_on_date(self, guild_id: str, day: date) -> Result[list[RaidEvent]]:
        return self._run("list raids", lambda: self._raids.find_by_guild_and_date(guild_id, day))

    def composition(
        self,
        guild_id: str,
        raid_id: str,
        target: RaidComposition = DEFAULT_TARGET_COMPOSITION,
        minimum_signups: int = DEFAULT_MIN_CONFIRMED_SIGNUPS,
    ) -> Result[CompositionReport]:
        def analyze() -> CompositionReport:
            raid = self._load(guild_id, raid_id)
            composition = analyze_composition(raid.signups)
            return CompositionReport(
                composition=composition,
                viable=is_viable_composition(composition),
                missing_roles=suggest_missing_roles(composition, target),
                ready_to_start=can_start_raid(raid, minimum_signups),
            )
        return self._run("analyze composition", analyze)

    # --- scheduling ---------------------------------------------------------

    def schedule(self, cmd: ScheduleRaidCommand) -> Result[RaidEvent]:
        def schedule() -> RaidEvent:
            existing = self._raids.find_by_guild_and_date(cmd.guild_id, cmd.scheduled_date)
            reason = schedule_rejection(cmd.scheduled_date, existing, self._today())
            if reason is not None:
                raise ScheduleRejectedError(cmd.scheduled_date, reason)

            difficulty = RaidDifficulty.parse(cmd.difficulty) if cmd.difficulty else None
            raid = RaidEvent.schedule(
                guild_id=cmd.guild_id,
                scheduled_date=cmd.scheduled_date,
                start_time=cmd.start_time,
                end_time=cmd.end_time,
                instance=cmd.instance,
                difficulty=difficulty,
                optional=cmd.optional,
                notes=cmd.notes,
                id_factory=self._new_id,
            )
            saved = self._raids.save(raid)
            logger.info("raid %s scheduled for guild %s on %s", saved.id, saved.guild_id, saved.scheduled_date)
            return saved
        return self._run("schedule raid", schedule)

    # --- encounters ---------------------------------------------------------

    def add_encounter(self, cmd: AddEncounterCommand) -> Result[RaidEvent]:
        def op(raid: RaidEvent) -> RaidEvent:
            encounter = Encounter.create(
                name=cmd.name,
                encounter_ref=cmd.encounter_ref,
                enabled=cmd.enabled,
                extra=cmd.extra,
                notes=cmd.notes,
                id_factory=self._new_id,
            )
            return raid.add_encounter(encounter)
        return self._mutate("add encounter", cmd.guild_id, cmd.raid_id, op)

    def remove_encounter(self, guild_id: str, raid_id: str, encounter_id: str) -> Result[RaidEvent]:
        return self._mutate(
            "remove encounter", guild_id, raid_id,
            lambda raid: raid.remove_encounter(encounter_id),
        )

    def set_encounter_enabled(
        self, guild_id: str, raid_id: str, encounter_id: str, enabled: bool
    ) -> Result[RaidEvent]:
        return self._mutate(
            "toggle encounter", guild_id, raid_id,
            lambda raid: raid.set_encounter_enabled(encounter_id, enabled),
        )

    # --- signups ------------------------------------------------------------

    def add_signup(self, cmd: AddSignupCommand) -> Result[RaidEvent]:
        def op(raid: RaidEvent) -> RaidEvent:
            return raid.add_signup(
                cmd.raider_id,
                Role.parse(cmd.role),
                comment=cmd.comment,
                status=SignupStatus.parse(cmd.status),
            )
        return self._mutate("add signup", cmd.guild_id, cmd.raid_id, op)

    def remove_signup(self, guild_id: str, raid_id: str, raider_id: str) -> Result[RaidEvent]:
        return self._mutate(
            "remove signup", guild_id, raid_id,
            lambda raid: raid.remove_signup(raider_id),
        )

    def update_signup_status(
        self, guild_id: str, raid_id: str, raider_id: str, status: str
    ) -> Result[RaidEvent]:
        return self._mutate(
            "update signup status", guild_id, raid_id,
            lambda raid: raid.update_signup_status(raider_id, SignupStatus.parse(status)),
        )

    def select_signup(self, guild_id: str, raid_id: str, raider_id: str) -> Result[RaidEvent]:
        return self._mutate(
            "select signup", guild_id, raid_id,
            lambda raid: raid.select_signup(raider_id),
        )

    def deselect_signup(self, guild_id: str, raid_id: str, raider_id: str) -> Result[RaidEvent]:
        return self._mutate(
            "deselect signup", guild_id, raid_id,
            lambda raid: raid.deselect_signup(raider_id),
        )

    # --- lifecycle ----------------------------------------------------------

    def start(self, guild_id: str, raid_id: str) -> Result[RaidEvent]:
        return self._transition("start raid", guild_id, raid_id, lambda raid: raid.start())

    def cancel(self, guild_id: str, raid_id: str) -> Result[RaidEvent]:
        return self._transition("cancel raid", guild_id, raid_id, lambda raid: raid.cancel())

    def complete(self, guild_id: str, raid_id: str) -> Result[RaidEvent]:
        """
        Complete the raid and record one attendance fact per signup.

        The attendance records are written before the COMPLETED raid is
        saved, and the SQL adapters share one session whose commit happens
        in the raid save. A failed attendance write returns
        Err(AttendanceNotRecordedError) and leaves the raid IN_PROGRESS, so
        the command can be retried.
        """
        def op(raid: RaidEvent) -> RaidEvent:
            completed = raid.complete()
            if self._attendance is not None:
                self._record_attendance(completed)
            return completed
        return self._transition("complete raid", guild_id, raid_id, op)

    def _record_attendance(self, raid: RaidEvent) -> None:
        records = records_for_completed_raid(raid, id_factory=self._new_id)
        try:
            self._attendance.save_all(records)
        except Exception as exc:
            logger.exception("attendance write for raid %s failed", raid.id)
            raise AttendanceNotRecordedError(raid.id) from exc
        logger.info("recorded %d attendance records for raid %s", len(records), raid.id)
