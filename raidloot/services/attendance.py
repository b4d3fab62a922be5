"""
Attendance aggregation.

Folds persisted AttendanceRecords, or completed RaidEvents directly, into
a single AttendanceStats figure for one raider.

Public API
----------
aggregate_records(records)                     -> AttendanceStats
stats_from_raids(raids, raider_id)             -> AttendanceStats
records_for_completed_raid(raid, id_factory)   -> list[AttendanceRecord]
"""
from __future__ import annotations

from functools import reduce
from typing import Iterable, Optional

from raidloot.domain.attendance import AttendanceRecord, AttendanceStats
from raidloot.domain.loot import IdFactory, new_id
from raidloot.domain.raid import RaidEvent

UNKNOWN_INSTANCE = "unknown"


def aggregate_records(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    return reduce(
        AttendanceStats.combine,
        (record.to_stats() for record in records),
        AttendanceStats.zero(),
    )


def stats_from_raids(raids: Iterable[RaidEvent], raider_id: str) -> AttendanceStats:
    """
    Every completed raid counts toward the total; a raid counts as attended
    when the raider's signup was selected. Encounter counts follow the
    enabled encounters of those raids.
    """
    stats = AttendanceStats.zero()
    for raid in raids:
        if not raid.is_completed:
            continue
        signup = raid.signup_for(raider_id)
        attended = signup is not None and signup.selected
        encounters = len(raid.enabled_encounters)
        stats = stats.combine(AttendanceStats(
            total_raids=1,
            attended_raids=1 if attended else 0,
            total_encounters=encounters,
            attended_encounters=encounters if attended else 0,
        ))
    return stats


def records_for_completed_raid(
    raid: RaidEvent,
    id_factory: IdFactory = new_id,
    instance: Optional[str] = None,
) -> list[AttendanceRecord]:
    """One single-raid record per signup; selected means attended."""
    name = instance or raid.instance or UNKNOWN_INSTANCE
    return [
        AttendanceRecord.create(
            raider_id=signup.raider_id,
            guild_id=raid.guild_id,
            instance=name,
            start_date=raid.scheduled_date,
            end_date=raid.scheduled_date,
            attended_raids=1 if signup.selected else 0,
            total_raids=1,
            id_factory=id_factory,
        )
        for signup in raid.signups
    ]
