"""
Tests for attendance statistics, attendance records and their aggregation.
"""
from __future__ import annotations

import itertools
from datetime import date, datetime, timezone

import pytest

from raidloot.core.errors import InvalidAttendanceError, InvalidInputError
from raidloot.domain.attendance import AttendanceRecord, AttendanceStats
from raidloot.domain.raid import Encounter, RaidEvent
from raidloot.domain.roles import Role
from raidloot.services.attendance import (
    aggregate_records,
    records_for_completed_raid,
    stats_from_raids,
)

_DAY = date(2090, 1, 15)


def _record(attended: int, total: int, **overrides) -> AttendanceRecord:
    base = dict(
        raider_id="r1",
        guild_id="g1",
        instance="Liberation of Undermine",
        start_date=date(2090, 1, 1),
        end_date=date(2090, 1, 31),
        attended_raids=attended,
        total_raids=total,
    )
    base.update(overrides)
    return AttendanceRecord.create(**base)


def _completed_raid(selected: list[str], signed_up: list[str], encounters: int = 2) -> RaidEvent:
    raid = RaidEvent.schedule("g1", _DAY, instance="Undermine")
    for n in range(encounters):
        raid = raid.add_encounter(Encounter.create(f"Boss {n}"))
    for raider_id in signed_up:
        raid = raid.add_signup(raider_id, Role.dps)
    for raider_id in selected:
        raid = raid.select_signup(raider_id)
    return raid.start().complete()


class TestAttendanceStats:
    def test_percentage(self):
        assert AttendanceStats.calculate(8, 10).percentage == pytest.approx(0.8)

    def test_empty_period_is_zero(self):
        stats = AttendanceStats.calculate(0, 0)
        assert stats.percentage == 0.0
        assert stats.encounter_percentage == 0.0

    def test_attended_above_total_rejected(self):
        with pytest.raises(InvalidAttendanceError) as exc_info:
            AttendanceStats.calculate(11, 10)
        assert exc_info.value.details == {"attended": 11, "total": 10}

    def test_negative_counts_rejected(self):
        with pytest.raises(InvalidAttendanceError):
            AttendanceStats.calculate(-1, 10)

    def test_missed_raids(self):
        assert AttendanceStats.calculate(7, 10).missed_raids == 3

    def test_combine(self):
        combined = AttendanceStats.calculate(3, 4) + AttendanceStats.calculate(5, 6)
        assert combined == AttendanceStats(total_raids=10, attended_raids=8)
        assert combined.percentage == pytest.approx(0.8)

    def test_zero_is_identity(self):
        stats = AttendanceStats(total_raids=4, attended_raids=2, total_encounters=8, attended_encounters=5)
        assert stats.combine(AttendanceStats.zero()) == stats


class TestAttendanceRecord:
    def test_create(self):
        record = _record(3, 4, recorded_at=datetime(2090, 2, 1, tzinfo=timezone.utc))
        assert record.id
        assert record.percentage == pytest.approx(0.75)
        assert record.to_stats() == AttendanceStats.calculate(3, 4)
        assert record.encounter is None

    def test_total_must_be_positive(self):
        with pytest.raises(InvalidAttendanceError):
            _record(0, 0)

    def test_attended_above_total_rejected(self):
        with pytest.raises(InvalidAttendanceError):
            _record(5, 4)

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidAttendanceError):
            _record(1, 1, start_date=date(2090, 2, 1), end_date=date(2090, 1, 1))

    def test_blank_instance_rejected(self):
        with pytest.raises(InvalidInputError):
            _record(1, 1, instance=" ")


class TestAggregation:
    def test_aggregate_records(self):
        stats = aggregate_records([_record(3, 4), _record(1, 4), _record(2, 2)])
        assert stats.total_raids == 10
        assert stats.attended_raids == 6

    def test_aggregate_nothing(self):
        assert aggregate_records([]) == AttendanceStats.zero()

    def test_stats_from_raids_counts_completed_only(self):
        completed = _completed_raid(selected=["r1"], signed_up=["r1", "r2"])
        scheduled = RaidEvent.schedule("g1", _DAY).add_signup("r1", Role.dps).select_signup("r1")
        stats = stats_from_raids([completed, scheduled], "r1")
        assert stats.total_raids == 1
        assert stats.attended_raids == 1
        assert stats.total_encounters == 2
        assert stats.attended_encounters == 2

    def test_unselected_raider_missed_the_raid(self):
        raids = [
            _completed_raid(selected=["r1"], signed_up=["r1", "r2"]),
            _completed_raid(selected=["r2"], signed_up=["r1", "r2"]),
        ]
        stats = stats_from_raids(raids, "r2")
        assert stats.total_raids == 2
        assert stats.attended_raids == 1
        assert stats.percentage == pytest.approx(0.5)

    def test_records_for_completed_raid(self):
        counter = itertools.count(1)
        raid = _completed_raid(selected=["r1"], signed_up=["r1", "r2"], encounters=0)
        records = records_for_completed_raid(raid, id_factory=lambda: f"rec-{next(counter)}")

        assert [r.id for r in records] == ["rec-1", "rec-2"]
        by_raider = {r.raider_id: r for r in records}
        assert by_raider["r1"].attended_raids == 1
        assert by_raider["r2"].attended_raids == 0
        assert all(r.total_raids == 1 for r in records)
        assert all(r.instance == "Undermine" for r in records)
        assert all(r.start_date == r.end_date == _DAY for r in records)

    def test_records_fall_back_to_unknown_instance(self):
        raid = RaidEvent.schedule("g1", _DAY).add_signup("r1", Role.tank).start().complete()
        assert records_for_completed_raid(raid)[0].instance == "unknown"
