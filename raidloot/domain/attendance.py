"""
Attendance value objects.

AttendanceStats is the rolled-up figure fed into the Attendance Commitment
Score. AttendanceRecord is one persisted fact: "raider X attended N of M
raids of instance Y between two dates".
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from raidloot.core.errors import InvalidAttendanceError, InvalidInputError
from raidloot.domain.loot import IdFactory, new_id


def _check_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAttendanceError(f"{name} must be an integer, got {value!r}.")
    if value < 0:
        raise InvalidAttendanceError(f"{name} cannot be negative, got {value}.")


@dataclass(frozen=True)
class AttendanceStats:
    total_raids: int = 0
    attended_raids: int = 0
    total_encounters: int = 0
    attended_encounters: int = 0

    def __post_init__(self) -> None:
        _check_count("total_raids", self.total_raids)
        _check_count("attended_raids", self.attended_raids)
        _check_count("total_encounters", self.total_encounters)
        _check_count("attended_encounters", self.attended_encounters)
        if self.attended_raids > self.total_raids:
            raise InvalidAttendanceError(
                f"Attended raids ({self.attended_raids}) cannot exceed "
                f"total raids ({self.total_raids}).",
                attended=self.attended_raids,
                total=self.total_raids,
            )
        if self.attended_encounters > self.total_encounters:
            raise InvalidAttendanceError(
                f"Attended encounters ({self.attended_encounters}) cannot exceed "
                f"total encounters ({self.total_encounters}).",
                attended=self.attended_encounters,
                total=self.total_encounters,
            )

    @classmethod
    def calculate(cls, attended: int, total: int) -> "AttendanceStats":
        return cls(total_raids=total, attended_raids=attended)

    @classmethod
    def zero(cls) -> "AttendanceStats":
        return cls()

    @property
    def percentage(self) -> float:
        """attended / total; an empty period is 0.0."""
        if self.total_raids == 0:
            return 0.0
        return self.attended_raids / self.total_raids

    @property
    def encounter_percentage(self) -> float:
        if self.total_encounters == 0:
            return 0.0
        return self.attended_encounters / self.total_encounters

    @property
    def missed_raids(self) -> int:
        return self.total_raids - self.attended_raids

    def combine(self, other: "AttendanceStats") -> "AttendanceStats":
        return AttendanceStats(
            total_raids=self.total_raids + other.total_raids,
            attended_raids=self.attended_raids + other.attended_raids,
            total_encounters=self.total_encounters + other.total_encounters,
            attended_encounters=self.attended_encounters + other.attended_encounters,
        )

    __add__ = combine


@dataclass(frozen=True)
class AttendanceRecord:
    id: str
    raider_id: str
    guild_id: str
    instance: str
    start_date: date
    end_date: date
    attended_raids: int
    total_raids: int
    encounter: Optional[str] = None     # None = whole instance
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.instance or not self.instance.strip():
            raise InvalidInputError("instance", self.instance)
        _check_count("attended_raids", self.attended_raids)
        _check_count("total_raids", self.total_raids)
        if self.total_raids == 0:
            raise InvalidAttendanceError("Total raids must be positive.", total=0)
        if self.attended_raids > self.total_raids:
            raise InvalidAttendanceError(
                f"Attended raids ({self.attended_raids}) cannot exceed "
                f"total raids ({self.total_raids}).",
                attended=self.attended_raids,
                total=self.total_raids,
            )
        if self.end_date < self.start_date:
            raise InvalidAttendanceError(
                f"End date {self.end_date} is before start date {self.start_date}."
            )

    @classmethod
    def create(
        cls,
        raider_id: str,
        guild_id: str,
        instance: str,
        start_date: date,
        end_date: date,
        attended_raids: int,
        total_raids: int,
        encounter: Optional[str] = None,
        recorded_at: Optional[datetime] = None,
        id_factory: IdFactory = new_id,
    ) -> "AttendanceRecord":
        return cls(
            id=id_factory(),
            raider_id=raider_id,
            guild_id=guild_id,
            instance=instance,
            start_date=start_date,
            end_date=end_date,
            attended_raids=attended_raids,
            total_raids=total_raids,
            encounter=encounter,
            recorded_at=recorded_at or datetime.now(timezone.utc),
        )

    @property
    def percentage(self) -> float:
        return self.attended_raids / self.total_raids

    def to_stats(self) -> AttendanceStats:
        return AttendanceStats.calculate(self.attended_raids, self.total_raids)
