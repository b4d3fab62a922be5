"""
Scheduling-validity policy and roster composition analysis.

Consulted by the raid use cases before a RaidEvent is constructed or
started. Everything here is a pure function of its arguments; "today" is
always passed in.

Public API
----------
schedule_rejection(scheduled_date, existing, today) -> str | None
can_schedule_raid(scheduled_date, existing, today)  -> bool
analyze_composition(signups)                        -> RaidComposition
is_viable_composition(composition)                  -> bool
suggest_missing_roles(composition, target)          -> list[Role]
has_minimum_signups(raid, minimum)                  -> bool
can_start_raid(raid, minimum)                       -> bool
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from raidloot.core.errors import InvalidInputError
from raidloot.domain.raid import RaidEvent, Signup
from raidloot.domain.roles import Role

# Floor for a functioning roster
MIN_TANKS = 2
MIN_HEALERS = 3
MIN_DPS = 5

DEFAULT_MIN_CONFIRMED_SIGNUPS = 10


@dataclass(frozen=True)
class RaidComposition:
    tanks: int = 0
    healers: int = 0
    dps: int = 0

    def __post_init__(self) -> None:
        for name in ("tanks", "healers", "dps"):
            if getattr(self, name) < 0:
                raise InvalidInputError(name, getattr(self, name))

    @property
    def total(self) -> int:
        return self.tanks + self.healers + self.dps

    def count(self, role: Role) -> int:
        return {Role.tank: self.tanks, Role.healer: self.healers, Role.dps: self.dps}[role]


MINIMUM_COMPOSITION = RaidComposition(tanks=MIN_TANKS, healers=MIN_HEALERS, dps=MIN_DPS)
DEFAULT_TARGET_COMPOSITION = RaidComposition(tanks=2, healers=4, dps=14)


# ---------------------------------------------------------------------------
# Scheduling validity
# ---------------------------------------------------------------------------

def schedule_rejection(
    scheduled_date: date,
    existing: Iterable[RaidEvent],
    today: date,
) -> Optional[str]:
    """Reason the date cannot be scheduled, or None if it can."""
    if scheduled_date < today:
        return "date is in the past"
    for raid in existing:
        if raid.scheduled_date == scheduled_date and raid.is_active:
            return f"raid {raid.id} is already {raid.status.value} on that date"
    return None


def can_schedule_raid(scheduled_date: date, existing: Iterable[RaidEvent], today: date) -> bool:
    return schedule_rejection(scheduled_date, existing, today) is None


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def analyze_composition(signups: Iterable[Signup]) -> RaidComposition:
    """Count roles over confirmed signups only."""
    confirmed = [s for s in signups if s.is_confirmed]
    return RaidComposition(
        tanks=sum(1 for s in confirmed if s.role == Role.tank),
        healers=sum(1 for s in confirmed if s.role == Role.healer),
        dps=sum(1 for s in confirmed if s.role == Role.dps),
    )


def is_viable_composition(composition: RaidComposition) -> bool:
    return (
        composition.tanks >= MIN_TANKS
        and composition.healers >= MIN_HEALERS
        and composition.dps >= MIN_DPS
    )


def suggest_missing_roles(
    composition: RaidComposition,
    target: RaidComposition = DEFAULT_TARGET_COMPOSITION,
) -> list[Role]:
    """One entry per missing slot, tanks first, then healers, then dps."""
    missing: list[Role] = []
    for role in (Role.tank, Role.healer, Role.dps):
        shortfall = target.count(role) - composition.count(role)
        missing.extend([role] * max(0, shortfall))
    return missing


# ---------------------------------------------------------------------------
# Readiness (advisory)
# ---------------------------------------------------------------------------

def has_minimum_signups(raid: RaidEvent, minimum: int = DEFAULT_MIN_CONFIRMED_SIGNUPS) -> bool:
    return len(raid.confirmed_signups) >= minimum


def can_start_raid(raid: RaidEvent, minimum: int = DEFAULT_MIN_CONFIRMED_SIGNUPS) -> bool:
    return raid.is_scheduled and has_minimum_signups(raid, minimum)
