"""
Score value objects.

Every scoring input and output is wrapped in an immutable, range-checked
scalar. Construction through `of()` is the only validation point: a value
outside the declared closed interval raises InvalidRangeError. Arithmetic
(`plus`, `times`, `+`, `*`) never fails; results are clamped back into the
interval.

Intervals
---------
  [0.0, 1.0]  every score except the two below
  [0.0, 2.0]  TierBonus, RoleMultiplier (bonus multipliers above parity)
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, TypeVar

from raidloot.core.errors import InvalidRangeError, InvalidWeightConfigurationError

S = TypeVar("S", bound="ScoreValue")


def clamp(value: float, lower: float, upper: float) -> float:
    if math.isnan(value):
        return lower
    return max(lower, min(upper, value))


@dataclass(frozen=True, order=True)
class ScoreValue:
    value: float

    MIN: ClassVar[float] = 0.0
    MAX: ClassVar[float] = 1.0
    LABEL: ClassVar[str] = "Score"

    def __post_init__(self) -> None:
        raw = self.value
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise InvalidRangeError(self.LABEL, raw, self.MIN, self.MAX)
        if math.isnan(raw) or not (self.MIN <= raw <= self.MAX):
            raise InvalidRangeError(self.LABEL, raw, self.MIN, self.MAX)
        object.__setattr__(self, "value", float(raw))

    @classmethod
    def of(cls: type[S], raw: float) -> S:
        return cls(raw)

    @classmethod
    def clamped(cls: type[S], raw: float) -> S:
        """Build from an unbounded computation, clamping into the interval."""
        return cls(clamp(raw, cls.MIN, cls.MAX))

    @classmethod
    def minimum(cls: type[S]) -> S:
        return cls(cls.MIN)

    @classmethod
    def maximum(cls: type[S]) -> S:
        return cls(cls.MAX)

    def plus(self: S, other: "ScoreValue") -> S:
        return type(self).clamped(self.value + other.value)

    def times(self: S, multiplier: float) -> S:
        return type(self).clamped(self.value * multiplier)

    def __add__(self: S, other: "ScoreValue") -> S:
        return self.plus(other)

    def __mul__(self: S, multiplier: float) -> S:
        return self.times(multiplier)

    def __float__(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"


# ---------------------------------------------------------------------------
# Merit components
# ---------------------------------------------------------------------------

class AttendanceCommitmentScore(ScoreValue):
    LABEL = "Attendance Commitment Score"


class MechanicalAdherenceScore(ScoreValue):
    LABEL = "Mechanical Adherence Score"


class ExternalPreparationScore(ScoreValue):
    LABEL = "External Preparation Score"


class RaiderMeritScore(ScoreValue):
    LABEL = "Raider Merit Score"


# ---------------------------------------------------------------------------
# Item priority components
# ---------------------------------------------------------------------------

class UpgradeValue(ScoreValue):
    LABEL = "Upgrade Value"


class TierBonus(ScoreValue):
    MAX = 2.0
    LABEL = "Tier Bonus"


class RoleMultiplier(ScoreValue):
    MAX = 2.0
    LABEL = "Role Multiplier"


class ItemPriorityIndex(ScoreValue):
    LABEL = "Item Priority Index"


# ---------------------------------------------------------------------------
# Final composition
# ---------------------------------------------------------------------------

class RecencyDecayFactor(ScoreValue):
    """
    Suppression of priority after a recent award. 1.0 means no penalty.

    RDF = min(1.0, base_penalty + recovery_rate × weeks_since_last_award)
    """
    LABEL = "Recency Decay Factor"

    @classmethod
    def no_penalty(cls) -> "RecencyDecayFactor":
        return cls(1.0)

    @classmethod
    def max_penalty(cls) -> "RecencyDecayFactor":
        return cls(0.0)

    @classmethod
    def from_weeks_since(
        cls,
        weeks_since_last_award: float | None,
        base_penalty: float,
        recovery_rate: float = 0.1,
    ) -> "RecencyDecayFactor":
        if math.isnan(base_penalty) or not (0.0 <= base_penalty <= 1.0):
            raise InvalidWeightConfigurationError(
                f"Base penalty must be in [0.0, 1.0], got {base_penalty}.",
                field="base_penalty",
            )
        if math.isnan(recovery_rate) or recovery_rate < 0.0:
            raise InvalidWeightConfigurationError(
                f"Recovery rate must be non-negative, got {recovery_rate}.",
                field="recovery_rate",
            )

        # No loot history means no penalty
        if weeks_since_last_award is None:
            return cls.no_penalty()

        weeks = max(0.0, weeks_since_last_award)
        return cls(min(1.0, base_penalty + recovery_rate * weeks))


class FlpsScore(ScoreValue):
    """Final Loot Priority Score: merit × item priority × recency decay."""
    LABEL = "Final Priority Score"
