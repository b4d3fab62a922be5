"""
Guild scoring configuration.

A guild owns one ScoringConfiguration made of:

  MeritWeights       attendance / mechanical / preparation
  PriorityWeights    upgrade value / tier bonus / role multiplier
  RoleMultipliers    per-role item-priority multiplier
  EligibilityThresholds
  RecencyParams      base penalty per loot tier + weekly recovery rate

Every piece validates itself on construction and raises
InvalidWeightConfigurationError, so a configuration that exists is a valid
configuration. Updates replace the whole object; nothing is mutated.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field

from raidloot.core.errors import InvalidWeightConfigurationError
from raidloot.domain.loot import LootTier
from raidloot.domain.roles import Role


def _check_non_negative(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        raise InvalidWeightConfigurationError(f"{name} must be a number, got {value!r}.", field=name)
    if value < 0.0:
        raise InvalidWeightConfigurationError(f"{name} must be non-negative, got {value}.", field=name)
    if math.isinf(value):
        raise InvalidWeightConfigurationError(f"{name} must be finite.", field=name)


def _check_unit(name: str, value: float) -> None:
    _check_non_negative(name, value)
    if value > 1.0:
        raise InvalidWeightConfigurationError(f"{name} must be in [0.0, 1.0], got {value}.", field=name)


# ---------------------------------------------------------------------------
# Weight sets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeightSet:
    """Three non-negative weights whose sum is strictly positive."""

    def __post_init__(self) -> None:
        for name, value in self.items():
            _check_non_negative(name, value)
        if self.total <= 0.0:
            raise InvalidWeightConfigurationError(
                f"Sum of {type(self).__name__} must be greater than 0."
            )

    def items(self) -> list[tuple[str, float]]:
        return [(name, getattr(self, name)) for name in self.__dataclass_fields__]

    @property
    def total(self) -> float:
        return sum(value for _, value in self.items())


@dataclass(frozen=True)
class MeritWeights(WeightSet):
    attendance: float = 0.4
    mechanical: float = 0.4
    preparation: float = 0.2


@dataclass(frozen=True)
class PriorityWeights(WeightSet):
    upgrade_value: float = 0.45
    tier_bonus: float = 0.35
    role_multiplier: float = 0.20


# ---------------------------------------------------------------------------
# Role multipliers, thresholds, recency
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RoleMultipliers:
    dps: float = 1.0
    tank: float = 0.8
    healer: float = 0.7

    def __post_init__(self) -> None:
        for name in ("dps", "tank", "healer"):
            value = getattr(self, name)
            _check_non_negative(name, value)
            if value > 2.0:
                raise InvalidWeightConfigurationError(
                    f"{name} multiplier must be at most 2.0, got {value}.", field=name
                )

    def for_role(self, role: Role) -> float:
        return {
            Role.dps: self.dps,
            Role.tank: self.tank,
            Role.healer: self.healer,
        }[role]


@dataclass(frozen=True)
class EligibilityThresholds:
    attendance: float = 0.8   # minimum ACS
    activity: float = 0.0     # MAS must be strictly above this

    def __post_init__(self) -> None:
        _check_unit("attendance", self.attendance)
        _check_unit("activity", self.activity)


@dataclass(frozen=True)
class RecencyParams:
    tier_a: float = 0.8
    tier_b: float = 0.9
    tier_c: float = 1.0
    recovery_rate: float = 0.1

    def __post_init__(self) -> None:
        _check_unit("tier_a", self.tier_a)
        _check_unit("tier_b", self.tier_b)
        _check_unit("tier_c", self.tier_c)
        _check_non_negative("recovery_rate", self.recovery_rate)

    def base_penalty(self, tier: LootTier) -> float:
        return {
            LootTier.A: self.tier_a,
            LootTier.B: self.tier_b,
            LootTier.C: self.tier_c,
        }[tier]


# ---------------------------------------------------------------------------
# Aggregate configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringConfiguration:
    guild_id: str
    merit_weights: MeritWeights = field(default_factory=MeritWeights)
    priority_weights: PriorityWeights = field(default_factory=PriorityWeights)
    role_multipliers: RoleMultipliers = field(default_factory=RoleMultipliers)
    thresholds: EligibilityThresholds = field(default_factory=EligibilityThresholds)
    recency: RecencyParams = field(default_factory=RecencyParams)

    def __post_init__(self) -> None:
        if not self.guild_id or not self.guild_id.strip():
            raise InvalidWeightConfigurationError("Guild ID must not be blank.", field="guild_id")

    @classmethod
    def default(cls, guild_id: str) -> "ScoringConfiguration":
        return cls(guild_id=guild_id)
