"""
Guild scoring configuration schemas.

GET /guilds/{guild_id}/config  → ScoringConfigurationBody
PUT /guilds/{guild_id}/config  ← ScoringConfigurationBody (whole replace)

Range checks live in the domain value objects; these models only fix the
shape, so every invalid update surfaces as the same coded error.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from raidloot.domain.weights import ScoringConfiguration


class MeritWeightsBody(BaseModel):
    attendance: float = 0.4
    mechanical: float = 0.4
    preparation: float = 0.2


class PriorityWeightsBody(BaseModel):
    upgrade_value: float = 0.45
    tier_bonus: float = 0.35
    role_multiplier: float = 0.20


class RoleMultipliersBody(BaseModel):
    dps: float = 1.0
    tank: float = 0.8
    healer: float = 0.7


class ThresholdsBody(BaseModel):
    attendance: float = Field(default=0.8, description="Minimum attendance commitment score.")
    activity: float = Field(default=0.0, description="Mechanical score must be strictly above this.")


class RecencyBody(BaseModel):
    tier_a: float = 0.8
    tier_b: float = 0.9
    tier_c: float = 1.0
    recovery_rate: float = Field(default=0.1, description="Penalty recovered per whole week.")


class ScoringConfigurationBody(BaseModel):
    merit_weights: MeritWeightsBody = Field(default_factory=MeritWeightsBody)
    priority_weights: PriorityWeightsBody = Field(default_factory=PriorityWeightsBody)
    role_multipliers: RoleMultipliersBody = Field(default_factory=RoleMultipliersBody)
    thresholds: ThresholdsBody = Field(default_factory=ThresholdsBody)
    recency: RecencyBody = Field(default_factory=RecencyBody)

    @classmethod
    def from_domain(cls, config: ScoringConfiguration) -> "ScoringConfigurationBody":
        return cls(
            merit_weights=MeritWeightsBody(**dict(config.merit_weights.items())),
            priority_weights=PriorityWeightsBody(**dict(config.priority_weights.items())),
            role_multipliers=RoleMultipliersBody(
                dps=config.role_multipliers.dps,
                tank=config.role_multipliers.tank,
                healer=config.role_multipliers.healer,
            ),
            thresholds=ThresholdsBody(
                attendance=config.thresholds.attendance,
                activity=config.thresholds.activity,
            ),
            recency=RecencyBody(
                tier_a=config.recency.tier_a,
                tier_b=config.recency.tier_b,
                tier_c=config.recency.tier_c,
                recovery_rate=config.recency.recovery_rate,
            ),
        )


class ScoringConfigurationResponse(ScoringConfigurationBody):
    guild_id: str
