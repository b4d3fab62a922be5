from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from raidloot.domain.weights import (
    EligibilityThresholds,
    MeritWeights,
    PriorityWeights,
    RecencyParams,
    RoleMultipliers,
    ScoringConfiguration,
)
from raidloot.models.config import GuildScoringConfigRow


class SqlConfigurationProvider:
    """Configuration provider port backed by guild_scoring_config."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_guild(self, guild_id: str) -> Optional[ScoringConfiguration]:
        row = self.db.get(GuildScoringConfigRow, guild_id)
        if row is None:
            return None
        # Constructing the value objects re-validates what was stored.
        return ScoringConfiguration(
            guild_id=row.guild_id,
            merit_weights=MeritWeights(
                attendance=row.merit_attendance,
                mechanical=row.merit_mechanical,
                preparation=row.merit_preparation,
            ),
            priority_weights=PriorityWeights(
                upgrade_value=row.priority_upgrade_value,
                tier_bonus=row.priority_tier_bonus,
                role_multiplier=row.priority_role_multiplier,
            ),
            role_multipliers=RoleMultipliers(
                dps=row.role_dps,
                tank=row.role_tank,
                healer=row.role_healer,
            ),
            thresholds=EligibilityThresholds(
                attendance=row.threshold_attendance,
                activity=row.threshold_activity,
            ),
            recency=RecencyParams(
                tier_a=row.recency_tier_a,
                tier_b=row.recency_tier_b,
                tier_c=row.recency_tier_c,
                recovery_rate=row.recency_recovery_rate,
            ),
        )

    def save(self, config: ScoringConfiguration) -> ScoringConfiguration:
        row = self.db.get(GuildScoringConfigRow, config.guild_id)
        if row is None:
            row = GuildScoringConfigRow(guild_id=config.guild_id)
            self.db.add(row)

        row.merit_attendance = config.merit_weights.attendance
        row.merit_mechanical = config.merit_weights.mechanical
        row.merit_preparation = config.merit_weights.preparation
        row.priority_upgrade_value = config.priority_weights.upgrade_value
        row.priority_tier_bonus = config.priority_weights.tier_bonus
        row.priority_role_multiplier = config.priority_weights.role_multiplier
        row.role_dps = config.role_multipliers.dps
        row.role_tank = config.role_multipliers.tank
        row.role_healer = config.role_multipliers.healer
        row.threshold_attendance = config.thresholds.attendance
        row.threshold_activity = config.thresholds.activity
        row.recency_tier_a = config.recency.tier_a
        row.recency_tier_b = config.recency.tier_b
        row.recency_tier_c = config.recency.tier_c
        row.recency_recovery_rate = config.recency.recovery_rate

        self.db.commit()
        return config
