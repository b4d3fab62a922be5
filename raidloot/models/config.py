"""
Per-guild scoring configuration. One row per guild; updates overwrite the
whole row.
"""
from datetime import datetime
from sqlalchemy import Float, String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from raidloot.db.base import Base


class GuildScoringConfigRow(Base):
    __tablename__ = "guild_scoring_config"

    guild_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Merit weights
    merit_attendance: Mapped[float] = mapped_column(Float, nullable=False)
    merit_mechanical: Mapped[float] = mapped_column(Float, nullable=False)
    merit_preparation: Mapped[float] = mapped_column(Float, nullable=False)

    # Item priority weights
    priority_upgrade_value: Mapped[float] = mapped_column(Float, nullable=False)
    priority_tier_bonus: Mapped[float] = mapped_column(Float, nullable=False)
    priority_role_multiplier: Mapped[float] = mapped_column(Float, nullable=False)

    # Role multipliers
    role_dps: Mapped[float] = mapped_column(Float, nullable=False)
    role_tank: Mapped[float] = mapped_column(Float, nullable=False)
    role_healer: Mapped[float] = mapped_column(Float, nullable=False)

    # Eligibility thresholds
    threshold_attendance: Mapped[float] = mapped_column(Float, nullable=False)
    threshold_activity: Mapped[float] = mapped_column(Float, nullable=False)

    # Recency
    recency_tier_a: Mapped[float] = mapped_column(Float, nullable=False)
    recency_tier_b: Mapped[float] = mapped_column(Float, nullable=False)
    recency_tier_c: Mapped[float] = mapped_column(Float, nullable=False)
    recency_recovery_rate: Mapped[float] = mapped_column(Float, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
