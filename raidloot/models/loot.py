from datetime import datetime
from sqlalchemy import Boolean, Float, String, Text, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from raidloot.db.base import Base, enum_values
from raidloot.domain.loot import LootAwardStatus, LootTier


class LootAwardRow(Base):
    __tablename__ = "loot_awards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    guild_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    raider_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    awarded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    flps_score: Mapped[float] = mapped_column(Float, nullable=False)
    tier: Mapped[str] = mapped_column(
        Enum(LootTier, name="loot_tier_enum", values_callable=enum_values), nullable=False
    )
    status: Mapped[str] = mapped_column(
        Enum(LootAwardStatus, name="loot_award_status_enum", values_callable=enum_values),
        nullable=False,
        default=LootAwardStatus.active,
    )
    revoke_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class LootBanRow(Base):
    __tablename__ = "loot_bans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    guild_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    raider_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    banned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
        comment="NULL = permanent ban",
    )
    lifted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
