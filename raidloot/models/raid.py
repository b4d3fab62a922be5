"""
Raid tables.

raid_events is the aggregate root row; raid_encounters and raid_signups are
owned children. The repository rewrites the children on every save, so
nothing here is ever patched field by field.
"""
from datetime import datetime, date, time
from sqlalchemy import (
    Boolean, Integer, String, Text, DateTime, Date, Time, Enum, ForeignKey,
    UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from raidloot.db.base import Base, enum_values
from raidloot.domain.raid import RaidStatus, SignupStatus
from raidloot.domain.roles import Role


class RaidEventRow(Base):
    __tablename__ = "raid_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    guild_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    instance: Mapped[str | None] = mapped_column(String(128), nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(16), nullable=True)
    optional: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        Enum(RaidStatus, name="raid_status_enum", values_callable=enum_values),
        nullable=False,
        default=RaidStatus.scheduled,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    encounters: Mapped[list["RaidEncounterRow"]] = relationship(
        back_populates="raid",
        cascade="all, delete-orphan",
        order_by="RaidEncounterRow.position",
    )
    signups: Mapped[list["RaidSignupRow"]] = relationship(
        back_populates="raid",
        cascade="all, delete-orphan",
        order_by="RaidSignupRow.position",
    )


class RaidEncounterRow(Base):
    __tablename__ = "raid_encounters"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    raid_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("raid_events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    encounter_ref: Mapped[int | None] = mapped_column(Integer, nullable=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    extra: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    raid: Mapped[RaidEventRow] = relationship(back_populates="encounters")


class RaidSignupRow(Base):
    __tablename__ = "raid_signups"
    __table_args__ = (
        UniqueConstraint("raid_id", "raider_id", name="uq_signup_raid_raider"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    raid_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("raid_events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    raider_id: Mapped[str] = mapped_column(String(64), nullable=False)
    role: Mapped[str] = mapped_column(
        Enum(Role, name="raid_role_enum", values_callable=enum_values), nullable=False
    )
    status: Mapped[str] = mapped_column(
        Enum(SignupStatus, name="signup_status_enum", values_callable=enum_values),
        nullable=False,
        default=SignupStatus.confirmed,
    )
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    selected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    raid: Mapped[RaidEventRow] = relationship(back_populates="signups")
