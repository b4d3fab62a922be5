from datetime import datetime, date
from sqlalchemy import Integer, String, DateTime, Date, Index
from sqlalchemy.orm import Mapped, mapped_column

from raidloot.db.base import Base


class AttendanceRecordRow(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        Index("ix_attendance_guild_raider_dates", "guild_id", "raider_id", "start_date", "end_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    guild_id: Mapped[str] = mapped_column(String(64), nullable=False)
    raider_id: Mapped[str] = mapped_column(String(64), nullable=False)
    instance: Mapped[str] = mapped_column(String(128), nullable=False)
    encounter: Mapped[str | None] = mapped_column(
        String(128), nullable=True,
        comment="NULL = whole-instance attendance",
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    attended_raids: Mapped[int] = mapped_column(Integer, nullable=False)
    total_raids: Mapped[int] = mapped_column(Integer, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
