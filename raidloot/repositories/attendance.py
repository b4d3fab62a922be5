from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from raidloot.db.base import as_utc
from raidloot.domain.attendance import AttendanceRecord
from raidloot.models.attendance import AttendanceRecordRow


def _to_domain(row: AttendanceRecordRow) -> AttendanceRecord:
    return AttendanceRecord(
        id=row.id,
        raider_id=row.raider_id,
        guild_id=row.guild_id,
        instance=row.instance,
        start_date=row.start_date,
        end_date=row.end_date,
        attended_raids=row.attended_raids,
        total_raids=row.total_raids,
        encounter=row.encounter,
        recorded_at=as_utc(row.recorded_at),
    )


class SqlAttendanceRepository:
    def __init__(self, db: Session):
        self.db = db

    def save_all(self, records: list[AttendanceRecord]) -> list[AttendanceRecord]:
        """
        Stage the records in the current session.

        The rows are flushed, not committed. The next commit on the same
        session publishes them; for a completed raid that is the raid save.
        """
        self.db.add_all(
            AttendanceRecordRow(
                id=record.id,
                guild_id=record.guild_id,
                raider_id=record.raider_id,
                instance=record.instance,
                encounter=record.encounter,
                start_date=record.start_date,
                end_date=record.end_date,
                attended_raids=record.attended_raids,
                total_raids=record.total_raids,
                recorded_at=record.recorded_at,
            )
            for record in records
        )
        try:
            self.db.flush()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return records

    def find_records(
        self,
        raider_id: str,
        guild_id: str,
        start_date: date,
        end_date: date,
    ) -> list[AttendanceRecord]:
        """Records whose period lies entirely inside [start_date, end_date]."""
        rows = self.db.scalars(
            select(AttendanceRecordRow)
            .where(
                AttendanceRecordRow.raider_id == raider_id,
                AttendanceRecordRow.guild_id == guild_id,
                AttendanceRecordRow.start_date >= start_date,
                AttendanceRecordRow.end_date <= end_date,
            )
            .order_by(AttendanceRecordRow.start_date)
        ).all()
        return [_to_domain(row) for row in rows]
