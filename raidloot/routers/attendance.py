"""
Attendance router.

GET /guilds/{guild_id}/attendance/{raider_id}?start_date=...&end_date=...
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from raidloot.core.errors import InvalidAttendanceError
from raidloot.db.base import get_db
from raidloot.repositories.attendance import SqlAttendanceRepository
from raidloot.schemas.common import ERROR_RESPONSES
from raidloot.services.attendance import aggregate_records

router = APIRouter(prefix="/guilds/{guild_id}/attendance", tags=["attendance"], responses=ERROR_RESPONSES)


class AttendanceStatsResponse(BaseModel):
    raider_id: str
    start_date: date
    end_date: date
    total_raids: int
    attended_raids: int
    missed_raids: int
    percentage: float


@router.get("/{raider_id}", response_model=AttendanceStatsResponse, summary="Attendance over a period")
def get_attendance(
    guild_id: str,
    raider_id: str,
    start_date: date = Query(examples=["2026-09-01"]),
    end_date: date = Query(examples=["2026-10-31"]),
    db: Session = Depends(get_db),
):
    """Sums every attendance record that falls inside the period."""
    if end_date < start_date:
        raise InvalidAttendanceError(f"End date {end_date} is before start date {start_date}.")
    records = SqlAttendanceRepository(db).find_records(raider_id, guild_id, start_date, end_date)
    stats = aggregate_records(records)
    return AttendanceStatsResponse(
        raider_id=raider_id,
        start_date=start_date,
        end_date=end_date,
        total_raids=stats.total_raids,
        attended_raids=stats.attended_raids,
        missed_raids=stats.missed_raids,
        percentage=stats.percentage,
    )
