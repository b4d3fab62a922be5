"""
Raid request / response schemas.

POST /guilds/{guild_id}/raids                      → ScheduleRaidRequest → RaidResponse
POST /guilds/{guild_id}/raids/{raid_id}/signups    → SignupRequest       → RaidResponse
POST /guilds/{guild_id}/raids/{raid_id}/encounters → EncounterRequest    → RaidResponse
GET  /guilds/{guild_id}/raids/{raid_id}/composition                     → CompositionResponse
"""
from __future__ import annotations

from datetime import date, time
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator

from raidloot.domain.raid import RaidEvent
from raidloot.services.raids import CompositionReport


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class ScheduleRaidRequest(BaseModel):
    scheduled_date: date = Field(examples=["2026-11-05"])
    start_time: Optional[time] = Field(default=None, examples=["20:00"])
    end_time: Optional[time] = Field(default=None, examples=["23:00"])
    instance: Optional[str] = Field(default=None, max_length=128, examples=["Nerub-ar Palace"])
    difficulty: Optional[str] = Field(
        default=None,
        description='"LFR" | "NORMAL" | "HEROIC" | "MYTHIC"',
        examples=["HEROIC"],
    )
    optional: bool = False
    notes: Optional[str] = None


class EncounterRequest(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=128, examples=["Queen Ansurek"])]
    encounter_ref: Optional[int] = Field(default=None, description="External boss id.")
    enabled: bool = True
    extra: bool = False
    notes: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class EncounterToggleRequest(BaseModel):
    enabled: bool


class SignupRequest(BaseModel):
    raider_id: Annotated[str, Field(min_length=1, max_length=64)]
    role: str = Field(description='"TANK" | "HEALER" | "DPS"', examples=["HEALER"])
    comment: Optional[str] = None
    status: str = Field(
        default="CONFIRMED",
        description='"CONFIRMED" | "TENTATIVE" | "DECLINED" | "LATE"',
    )


class SignupStatusRequest(BaseModel):
    status: str = Field(examples=["TENTATIVE"])


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class EncounterOut(BaseModel):
    id: str
    name: str
    encounter_ref: Optional[int] = None
    enabled: bool
    extra: bool
    notes: Optional[str] = None


class SignupOut(BaseModel):
    raider_id: str
    role: str
    status: str
    comment: Optional[str] = None
    selected: bool


class RaidResponse(BaseModel):
    id: str
    guild_id: str
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    instance: Optional[str] = None
    difficulty: Optional[str] = None
    optional: bool
    notes: Optional[str] = None
    status: str
    encounters: list[EncounterOut]
    signups: list[SignupOut]

    @classmethod
    def from_domain(cls, raid: RaidEvent) -> "RaidResponse":
        return cls(
            id=raid.id,
            guild_id=raid.guild_id,
            scheduled_date=raid.scheduled_date,
            start_time=raid.start_time,
            end_time=raid.end_time,
            instance=raid.instance,
            difficulty=raid.difficulty.value if raid.difficulty else None,
            optional=raid.optional,
            notes=raid.notes,
            status=raid.status.value,
            encounters=[
                EncounterOut(
                    id=e.id,
                    name=e.name,
                    encounter_ref=e.encounter_ref,
                    enabled=e.enabled,
                    extra=e.extra,
                    notes=e.notes,
                )
                for e in raid.encounters
            ],
            signups=[
                SignupOut(
                    raider_id=s.raider_id,
                    role=s.role.value,
                    status=s.status.value,
                    comment=s.comment,
                    selected=s.selected,
                )
                for s in raid.signups
            ],
        )


class RaidListResponse(BaseModel):
    total: int
    items: list[RaidResponse]


class CompositionResponse(BaseModel):
    tanks: int
    healers: int
    dps: int
    total: int
    viable: bool
    ready_to_start: bool
    missing_roles: list[str]

    @classmethod
    def from_report(cls, report: CompositionReport) -> "CompositionResponse":
        return cls(
            tanks=report.composition.tanks,
            healers=report.composition.healers,
            dps=report.composition.dps,
            total=report.composition.total,
            viable=report.viable,
            ready_to_start=report.ready_to_start,
            missing_roles=[role.value for role in report.missing_roles],
        )
