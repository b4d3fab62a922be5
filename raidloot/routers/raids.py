"""
Raid router.

POST   /guilds/{guild_id}/raids                                   schedule
GET    /guilds/{guild_id}/raids?day=YYYY-MM-DD                    list raids on a date
GET    /guilds/{guild_id}/raids/{raid_id}                         fetch one raid
POST   /guilds/{guild_id}/raids/{raid_id}/encounters              add encounter
DELETE /guilds/{guild_id}/raids/{raid_id}/encounters/{id}         remove encounter
PATCH  /guilds/{guild_id}/raids/{raid_id}/encounters/{id}         enable / disable
POST   /guilds/{guild_id}/raids/{raid_id}/signups                 add signup
DELETE /guilds/{guild_id}/raids/{raid_id}/signups/{raider_id}     remove signup
PATCH  /guilds/{guild_id}/raids/{raid_id}/signups/{raider_id}     change signup status
POST   /guilds/{guild_id}/raids/{raid_id}/signups/{raider_id}/select
POST   /guilds/{guild_id}/raids/{raid_id}/signups/{raider_id}/deselect
POST   /guilds/{guild_id}/raids/{raid_id}/start | complete | cancel
GET    /guilds/{guild_id}/raids/{raid_id}/composition

Handlers are thin: build the use case, run it, unwrap. An Err re-raises its
RaidLootError, which the app-level handler turns into the error envelope.
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from raidloot.core.config import settings
from raidloot.db.base import get_db
from raidloot.repositories.attendance import SqlAttendanceRepository
from raidloot.repositories.raids import SqlRaidRepository
from raidloot.schemas.common import ERROR_RESPONSES
from raidloot.schemas.raids import (
    CompositionResponse,
    EncounterRequest,
    EncounterToggleRequest,
    RaidListResponse,
    RaidResponse,
    ScheduleRaidRequest,
    SignupRequest,
    SignupStatusRequest,
)
from raidloot.services.raids import (
    AddEncounterCommand,
    AddSignupCommand,
    RaidUseCases,
    ScheduleRaidCommand,
)
from raidloot.services.scheduling import RaidComposition

router = APIRouter(prefix="/guilds/{guild_id}/raids", tags=["raids"], responses=ERROR_RESPONSES)


def get_raid_use_cases(db: Session = Depends(get_db)) -> RaidUseCases:
    return RaidUseCases(
        raids=SqlRaidRepository(db),
        attendance=SqlAttendanceRepository(db),
    )


def _target_composition() -> RaidComposition:
    return RaidComposition(
        tanks=settings.TARGET_TANKS,
        healers=settings.TARGET_HEALERS,
        dps=settings.TARGET_DPS,
    )


# ---------------------------------------------------------------------------
# Raids
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=RaidResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a raid",
)
def schedule_raid(
    guild_id: str,
    body: ScheduleRaidRequest,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    """
    Rejected with `SCHEDULE_REJECTED` when the date is in the past or the
    guild already has a scheduled or running raid on that date.
    """
    raid = raids.schedule(ScheduleRaidCommand(guild_id=guild_id, **body.model_dump())).unwrap()
    return RaidResponse.from_domain(raid)


@router.get("", response_model=RaidListResponse, summary="List raids on a date")
def list_raids(
    guild_id: str,
    day: date = Query(description="ISO date.", examples=["2026-11-05"]),
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    items = raids.list_on_date(guild_id, day).unwrap()
    return RaidListResponse(total=len(items), items=[RaidResponse.from_domain(r) for r in items])


@router.get("/{raid_id}", response_model=RaidResponse, summary="Get a raid")
def get_raid(guild_id: str, raid_id: str, raids: RaidUseCases = Depends(get_raid_use_cases)):
    return RaidResponse.from_domain(raids.get(guild_id, raid_id).unwrap())


@router.get(
    "/{raid_id}/composition",
    response_model=CompositionResponse,
    summary="Role composition of confirmed signups",
)
def get_composition(guild_id: str, raid_id: str, raids: RaidUseCases = Depends(get_raid_use_cases)):
    report = raids.composition(
        guild_id,
        raid_id,
        target=_target_composition(),
        minimum_signups=settings.MIN_CONFIRMED_SIGNUPS,
    ).unwrap()
    return CompositionResponse.from_report(report)


# ---------------------------------------------------------------------------
# Encounters
# ---------------------------------------------------------------------------

@router.post("/{raid_id}/encounters", response_model=RaidResponse, summary="Add an encounter")
def add_encounter(
    guild_id: str,
    raid_id: str,
    body: EncounterRequest,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    cmd = AddEncounterCommand(guild_id=guild_id, raid_id=raid_id, **body.model_dump())
    return RaidResponse.from_domain(raids.add_encounter(cmd).unwrap())


@router.delete(
    "/{raid_id}/encounters/{encounter_id}",
    response_model=RaidResponse,
    summary="Remove an encounter",
)
def remove_encounter(
    guild_id: str,
    raid_id: str,
    encounter_id: str,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    return RaidResponse.from_domain(raids.remove_encounter(guild_id, raid_id, encounter_id).unwrap())


@router.patch(
    "/{raid_id}/encounters/{encounter_id}",
    response_model=RaidResponse,
    summary="Enable or disable an encounter",
)
def toggle_encounter(
    guild_id: str,
    raid_id: str,
    encounter_id: str,
    body: EncounterToggleRequest,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    result = raids.set_encounter_enabled(guild_id, raid_id, encounter_id, body.enabled)
    return RaidResponse.from_domain(result.unwrap())


# ---------------------------------------------------------------------------
# Signups
# ---------------------------------------------------------------------------

@router.post("/{raid_id}/signups", response_model=RaidResponse, summary="Sign up a raider")
def add_signup(
    guild_id: str,
    raid_id: str,
    body: SignupRequest,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    cmd = AddSignupCommand(guild_id=guild_id, raid_id=raid_id, **body.model_dump())
    return RaidResponse.from_domain(raids.add_signup(cmd).unwrap())


@router.delete(
    "/{raid_id}/signups/{raider_id}",
    response_model=RaidResponse,
    summary="Remove a signup",
)
def remove_signup(
    guild_id: str,
    raid_id: str,
    raider_id: str,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    return RaidResponse.from_domain(raids.remove_signup(guild_id, raid_id, raider_id).unwrap())


@router.patch(
    "/{raid_id}/signups/{raider_id}",
    response_model=RaidResponse,
    summary="Change a signup's status",
)
def update_signup_status(
    guild_id: str,
    raid_id: str,
    raider_id: str,
    body: SignupStatusRequest,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    result = raids.update_signup_status(guild_id, raid_id, raider_id, body.status)
    return RaidResponse.from_domain(result.unwrap())


@router.post(
    "/{raid_id}/signups/{raider_id}/select",
    response_model=RaidResponse,
    summary="Select a confirmed signup for the roster",
)
def select_signup(
    guild_id: str,
    raid_id: str,
    raider_id: str,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    return RaidResponse.from_domain(raids.select_signup(guild_id, raid_id, raider_id).unwrap())


@router.post(
    "/{raid_id}/signups/{raider_id}/deselect",
    response_model=RaidResponse,
    summary="Drop a signup from the roster",
)
def deselect_signup(
    guild_id: str,
    raid_id: str,
    raider_id: str,
    raids: RaidUseCases = Depends(get_raid_use_cases),
):
    return RaidResponse.from_domain(raids.deselect_signup(guild_id, raid_id, raider_id).unwrap())


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

@router.post("/{raid_id}/start", response_model=RaidResponse, summary="Start a scheduled raid")
def start_raid(guild_id: str, raid_id: str, raids: RaidUseCases = Depends(get_raid_use_cases)):
    return RaidResponse.from_domain(raids.start(guild_id, raid_id).unwrap())


@router.post(
    "/{raid_id}/complete",
    response_model=RaidResponse,
    summary="Complete a running raid and record attendance",
)
def complete_raid(guild_id: str, raid_id: str, raids: RaidUseCases = Depends(get_raid_use_cases)):
    return RaidResponse.from_domain(raids.complete(guild_id, raid_id).unwrap())


@router.post("/{raid_id}/cancel", response_model=RaidResponse, summary="Cancel a scheduled raid")
def cancel_raid(guild_id: str, raid_id: str, raids: RaidUseCases = Depends(get_raid_use_cases)):
    return RaidResponse.from_domain(raids.cancel(guild_id, raid_id).unwrap())
