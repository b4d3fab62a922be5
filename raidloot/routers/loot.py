"""
Loot administration router.

POST /guilds/{guild_id}/loot/awards                       record an award
GET  /guilds/{guild_id}/loot/awards?raider_id=...         award history
POST /guilds/{guild_id}/loot/awards/{award_id}/revoke     revoke within the window
POST /guilds/{guild_id}/loot/bans                         ban a raider from loot
GET  /guilds/{guild_id}/loot/bans?raider_id=...           active bans
POST /guilds/{guild_id}/loot/bans/{ban_id}/lift           lift a ban
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from raidloot.core.config import settings
from raidloot.db.base import get_db
from raidloot.repositories.loot import SqlLootRepository
from raidloot.schemas.common import ERROR_RESPONSES
from raidloot.schemas.loot import (
    AwardListResponse,
    AwardRequest,
    AwardResponse,
    BanListResponse,
    BanRequest,
    BanResponse,
    RevokeRequest,
)
from raidloot.services.loot import AwardLootCommand, BanRaiderCommand, LootUseCases

router = APIRouter(prefix="/guilds/{guild_id}/loot", tags=["loot"], responses=ERROR_RESPONSES)


def get_loot_use_cases(db: Session = Depends(get_db)) -> LootUseCases:
    return LootUseCases(
        loot=SqlLootRepository(db),
        max_revocation_days=settings.MAX_REVOCATION_DAYS,
        recency_threshold_days=settings.RECENCY_THRESHOLD_DAYS,
    )


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


# ---------------------------------------------------------------------------
# Awards
# ---------------------------------------------------------------------------

@router.post(
    "/awards",
    response_model=AwardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a loot award",
)
def award_loot(guild_id: str, body: AwardRequest, loot: LootUseCases = Depends(get_loot_use_cases)):
    """Rejected with `LOOT_BAN_ACTIVE` while the raider has an active ban."""
    cmd = AwardLootCommand(guild_id=guild_id, **body.model_dump())
    return AwardResponse.from_domain(loot.award(cmd).unwrap())


@router.get("/awards", response_model=AwardListResponse, summary="Award history of a raider")
def list_awards(
    guild_id: str,
    raider_id: str = Query(min_length=1),
    loot: LootUseCases = Depends(get_loot_use_cases),
):
    awards = loot.award_history(guild_id, raider_id).unwrap()
    return AwardListResponse(
        total=len(awards),
        recency_decay_due=loot.needs_recency_decay(guild_id, raider_id).unwrap(),
        items=[AwardResponse.from_domain(a) for a in awards],
    )


@router.post("/awards/{award_id}/revoke", response_model=AwardResponse, summary="Revoke an award")
def revoke_award(
    guild_id: str,
    award_id: str,
    body: RevokeRequest,
    loot: LootUseCases = Depends(get_loot_use_cases),
):
    return AwardResponse.from_domain(loot.revoke(guild_id, award_id, body.reason).unwrap())


# ---------------------------------------------------------------------------
# Bans
# ---------------------------------------------------------------------------

@router.post(
    "/bans",
    response_model=BanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Ban a raider from loot",
)
def ban_raider(guild_id: str, body: BanRequest, loot: LootUseCases = Depends(get_loot_use_cases)):
    cmd = BanRaiderCommand(
        guild_id=guild_id,
        raider_id=body.raider_id,
        reason=body.reason,
        expires_at=body.expires_at,
    )
    return BanResponse.from_domain(loot.ban(cmd).unwrap(), _now())


@router.get("/bans", response_model=BanListResponse, summary="Active bans of a raider")
def list_active_bans(
    guild_id: str,
    raider_id: str = Query(min_length=1),
    loot: LootUseCases = Depends(get_loot_use_cases),
):
    now = _now()
    bans = loot.active_bans(guild_id, raider_id).unwrap()
    return BanListResponse(total=len(bans), items=[BanResponse.from_domain(b, now) for b in bans])


@router.post("/bans/{ban_id}/lift", response_model=BanResponse, summary="Lift a loot ban")
def lift_ban(guild_id: str, ban_id: str, loot: LootUseCases = Depends(get_loot_use_cases)):
    return BanResponse.from_domain(loot.lift_ban(guild_id, ban_id).unwrap(), _now())
