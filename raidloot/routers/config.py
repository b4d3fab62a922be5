"""
Guild scoring configuration router.

GET /guilds/{guild_id}/config   stored configuration, or the defaults
PUT /guilds/{guild_id}/config   replace the whole configuration
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from raidloot.db.base import get_db
from raidloot.repositories.config import SqlConfigurationProvider
from raidloot.schemas.common import ERROR_RESPONSES
from raidloot.schemas.config import ScoringConfigurationBody, ScoringConfigurationResponse
from raidloot.domain.weights import ScoringConfiguration
from raidloot.services.configuration import (
    UpdateConfigurationCommand,
    load_configuration,
    update_configuration,
)

router = APIRouter(prefix="/guilds/{guild_id}/config", tags=["config"], responses=ERROR_RESPONSES)


def _to_response(config: ScoringConfiguration) -> ScoringConfigurationResponse:
    body = ScoringConfigurationBody.from_domain(config)
    return ScoringConfigurationResponse(guild_id=config.guild_id, **body.model_dump())


@router.get("", response_model=ScoringConfigurationResponse, summary="Get scoring configuration")
def get_config(guild_id: str, db: Session = Depends(get_db)):
    return _to_response(load_configuration(SqlConfigurationProvider(db), guild_id))


@router.put("", response_model=ScoringConfigurationResponse, summary="Replace scoring configuration")
def put_config(guild_id: str, body: ScoringConfigurationBody, db: Session = Depends(get_db)):
    """
    Every section is validated before anything is stored. Weight sets must
    be non-negative with a positive sum; thresholds and recency penalties
    must lie in [0, 1]; role multipliers in [0, 2].
    """
    cmd = UpdateConfigurationCommand(
        guild_id=guild_id,
        merit_weights=body.merit_weights.model_dump(),
        priority_weights=body.priority_weights.model_dump(),
        role_multipliers=body.role_multipliers.model_dump(),
        thresholds=body.thresholds.model_dump(),
        recency=body.recency.model_dump(),
    )
    return _to_response(update_configuration(SqlConfigurationProvider(db), cmd).unwrap())
