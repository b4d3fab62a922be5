"""
FLPS router.

POST /guilds/{guild_id}/flps/report    score and rank candidates for one item

The request supplies raw performance inputs per candidate. The guild's
stored configuration, loot bans and award history are read from the
database, so a report always reflects current council decisions.
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from raidloot.core.config import settings
from raidloot.db.base import as_utc, get_db
from raidloot.domain.loot import BehavioralAction, BehavioralActionType
from raidloot.domain.roles import Role
from raidloot.repositories.config import SqlConfigurationProvider
from raidloot.repositories.loot import SqlLootRepository
from raidloot.schemas.common import ERROR_RESPONSES
from raidloot.schemas.flps import CandidateIn, FlpsReportRequest, FlpsReportResponse
from raidloot.services.configuration import load_configuration
from raidloot.services.report import ReportCandidate, build_report
from raidloot.services.scoring import CandidateInputs

router = APIRouter(prefix="/guilds/{guild_id}/flps", tags=["flps"], responses=ERROR_RESPONSES)


def _candidate(guild_id: str, c: CandidateIn, loot: SqlLootRepository) -> ReportCandidate:
    inputs = CandidateInputs(
        raider_id=c.raider_id,
        name=c.name,
        role=Role.parse(c.role),
        attendance=c.attendance,
        deaths_per_attempt=c.deaths_per_attempt,
        spec_avg_deaths_per_attempt=c.spec_avg_deaths_per_attempt,
        avoidable_damage_pct=c.avoidable_damage_pct,
        spec_avg_avoidable_damage_pct=c.spec_avg_avoidable_damage_pct,
        vault_slots=c.vault_slots,
        crest_usage_ratio=c.crest_usage_ratio,
        heroic_kills=c.heroic_kills,
        simulated_gain=c.simulated_gain,
        spec_baseline_output=c.spec_baseline_output,
        tier_pieces_owned=c.tier_pieces_owned,
    )
    actions = tuple(
        BehavioralAction(
            raider_id=c.raider_id,
            guild_id=guild_id,
            action_type=BehavioralActionType.parse(a.action_type),
            amount=a.amount,
            reason=a.reason,
            applied_at=as_utc(a.applied_at),
            expires_at=as_utc(a.expires_at),
        )
        for a in c.behavioral_actions
    )
    return ReportCandidate(
        inputs=inputs,
        recent_awards=tuple(loot.find_awards(guild_id, c.raider_id)),
        bans=tuple(loot.find_bans(guild_id, c.raider_id)),
        behavioral_actions=actions,
    )


@router.post("/report", response_model=FlpsReportResponse, summary="Ranked FLPS report for an item")
def flps_report(guild_id: str, body: FlpsReportRequest, db: Session = Depends(get_db)):
    """
    Rows are sorted by `flps` descending; ties keep request order.
    `eligible`, `reasons`, `behavioral_score` and `effective_flps` are
    advisory and never change a score or a rank.
    """
    as_of = as_utc(body.as_of) or datetime.now(tz=timezone.utc)
    config = load_configuration(SqlConfigurationProvider(db), guild_id)
    loot = SqlLootRepository(db)
    candidates = [_candidate(guild_id, c, loot) for c in body.candidates]
    report = build_report(
        guild_id,
        body.item_id,
        candidates,
        config,
        as_of,
        effective_decay=settings.EFFECTIVE_SCORE_DECAY,
        recency_threshold_days=settings.RECENCY_THRESHOLD_DAYS,
    )
    return FlpsReportResponse.from_report(report)
