"""
FLPS report: ranked loot council view for one item.

For every candidate:
  1. run the scoring pipeline (services.scoring.score_candidate)
  2. annotate eligibility: active bans, attendance / activity thresholds
  3. attach the advisory behavioral score and the effective score
     (final score compounded once per award inside the recency window)

Rows are sorted by final score descending. Ties keep input order
(Python's sort is stable). Eligibility and behavior are annotations only;
they never change a score or a row's position.

Public API
----------
build_report(guild_id, item_id, candidates, config, as_of,
             effective_decay, recency_threshold_days) -> FlpsReport
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from raidloot.domain.loot import BehavioralAction, LootAward, LootBan
from raidloot.domain.weights import ScoringConfiguration
from raidloot.services.eligibility import behavioral_score, effective_score, evaluate_eligibility
from raidloot.services.scoring import CandidateInputs, FlpsBreakdown, score_candidate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReportCandidate:
    inputs: CandidateInputs
    recent_awards: tuple[LootAward, ...] = ()
    bans: tuple[LootBan, ...] = ()
    behavioral_actions: tuple[BehavioralAction, ...] = ()


@dataclass(frozen=True)
class ReportRow:
    rank: int
    raider_id: str
    name: Optional[str]
    breakdown: FlpsBreakdown
    eligible: bool
    reasons: list[str] = field(default_factory=list)
    behavioral_score: float = 1.0
    effective_flps: float = 0.0

    @property
    def flps(self) -> float:
        return self.breakdown.flps.value


@dataclass(frozen=True)
class FlpsReport:
    guild_id: str
    item_id: str
    generated_at: datetime
    rows: list[ReportRow]

    @property
    def eligible_rows(self) -> list[ReportRow]:
        return [row for row in self.rows if row.eligible]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def _awards_since(awards: Iterable[LootAward], start: datetime, as_of: datetime) -> list[LootAward]:
    return [a for a in awards if a.is_active() and start < a.awarded_at <= as_of]


def build_report(
    guild_id: str,
    item_id: str,
    candidates: Iterable[ReportCandidate],
    config: ScoringConfiguration,
    as_of: datetime,
    effective_decay: float = 0.9,
    recency_threshold_days: int = 14,
) -> FlpsReport:
    window_start = as_of - timedelta(days=recency_threshold_days)
    scored = []
    for candidate in candidates:
        breakdown = score_candidate(candidate.inputs, config, candidate.recent_awards, as_of)
        verdict = evaluate_eligibility(
            candidate.inputs.raider_id,
            breakdown.acs,
            breakdown.mas,
            config.thresholds,
            bans=candidate.bans,
            as_of=as_of,
        )
        scored.append((candidate, breakdown, verdict))

    scored.sort(key=lambda item: item[1].flps.value, reverse=True)

    rows = [
        ReportRow(
            rank=index + 1,
            raider_id=candidate.inputs.raider_id,
            name=candidate.inputs.name,
            breakdown=breakdown,
            eligible=verdict.eligible,
            reasons=list(verdict.reasons),
            behavioral_score=behavioral_score(candidate.behavioral_actions, as_of),
            effective_flps=effective_score(
                breakdown.flps,
                _awards_since(candidate.recent_awards, window_start, as_of),
                decay=effective_decay,
            ).value,
        )
        for index, (candidate, breakdown, verdict) in enumerate(scored)
    ]

    logger.info(
        "FLPS report for guild %s item %s: %d candidates, %d eligible",
        guild_id, item_id, len(rows), sum(1 for r in rows if r.eligible),
    )
    return FlpsReport(guild_id=guild_id, item_id=item_id, generated_at=as_of, rows=rows)
