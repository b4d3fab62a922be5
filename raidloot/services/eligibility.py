"""
Eligibility & ban policy.

Answers "may this raider receive loot right now?" and the related recency
questions. Eligibility is advisory metadata: nothing here ever changes a
score.

Rules
-----
  1. BANNED      an active LootBan for the raider blocks loot
  2. ATTENDANCE  ACS below the guild's attendance threshold
  3. ACTIVITY    MAS at or below the guild's activity threshold

Public API
----------
is_eligible(raider_id, bans, as_of)                  -> bool
evaluate_eligibility(raider_id, acs, mas, thresholds, bans, as_of) -> EligibilityVerdict
should_apply_recency_decay(awards, threshold_days, as_of) -> bool
can_revoke_award(award, max_revocation_days, as_of)  -> bool
effective_score(base, recent_awards, decay)          -> FlpsScore
behavioral_score(actions, as_of)                     -> float
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from raidloot.domain.loot import BehavioralAction, BehavioralActionType, LootAward, LootBan
from raidloot.domain.scores import (
    AttendanceCommitmentScore,
    FlpsScore,
    MechanicalAdherenceScore,
    clamp,
)
from raidloot.domain.weights import EligibilityThresholds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityVerdict:
    eligible: bool
    reasons: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Bans
# ---------------------------------------------------------------------------

def active_bans_for(raider_id: str, bans: Iterable[LootBan], as_of: datetime) -> list[LootBan]:
    return [b for b in bans if b.raider_id == raider_id and b.is_active(as_of)]


def is_eligible(raider_id: str, bans: Iterable[LootBan], as_of: datetime) -> bool:
    """False iff any ban for the raider is still active at as_of."""
    return not active_bans_for(raider_id, bans, as_of)


# ---------------------------------------------------------------------------
# Combined verdict
# ---------------------------------------------------------------------------

def evaluate_eligibility(
    raider_id: str,
    acs: AttendanceCommitmentScore,
    mas: MechanicalAdherenceScore,
    thresholds: EligibilityThresholds,
    bans: Iterable[LootBan] = (),
    as_of: Optional[datetime] = None,
) -> EligibilityVerdict:
    reasons: list[str] = []

    if as_of is not None:
        for ban in active_bans_for(raider_id, bans, as_of):
            until = "permanently" if ban.is_permanent else f"until {ban.expires_at.isoformat()}"
            reasons.append(f"Banned from loot {until}: {ban.reason}")

    if acs.value < thresholds.attendance:
        reasons.append(
            f"Attendance score {acs.value:.2f} is below the guild threshold "
            f"of {thresholds.attendance:.2f}"
        )
    if mas.value <= thresholds.activity:
        reasons.append(
            f"Mechanical score {mas.value:.2f} is at or below the activity "
            f"threshold of {thresholds.activity:.2f}"
        )

    if reasons:
        logger.debug("raider %s ineligible: %s", raider_id, "; ".join(reasons))
    return EligibilityVerdict(eligible=not reasons, reasons=reasons)


# ---------------------------------------------------------------------------
# Awards
# ---------------------------------------------------------------------------

def should_apply_recency_decay(
    recent_awards: Iterable[LootAward],
    threshold_days: int,
    as_of: datetime,
) -> bool:
    """True iff any award happened within threshold_days before as_of."""
    cutoff = as_of - timedelta(days=threshold_days)
    return any(award.awarded_at > cutoff for award in recent_awards)


def can_revoke_award(award: LootAward, max_revocation_days: int, as_of: datetime) -> bool:
    """Only active awards granted less than max_revocation_days ago."""
    if not award.is_active():
        return False
    deadline = award.awarded_at + timedelta(days=max_revocation_days)
    return as_of < deadline


def effective_score(
    base: FlpsScore,
    recent_awards: Iterable[LootAward],
    decay: float = 0.9,
) -> FlpsScore:
    """Compound `decay` once per recent award."""
    count = sum(1 for _ in recent_awards)
    return FlpsScore.clamped(base.value * decay ** count)


# ---------------------------------------------------------------------------
# Behavior
# ---------------------------------------------------------------------------

def behavioral_score(actions: Iterable[BehavioralAction], as_of: datetime) -> float:
    """1.0 minus active deductions plus active restorations, clamped."""
    score = 1.0
    for action in actions:
        if not action.is_active(as_of):
            continue
        if action.action_type == BehavioralActionType.deduction:
            score -= action.amount
        elif action.action_type == BehavioralActionType.restoration:
            score += action.amount
    return clamp(score, 0.0, 1.0)
