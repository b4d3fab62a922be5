"""
Scoring service: Final Loot Priority Score (FLPS).

    FLPS = RMS × IPI × RDF

  RMS  Raider Merit Score      attendance, mechanics, preparation
  IPI  Item Priority Index     upgrade value, tier bonus, role multiplier
  RDF  Recency Decay Factor    suppression after a recent award

Every function here is pure: no I/O, no clock, no randomness. The same
inputs and weights always produce bit-identical results, because each
composite sums its terms in a fixed order.

Public API
----------
attendance_commitment_score(attendance_fraction)        -> AttendanceCommitmentScore
mechanical_adherence_score(dpa, avg_dpa, adt, avg_adt)  -> MechanicalAdherenceScore
external_preparation_score(vault, crest_ratio, heroic)  -> ExternalPreparationScore
merit_score(acs, mas, eps, weights)                     -> RaiderMeritScore
upgrade_value(simulated_gain, spec_baseline)            -> UpgradeValue
tier_bonus(tier_pieces_owned)                           -> TierBonus
role_multiplier(role, multipliers)                      -> RoleMultiplier
item_priority_index(uv, tb, rm, weights)                -> ItemPriorityIndex
recency_decay_from_awards(awards, params, as_of)        -> RecencyDecayFactor
final_priority_score(rms, ipi, rdf)                     -> FlpsScore
score_candidate(inputs, config, recent_awards, as_of)   -> FlpsBreakdown
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from raidloot.domain.loot import LootAward
from raidloot.domain.roles import Role
from raidloot.domain.scores import (
    AttendanceCommitmentScore,
    ExternalPreparationScore,
    FlpsScore,
    ItemPriorityIndex,
    MechanicalAdherenceScore,
    RaiderMeritScore,
    RecencyDecayFactor,
    RoleMultiplier,
    TierBonus,
    UpgradeValue,
    clamp,
)
from raidloot.domain.weights import (
    MeritWeights,
    PriorityWeights,
    RecencyParams,
    RoleMultipliers,
    ScoringConfiguration,
)


# Attendance step thresholds (fractions, 1.0 == 100 %)
FULL_ATTENDANCE = 1.0
COMMITTED_ATTENDANCE = 0.8
COMMITTED_ATTENDANCE_SCORE = 0.9

# Mechanical adherence
MECHANICAL_FAILURE_RATIO = 1.5
MECHANICAL_PENALTY_PER_RATIO = 0.25

# External preparation
VAULT_SLOT_CAP = 3
HEROIC_KILL_CAP = 6
VAULT_WEIGHT = 0.5
CREST_WEIGHT = 0.3
HEROIC_WEIGHT = 0.2

DEFAULT_ROLE_MULTIPLIERS = RoleMultipliers()
SECONDS_PER_WEEK = 7 * 24 * 60 * 60


# ---------------------------------------------------------------------------
# Inputs / outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CandidateInputs:
    """Raw per-(raider, item) inputs gathered by the caller."""
    raider_id: str
    role: Role
    attendance: float               # fraction attended, 0.0 – 1.0
    deaths_per_attempt: float
    spec_avg_deaths_per_attempt: float
    avoidable_damage_pct: float
    spec_avg_avoidable_damage_pct: float
    vault_slots: int
    crest_usage_ratio: float
    heroic_kills: int
    simulated_gain: float
    spec_baseline_output: float
    tier_pieces_owned: int
    name: Optional[str] = None


@dataclass(frozen=True)
class FlpsBreakdown:
    """Every intermediate score of one FLPS calculation."""
    raider_id: str
    role: Role
    acs: AttendanceCommitmentScore
    mas: MechanicalAdherenceScore
    eps: ExternalPreparationScore
    rms: RaiderMeritScore
    uv: UpgradeValue
    tb: TierBonus
    rm: RoleMultiplier
    ipi: ItemPriorityIndex
    rdf: RecencyDecayFactor
    flps: FlpsScore


# ---------------------------------------------------------------------------
# Merit components
# ---------------------------------------------------------------------------

def attendance_commitment_score(attendance: float) -> AttendanceCommitmentScore:
    """
    Step function of the attendance fraction:
      ≥ 100 %        → 1.0
      80 % – <100 %  → 0.9
      < 80 %         → 0.0  (hard ineligibility signal)
    """
    if attendance >= FULL_ATTENDANCE:
        return AttendanceCommitmentScore.of(1.0)
    if attendance >= COMMITTED_ATTENDANCE:
        return AttendanceCommitmentScore.of(COMMITTED_ATTENDANCE_SCORE)
    return AttendanceCommitmentScore.of(0.0)


def _ratio(value: float, baseline: float) -> float:
    return 0.0 if baseline == 0.0 else value / baseline


def mechanical_adherence_score(
    deaths_per_attempt: float,
    spec_avg_deaths_per_attempt: float,
    avoidable_damage_pct: float,
    spec_avg_avoidable_damage_pct: float,
) -> MechanicalAdherenceScore:
    """
    Compare deaths-per-attempt and avoidable damage with the averages for the raider's specialization.
    Either ratio above 1.5× the baseline is an automatic 0.0.
    """
    dpa_ratio = _ratio(deaths_per_attempt, spec_avg_deaths_per_attempt)
    adt_ratio = _ratio(avoidable_damage_pct, spec_avg_avoidable_damage_pct)

    if dpa_ratio > MECHANICAL_FAILURE_RATIO or adt_ratio > MECHANICAL_FAILURE_RATIO:
        return MechanicalAdherenceScore.minimum()

    penalty = (
        MECHANICAL_PENALTY_PER_RATIO * max(0.0, dpa_ratio - 1.0)
        + MECHANICAL_PENALTY_PER_RATIO * max(0.0, adt_ratio - 1.0)
    )
    return MechanicalAdherenceScore.clamped(1.0 - penalty)


def external_preparation_score(
    vault_slots: int,
    crest_usage_ratio: float,
    heroic_kills: int,
) -> ExternalPreparationScore:
    vault = min(1.0, max(0, vault_slots) / VAULT_SLOT_CAP)
    crest = clamp(crest_usage_ratio, 0.0, 1.0)
    heroic = min(1.0, max(0, heroic_kills) / HEROIC_KILL_CAP)
    eps = vault * VAULT_WEIGHT + crest * CREST_WEIGHT + heroic * HEROIC_WEIGHT
    return ExternalPreparationScore.clamped(eps)


def merit_score(
    acs: AttendanceCommitmentScore,
    mas: MechanicalAdherenceScore,
    eps: ExternalPreparationScore,
    weights: MeritWeights,
) -> RaiderMeritScore:
    weighted = (
        acs.value * weights.attendance
        + mas.value * weights.mechanical
        + eps.value * weights.preparation
    )
    return RaiderMeritScore.clamped(weighted / weights.total)


# ---------------------------------------------------------------------------
# Item priority components
# ---------------------------------------------------------------------------

def upgrade_value(simulated_gain: float, spec_baseline_output: float) -> UpgradeValue:
    if spec_baseline_output <= 0.0:
        return UpgradeValue.minimum()
    return UpgradeValue.clamped(simulated_gain / spec_baseline_output)


def tier_bonus(tier_pieces_owned: int) -> TierBonus:
    """0–1 pieces → 1.2, 2–3 → 1.1, 4+ → 1.0."""
    if tier_pieces_owned <= 1:
        return TierBonus.of(1.2)
    if tier_pieces_owned <= 3:
        return TierBonus.of(1.1)
    return TierBonus.of(1.0)


def role_multiplier(
    role: Role,
    multipliers: RoleMultipliers = DEFAULT_ROLE_MULTIPLIERS,
) -> RoleMultiplier:
    return RoleMultiplier.of(multipliers.for_role(role))


def item_priority_index(
    uv: UpgradeValue,
    tb: TierBonus,
    rm: RoleMultiplier,
    weights: PriorityWeights,
) -> ItemPriorityIndex:
    weighted = (
        uv.value * weights.upgrade_value
        + tb.value * weights.tier_bonus
        + rm.value * weights.role_multiplier
    )
    return ItemPriorityIndex.clamped(weighted / weights.total)


# ---------------------------------------------------------------------------
# Recency decay
# ---------------------------------------------------------------------------

def weeks_between(earlier: datetime, later: datetime) -> int:
    """Whole weeks elapsed, never negative."""
    seconds = (later - earlier).total_seconds()
    return max(0, int(seconds // SECONDS_PER_WEEK))


def recency_decay_from_awards(
    awards: Iterable[LootAward],
    params: RecencyParams,
    as_of: datetime,
) -> RecencyDecayFactor:
    """
    Decay driven by the most recent active award; its tier picks the base
    penalty. No active award history means no penalty.
    """
    active = [a for a in awards if a.is_active() and a.awarded_at <= as_of]
    if not active:
        return RecencyDecayFactor.no_penalty()

    latest = max(active, key=lambda a: a.awarded_at)
    return RecencyDecayFactor.from_weeks_since(
        weeks_between(latest.awarded_at, as_of),
        base_penalty=params.base_penalty(latest.tier),
        recovery_rate=params.recovery_rate,
    )


# ---------------------------------------------------------------------------
# Final composition
# ---------------------------------------------------------------------------

def final_priority_score(
    rms: RaiderMeritScore,
    ipi: ItemPriorityIndex,
    rdf: RecencyDecayFactor,
) -> FlpsScore:
    """Multiplicative: a zero in any factor forces a zero score."""
    return FlpsScore.clamped(rms.value * ipi.value * rdf.value)


def score_candidate(
    inputs: CandidateInputs,
    config: ScoringConfiguration,
    recent_awards: Iterable[LootAward],
    as_of: datetime,
) -> FlpsBreakdown:
    """Run the full pipeline for one (raider, item) pair."""
    acs = attendance_commitment_score(inputs.attendance)
    mas = mechanical_adherence_score(
        inputs.deaths_per_attempt,
        inputs.spec_avg_deaths_per_attempt,
        inputs.avoidable_damage_pct,
        inputs.spec_avg_avoidable_damage_pct,
    )
    eps = external_preparation_score(
        inputs.vault_slots, inputs.crest_usage_ratio, inputs.heroic_kills
    )
    rms = merit_score(acs, mas, eps, config.merit_weights)

    uv = upgrade_value(inputs.simulated_gain, inputs.spec_baseline_output)
    tb = tier_bonus(inputs.tier_pieces_owned)
    rm = role_multiplier(inputs.role, config.role_multipliers)
    ipi = item_priority_index(uv, tb, rm, config.priority_weights)

    rdf = recency_decay_from_awards(recent_awards, config.recency, as_of)

    return FlpsBreakdown(
        raider_id=inputs.raider_id,
        role=inputs.role,
        acs=acs,
        mas=mas,
        eps=eps,
        rms=rms,
        uv=uv,
        tb=tb,
        rm=rm,
        ipi=ipi,
        rdf=rdf,
        flps=final_priority_score(rms, ipi, rdf),
    )
