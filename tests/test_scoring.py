"""
Tests for the FLPS scoring pipeline.

Covers each component formula, the multiplicative final composition, the
tiered recency decay driven by award history, and determinism.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from raidloot.domain.loot import LootAward, LootTier
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
)
from raidloot.domain.weights import MeritWeights, PriorityWeights, RecencyParams, ScoringConfiguration
from raidloot.services.scoring import (
    CandidateInputs,
    attendance_commitment_score,
    external_preparation_score,
    final_priority_score,
    item_priority_index,
    mechanical_adherence_score,
    merit_score,
    recency_decay_from_awards,
    role_multiplier,
    score_candidate,
    tier_bonus,
    upgrade_value,
    weeks_between,
)

_NOW = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)


def _award(awarded_at: datetime, tier: LootTier = LootTier.A, award_id: str = "a1") -> LootAward:
    return LootAward(
        id=award_id,
        item_id="item-1",
        raider_id="r1",
        guild_id="g1",
        awarded_at=awarded_at,
        flps_score=FlpsScore.of(0.7),
        tier=tier,
    )


def _inputs(**overrides) -> CandidateInputs:
    base = dict(
        raider_id="r1",
        role=Role.dps,
        attendance=1.0,
        deaths_per_attempt=0.5,
        spec_avg_deaths_per_attempt=0.5,
        avoidable_damage_pct=10.0,
        spec_avg_avoidable_damage_pct=10.0,
        vault_slots=3,
        crest_usage_ratio=1.0,
        heroic_kills=6,
        simulated_gain=5000.0,
        spec_baseline_output=100000.0,
        tier_pieces_owned=0,
    )
    base.update(overrides)
    return CandidateInputs(**base)


# ---------------------------------------------------------------------------
# Merit components
# ---------------------------------------------------------------------------

class TestAttendanceCommitment:
    @pytest.mark.parametrize("attendance, expected", [
        (1.0, 1.0),
        (0.95, 0.9),
        (0.8, 0.9),
        (0.79, 0.0),
        (0.5, 0.0),
        (0.0, 0.0),
    ])
    def test_step_function(self, attendance, expected):
        assert attendance_commitment_score(attendance).value == expected


class TestMechanicalAdherence:
    def test_at_spec_average_is_perfect(self):
        assert mechanical_adherence_score(0.5, 0.5, 10.0, 10.0).value == 1.0

    def test_better_than_average_is_perfect(self):
        assert mechanical_adherence_score(0.1, 0.5, 2.0, 10.0).value == 1.0

    def test_ratio_above_threshold_is_zero_regardless_of_damage(self):
        # deaths ratio 4.0 > 1.5
        assert mechanical_adherence_score(2.0, 0.5, 0.0, 10.0).value == 0.0
        assert mechanical_adherence_score(2.0, 0.5, 1.0, 10.0).value == 0.0

    def test_avoidable_damage_ratio_above_threshold_is_zero(self):
        assert mechanical_adherence_score(0.5, 0.5, 20.0, 10.0).value == 0.0

    def test_partial_penalty(self):
        # both ratios 1.2 → 1 - 0.25*0.2 - 0.25*0.2 = 0.9
        assert mechanical_adherence_score(0.6, 0.5, 12.0, 10.0).value == pytest.approx(0.9)

    def test_zero_spec_average_means_no_penalty(self):
        assert mechanical_adherence_score(3.0, 0.0, 5.0, 0.0).value == 1.0


class TestExternalPreparation:
    def test_everything_maxed(self):
        assert external_preparation_score(3, 1.0, 6).value == pytest.approx(1.0)

    def test_nothing_done(self):
        assert external_preparation_score(0, 0.0, 0).value == 0.0

    def test_weighted_mix(self):
        # vault 1/3*0.5 + crest 0.5*0.3 + heroic 3/6*0.2
        expected = (1 / 3) * 0.5 + 0.5 * 0.3 + 0.5 * 0.2
        assert external_preparation_score(1, 0.5, 3).value == pytest.approx(expected)

    def test_inputs_above_caps_are_capped(self):
        assert external_preparation_score(9, 3.0, 20).value == pytest.approx(1.0)


class TestMeritScore:
    def test_default_weights(self):
        rms = merit_score(
            AttendanceCommitmentScore.of(1.0),
            MechanicalAdherenceScore.of(0.5),
            ExternalPreparationScore.of(0.5),
            MeritWeights(),
        )
        assert rms.value == pytest.approx(0.4 + 0.2 + 0.1)

    def test_weights_are_normalised_by_their_sum(self):
        rms = merit_score(
            AttendanceCommitmentScore.of(1.0),
            MechanicalAdherenceScore.of(1.0),
            ExternalPreparationScore.of(1.0),
            MeritWeights(2.0, 2.0, 1.0),
        )
        assert rms.value == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# Item priority components
# ---------------------------------------------------------------------------

class TestItemPriority:
    def test_upgrade_value_ratio(self):
        assert upgrade_value(5000.0, 100000.0).value == pytest.approx(0.05)

    def test_upgrade_value_zero_baseline(self):
        assert upgrade_value(5000.0, 0.0).value == 0.0

    def test_upgrade_value_clamped(self):
        assert upgrade_value(300.0, 100.0).value == 1.0

    @pytest.mark.parametrize("pieces, expected", [(0, 1.2), (1, 1.2), (2, 1.1), (3, 1.1), (4, 1.0), (5, 1.0)])
    def test_tier_bonus(self, pieces, expected):
        assert tier_bonus(pieces).value == expected

    def test_role_multiplier_defaults(self):
        assert role_multiplier(Role.dps).value == 1.0
        assert role_multiplier(Role.tank).value == 0.8
        assert role_multiplier(Role.healer).value == 0.7

    def test_ipi_is_clamped_to_one(self):
        ipi = item_priority_index(
            UpgradeValue.of(1.0), TierBonus.of(1.2), RoleMultiplier.of(1.0), PriorityWeights()
        )
        assert ipi.value == 1.0

    def test_ipi_weighted(self):
        ipi = item_priority_index(
            UpgradeValue.of(0.0), TierBonus.of(1.0), RoleMultiplier.of(1.0), PriorityWeights()
        )
        assert ipi.value == pytest.approx(0.55)


# ---------------------------------------------------------------------------
# Final composition
# ---------------------------------------------------------------------------

class TestFinalPriorityScore:
    def test_product_example(self):
        flps = final_priority_score(
            RaiderMeritScore.of(0.85), ItemPriorityIndex.of(0.90), RecencyDecayFactor.of(1.0)
        )
        assert flps.value == pytest.approx(0.765)

    @pytest.mark.parametrize("rms, ipi, rdf", [
        (0.0, 0.9, 1.0),
        (0.8, 0.0, 1.0),
        (0.8, 0.9, 0.0),
    ])
    def test_any_zero_factor_forces_zero(self, rms, ipi, rdf):
        flps = final_priority_score(
            RaiderMeritScore.of(rms), ItemPriorityIndex.of(ipi), RecencyDecayFactor.of(rdf)
        )
        assert flps.value == 0.0


class TestRecencyFromAwards:
    def test_no_awards_no_penalty(self):
        assert recency_decay_from_awards([], RecencyParams(), _NOW).value == 1.0

    def test_fresh_tier_a_award(self):
        rdf = recency_decay_from_awards([_award(_NOW - timedelta(days=2))], RecencyParams(), _NOW)
        assert rdf.value == pytest.approx(0.8)

    def test_tier_b_after_one_week(self):
        award = _award(_NOW - timedelta(days=8), tier=LootTier.B)
        assert recency_decay_from_awards([award], RecencyParams(), _NOW).value == pytest.approx(1.0)

    def test_latest_award_decides(self):
        old = _award(_NOW - timedelta(weeks=10), tier=LootTier.C, award_id="old")
        recent = _award(_NOW - timedelta(days=1), tier=LootTier.A, award_id="recent")
        assert recency_decay_from_awards([recent, old], RecencyParams(), _NOW).value == pytest.approx(0.8)

    def test_revoked_awards_are_ignored(self):
        revoked = _award(_NOW - timedelta(days=1)).revoke("wrong raider")
        assert recency_decay_from_awards([revoked], RecencyParams(), _NOW).value == 1.0

    def test_future_awards_are_ignored(self):
        future = _award(_NOW + timedelta(days=1))
        assert recency_decay_from_awards([future], RecencyParams(), _NOW).value == 1.0

    def test_weeks_between_counts_whole_weeks(self):
        assert weeks_between(_NOW - timedelta(days=13), _NOW) == 1
        assert weeks_between(_NOW - timedelta(days=14), _NOW) == 2
        assert weeks_between(_NOW + timedelta(days=3), _NOW) == 0


class TestScoreCandidate:
    def test_full_pipeline(self):
        config = ScoringConfiguration.default("g1")
        result = score_candidate(_inputs(), config, [], _NOW)

        assert result.acs.value == 1.0
        assert result.mas.value == 1.0
        assert result.eps.value == pytest.approx(1.0)
        assert result.rms.value == pytest.approx(1.0)
        assert result.uv.value == pytest.approx(0.05)
        assert result.tb.value == 1.2
        assert result.rm.value == 1.0
        expected_ipi = 0.05 * 0.45 + 1.2 * 0.35 + 1.0 * 0.20
        assert result.ipi.value == pytest.approx(expected_ipi)
        assert result.rdf.value == 1.0
        assert result.flps.value == pytest.approx(result.rms.value * expected_ipi)

    def test_low_attendance_zeroes_final_score_through_merit(self):
        config = ScoringConfiguration.default("g1")
        result = score_candidate(
            _inputs(attendance=0.5, deaths_per_attempt=2.0, heroic_kills=0, vault_slots=0, crest_usage_ratio=0.0),
            config, [], _NOW,
        )
        assert result.rms.value == 0.0
        assert result.flps.value == 0.0

    def test_recent_award_suppresses_score(self):
        config = ScoringConfiguration.default("g1")
        clean = score_candidate(_inputs(), config, [], _NOW)
        penalised = score_candidate(_inputs(), config, [_award(_NOW - timedelta(days=1))], _NOW)
        assert penalised.flps.value == pytest.approx(clean.flps.value * 0.8)

    def test_identical_inputs_give_identical_results(self):
        config = ScoringConfiguration.default("g1")
        awards = [_award(_NOW - timedelta(days=9), tier=LootTier.B)]
        first = score_candidate(_inputs(attendance=0.9, tier_pieces_owned=2), config, awards, _NOW)
        second = score_candidate(_inputs(attendance=0.9, tier_pieces_owned=2), config, awards, _NOW)
        assert first == second
        assert first.flps.value == second.flps.value
