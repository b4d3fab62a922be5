"""
Tests for the score value objects: range checks on construction, clamping
arithmetic and the recency decay factor.
"""
import math

import pytest

from raidloot.core.errors import InvalidRangeError, InvalidWeightConfigurationError
from raidloot.domain.scores import (
    AttendanceCommitmentScore,
    FlpsScore,
    ItemPriorityIndex,
    RaiderMeritScore,
    RecencyDecayFactor,
    RoleMultiplier,
    TierBonus,
    clamp,
)


UNIT_SCORES = [AttendanceCommitmentScore, RaiderMeritScore, ItemPriorityIndex, FlpsScore]


class TestConstruction:
    @pytest.mark.parametrize("score_cls", UNIT_SCORES)
    @pytest.mark.parametrize("value", [0.0, 0.5, 1.0])
    def test_values_inside_unit_interval_succeed(self, score_cls, value):
        assert score_cls.of(value).value == value

    @pytest.mark.parametrize("score_cls", UNIT_SCORES)
    @pytest.mark.parametrize("value", [-0.0001, 1.0001, 5.0, -1.0])
    def test_values_outside_unit_interval_fail(self, score_cls, value):
        with pytest.raises(InvalidRangeError):
            score_cls.of(value)

    def test_nan_is_rejected(self):
        with pytest.raises(InvalidRangeError):
            FlpsScore.of(math.nan)

    def test_bool_is_rejected(self):
        with pytest.raises(InvalidRangeError):
            FlpsScore.of(True)

    def test_ints_are_stored_as_floats(self):
        score = FlpsScore.of(1)
        assert isinstance(score.value, float)

    @pytest.mark.parametrize("score_cls", [TierBonus, RoleMultiplier])
    def test_bonus_multipliers_allow_up_to_two(self, score_cls):
        assert score_cls.of(2.0).value == 2.0
        assert score_cls.of(1.2).value == 1.2
        with pytest.raises(InvalidRangeError):
            score_cls.of(2.01)

    def test_error_reports_label_and_bounds(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            RaiderMeritScore.of(1.5)
        err = exc_info.value
        assert err.details["kind"] == "Raider Merit Score"
        assert err.details["min"] == 0.0
        assert err.details["max"] == 1.0


class TestArithmetic:
    def test_plus_clamps_at_max(self):
        assert (FlpsScore.of(0.7) + FlpsScore.of(0.6)).value == 1.0

    def test_times_clamps_at_zero(self):
        assert FlpsScore.of(0.5).times(-3).value == 0.0

    def test_times_keeps_the_subclass(self):
        assert isinstance(RaiderMeritScore.of(0.5) * 0.5, RaiderMeritScore)

    def test_clamped_constructor(self):
        assert FlpsScore.clamped(1.7).value == 1.0
        assert FlpsScore.clamped(-0.2).value == 0.0
        assert FlpsScore.clamped(math.nan).value == 0.0

    def test_equality_and_ordering(self):
        assert FlpsScore.of(0.3) == FlpsScore.of(0.3)
        assert FlpsScore.of(0.3) < FlpsScore.of(0.4)

    def test_clamp_helper(self):
        assert clamp(3.0, 0.0, 2.0) == 2.0
        assert clamp(-1.0, 0.0, 2.0) == 0.0
        assert clamp(0.5, 0.0, 2.0) == 0.5


class TestRecencyDecayFactor:
    @pytest.mark.parametrize("base", [0.0, 0.5, 0.8, 1.0])
    def test_no_history_is_no_penalty(self, base):
        assert RecencyDecayFactor.from_weeks_since(None, base).value == 1.0

    def test_base_penalty_at_zero_weeks(self):
        assert RecencyDecayFactor.from_weeks_since(0, 0.8).value == pytest.approx(0.8)

    def test_recovers_each_week(self):
        assert RecencyDecayFactor.from_weeks_since(1, 0.8, 0.1).value == pytest.approx(0.9)

    def test_never_exceeds_one(self):
        assert RecencyDecayFactor.from_weeks_since(50, 0.8, 0.1).value == 1.0

    def test_monotonic_in_weeks(self):
        values = [RecencyDecayFactor.from_weeks_since(w, 0.3, 0.07).value for w in range(0, 20)]
        assert values == sorted(values)
        assert max(values) <= 1.0

    def test_negative_weeks_treated_as_zero(self):
        assert RecencyDecayFactor.from_weeks_since(-3, 0.8).value == pytest.approx(0.8)

    def test_invalid_base_penalty(self):
        with pytest.raises(InvalidWeightConfigurationError):
            RecencyDecayFactor.from_weeks_since(1, 1.5)

    def test_negative_recovery_rate(self):
        with pytest.raises(InvalidWeightConfigurationError):
            RecencyDecayFactor.from_weeks_since(1, 0.8, -0.1)

    def test_shortcuts(self):
        assert RecencyDecayFactor.no_penalty().value == 1.0
        assert RecencyDecayFactor.max_penalty().value == 0.0
