"""Tests for habitcore/analytics/ensemble.py

The ensemble blends three sub-models per horizon:
- baseline: completion rate, streak stability, streak potential
- trend: recent rates scaled by slope
- seasonal: weekend and month effects on the evaluation date

Key invariant: every blended probability lies in [0.05, 0.95].
"""

from datetime import date

import pytest

from habitcore.analytics.config_models import EnsembleConfig, ForecastConfig, ModelWeights
from habitcore.analytics.ensemble import (
    baseline_prediction,
    combine,
    ensemble_forecast,
    seasonal_prediction,
    trend_prediction,
)
from habitcore.analytics.models import RecentPerformance, StreakState, TimingPattern


# ─────────────────────────────────────────────────────────────────────────────
# Sub-model Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestBaselineModel:
    """Tests for the baseline sub-model."""

    def test_worked_example(self, sample_streak, sample_pattern):
        """Streak 10, rate 0.8, potential 0.6 -> baseline 0.5667 before decay."""
        result = baseline_prediction(sample_streak, sample_pattern)

        assert result.day7 == pytest.approx(0.538, abs=1e-3)
        assert result.day14 == pytest.approx(0.482, abs=1e-3)
        assert result.day30 == pytest.approx(0.397, abs=1e-3)

    def test_streak_stability_is_capped(self, sample_pattern):
        """A 100-day streak counts no more than a 6-day streak."""
        long_streak = baseline_prediction(StreakState(current=100, longest=100), sample_pattern)
        six_days = baseline_prediction(StreakState(current=6, longest=6), sample_pattern)

        assert long_streak == six_days


class TestTrendModel:
    """Tests for the trend sub-model."""

    def test_worked_example(self, sample_performance):
        """slope 0.05 -> trend factor 1.05."""
        result = trend_prediction(sample_performance)

        assert result.day7 == pytest.approx(0.8925)
        assert result.day14 == pytest.approx(0.756)
        assert result.day30 == pytest.approx(0.588)

    def test_steep_rise_is_capped(self):
        """Trend factor tops out at 1.9 and each horizon at its cap."""
        result = trend_prediction(RecentPerformance(slope=5.0, recent7=0.9, recent14=0.9))

        assert result.day7 == 0.95
        assert result.day14 == 0.90
        assert result.day30 == 0.85

    def test_collapse_floors_trend_factor(self):
        """Trend factor never drops below 0.1."""
        result = trend_prediction(RecentPerformance(slope=-5.0, recent7=1.0, recent14=1.0))

        assert result.day7 == pytest.approx(0.1)
        assert result.day14 == pytest.approx(0.09)
        assert result.day30 == pytest.approx(0.07)


class TestSeasonalModel:
    """Tests for the seasonal sub-model."""

    def test_weekday_in_neutral_month(self, eval_date):
        result = seasonal_prediction(eval_date)

        assert result.day7 == pytest.approx(0.70)
        assert result.day14 == pytest.approx(0.63)
        assert result.day30 == pytest.approx(0.56)

    def test_weekend_penalty_skips_30_day_horizon(self, weekend_date):
        result = seasonal_prediction(weekend_date)

        assert result.day7 == pytest.approx(0.63)
        assert result.day14 == pytest.approx(0.567)
        assert result.day30 == pytest.approx(0.56)

    def test_december_is_harder(self):
        """December's month factor is 0.8."""
        result = seasonal_prediction(date(2025, 12, 2))

        assert result.day7 == pytest.approx(0.56)
        assert result.day30 == pytest.approx(0.448)

    def test_accepts_plain_date(self):
        assert seasonal_prediction(date(2025, 4, 15)) == seasonal_prediction(date(2025, 4, 16))


# ─────────────────────────────────────────────────────────────────────────────
# Ensemble Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestCombine:
    """Tests for the weighted blend."""

    def test_weighted_mean(self):
        weights = ModelWeights(baseline=0.4, trend=0.4, seasonal=0.2)
        assert combine([0.5, 0.5, 0.5], weights) == pytest.approx(0.5)

    def test_weights_are_normalised(self):
        """Weights that don't sum to 1 are divided by their total."""
        weights = ModelWeights(baseline=2.0, trend=2.0, seasonal=0.0)
        assert combine([0.4, 0.6, 0.9], weights) == pytest.approx(0.5)

    def test_clamped_to_bounds(self):
        weights = ModelWeights(baseline=1.0, trend=1.0, seasonal=1.0)
        assert combine([0.0, 0.0, 0.0], weights) == 0.05
        assert combine([1.0, 1.0, 1.0], weights) == 0.95

    def test_zero_weights_give_floor(self):
        weights = ModelWeights(baseline=0.0, trend=0.0, seasonal=0.0)
        assert combine([0.9, 0.9, 0.9], weights, EnsembleConfig()) == 0.05


class TestEnsembleForecast:
    """Tests for the full three-model blend."""

    def test_worked_scenario(self, sample_streak, sample_pattern, sample_performance, eval_date):
        """Reference scenario: ensemble 0.712 / 0.621 / 0.525."""
        result = ensemble_forecast(sample_streak, sample_pattern, sample_performance, eval_date)

        assert result.day7 == pytest.approx(0.712, abs=1e-3)
        assert result.day14 == pytest.approx(0.621, abs=1e-3)
        assert result.day30 == pytest.approx(0.525, abs=1e-3)

    def test_deterministic_for_same_date(
        self, sample_streak, sample_pattern, sample_performance, eval_date
    ):
        first = ensemble_forecast(sample_streak, sample_pattern, sample_performance, eval_date)
        second = ensemble_forecast(sample_streak, sample_pattern, sample_performance, eval_date)

        assert first == second

    def test_lower_clamp_with_no_seasonal_floor(self, mock_habit_id, eval_date):
        """Everything zero and no seasonal base bottoms out at 0.05."""
        config = ForecastConfig(seasonal={"base": 0.0})
        pattern = TimingPattern(habit_id=mock_habit_id, completion_rate=0.0, streak_potential=0.0)
        performance = RecentPerformance(slope=0.0, recent7=0.0, recent14=0.0)

        result = ensemble_forecast(StreakState(), pattern, performance, eval_date, config)

        assert (result.day7, result.day14, result.day30) == (0.05, 0.05, 0.05)

    @pytest.mark.parametrize("rate", [0.0, 0.3, 0.7, 1.0])
    @pytest.mark.parametrize("slope", [-1.0, 0.0, 1.0])
    @pytest.mark.parametrize("on", [date(2025, 1, 4), date(2025, 6, 10), date(2025, 12, 25)])
    def test_always_in_range(self, mock_habit_id, rate, slope, on):
        """Predictions stay inside [0.05, 0.95] across inputs and dates."""
        pattern = TimingPattern(habit_id=mock_habit_id, completion_rate=rate, streak_potential=rate)
        performance = RecentPerformance(slope=slope, recent7=rate, recent14=rate)

        result = ensemble_forecast(StreakState(current=20, longest=20), pattern, performance, on)

        for value in (result.day7, result.day14, result.day30):
            assert 0.05 <= value <= 0.95
