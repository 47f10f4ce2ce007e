"""
Tool: Ensemble Forecast Model
Purpose: Blend three independent estimators into streak survival odds

Sub-models (each returns a 7/14/30 day triple):
- baseline: overall completion rate, streak stability and streak potential
- trend: recent completion rates scaled by the short-window slope
- seasonal: weekend and month-of-year effects on the evaluation date

The blend is a fixed weighted mean per horizon, clamped so no forecast ever
claims certainty either way.

Usage:
    from habitcore.analytics.ensemble import ensemble_forecast

    prediction = ensemble_forecast(streak, pattern, performance, on=date(2025, 4, 15))
"""

from __future__ import annotations

from datetime import date

from habitcore.analytics.config_models import (
    BaselineModelConfig,
    EnsembleConfig,
    ForecastConfig,
    ModelWeights,
    SeasonalModelConfig,
    TrendModelConfig,
)
from habitcore.analytics.models import (
    ForecastPrediction,
    RecentPerformance,
    StreakState,
    TimingPattern,
)

# Saturday and Sunday in date.weekday()
WEEKEND_DAYS = {5, 6}


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def baseline_prediction(
    streak: StreakState, pattern: TimingPattern, config: BaselineModelConfig | None = None
) -> ForecastPrediction:
    """Long-run odds from completion rate, current streak and streak potential."""
    config = config or BaselineModelConfig()

    streak_stability = min(
        streak.current * config.streak_stability_per_day, config.streak_stability_cap
    )
    baseline = (pattern.completion_rate + streak_stability + pattern.streak_potential) / 3

    return ForecastPrediction(
        day7=min(config.caps.day7, baseline * config.decay.day7),
        day14=min(config.caps.day14, baseline * config.decay.day14),
        day30=min(config.caps.day30, baseline * config.decay.day30),
    )


def trend_prediction(
    performance: RecentPerformance, config: TrendModelConfig | None = None
) -> ForecastPrediction:
    """Recent completion rates pushed up or down by the current slope."""
    config = config or TrendModelConfig()

    trend_factor = clamp(1 + performance.slope, config.min_factor, config.max_factor)

    return ForecastPrediction(
        day7=min(config.caps.day7, performance.recent7 * trend_factor),
        day14=min(config.caps.day14, performance.recent14 * trend_factor * config.day14_decay),
        day30=min(config.caps.day30, performance.recent14 * trend_factor * config.day30_decay),
    )


def seasonal_prediction(on: date, config: SeasonalModelConfig | None = None) -> ForecastPrediction:
    """
    Calendar effects for the evaluation date.

    The weekend penalty only applies to the short horizons; over 30 days
    every weekend is included anyway.
    """
    config = config or SeasonalModelConfig()

    weekend_penalty = config.weekend_penalty if on.weekday() in WEEKEND_DAYS else 1.0
    month_factor = config.month_factors[on.month - 1]

    day7 = config.base * weekend_penalty * month_factor
    return ForecastPrediction(
        day7=day7,
        day14=day7 * config.day14_decay,
        day30=config.base * month_factor * config.day30_decay,
    )


def combine(
    predictions: list[float], weights: ModelWeights, config: EnsembleConfig | None = None
) -> float:
    """Weighted mean of baseline, trend and seasonal values, clamped."""
    config = config or EnsembleConfig()

    ordered_weights = [weights.baseline, weights.trend, weights.seasonal]
    total_weight = sum(ordered_weights)
    if total_weight <= 0:
        return config.min_probability

    weighted_sum = sum(p * w for p, w in zip(predictions, ordered_weights))
    return clamp(weighted_sum / total_weight, config.min_probability, config.max_probability)


def ensemble_forecast(
    streak: StreakState,
    pattern: TimingPattern,
    performance: RecentPerformance,
    on: date,
    config: ForecastConfig | None = None,
) -> ForecastPrediction:
    """Run all three sub-models and blend them per horizon."""
    config = config or ForecastConfig()

    baseline = baseline_prediction(streak, pattern, config.baseline)
    trend = trend_prediction(performance, config.trend)
    seasonal = seasonal_prediction(on, config.seasonal)
    ensemble = config.ensemble

    return ForecastPrediction(
        day7=combine([baseline.day7, trend.day7, seasonal.day7], ensemble.day7_weights, ensemble),
        day14=combine(
            [baseline.day14, trend.day14, seasonal.day14], ensemble.day14_weights, ensemble
        ),
        day30=combine(
            [baseline.day30, trend.day30, seasonal.day30], ensemble.day30_weights, ensemble
        ),
    )
