"""Sustainability score: one 0-100 number for display and comparison."""

from __future__ import annotations

import math

from habitcore.analytics.config_models import ScoringConfig
from habitcore.analytics.models import ForecastPrediction, StreakState, TimingPattern


def calculate_sustainability_score(
    predictions: ForecastPrediction,
    pattern: TimingPattern,
    streak: StreakState,
    config: ScoringConfig | None = None,
) -> int:
    """
    Average of forecast, consistency and experience, each on a 0-100 scale.

    Experience is capped at 30 so a long history alone can't carry the score.
    """
    config = config or ScoringConfig()
    weights = config.prediction_weights

    prediction_score = (
        predictions.day7 * weights.day7
        + predictions.day14 * weights.day14
        + predictions.day30 * weights.day30
    ) * 100
    consistency_score = pattern.completion_rate * 100
    experience_score = min(
        streak.longest * config.experience_per_longest_day, config.experience_cap
    )

    raw = (prediction_score + consistency_score + experience_score) / 3
    # Half-up rounding, not banker's rounding
    return max(0, min(100, math.floor(raw + 0.5)))
