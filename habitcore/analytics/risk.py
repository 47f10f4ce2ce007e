"""
Risk classification: tier from forecast odds, ranked contributing factors.

Factors are worded as things to work on, never as failures. Each one comes
with its own mitigation so the intervention planner can reuse it directly.
"""

from __future__ import annotations

from habitcore.analytics.config_models import RiskConfig
from habitcore.analytics.models import (
    ForecastPrediction,
    RecentPerformance,
    RiskFactor,
    RiskLevel,
    TimingPattern,
)


def classify_risk(predictions: ForecastPrediction, config: RiskConfig | None = None) -> RiskLevel:
    """Map the mean of the three horizons to a risk tier."""
    config = config or RiskConfig()

    avg_prediction = predictions.average
    if avg_prediction > config.low_threshold:
        return RiskLevel.LOW
    elif avg_prediction > config.medium_threshold:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def identify_risk_factors(
    pattern: TimingPattern, performance: RecentPerformance, config: RiskConfig | None = None
) -> list[RiskFactor]:
    """
    Collect the risk factors whose trigger holds.

    Returns:
        At most `max_factors` factors, highest impact first
    """
    config = config or RiskConfig()
    factors = []

    if pattern.completion_rate < config.low_completion_rate:
        factors.append(
            RiskFactor(
                factor="Low overall completion rate",
                impact=0.8,
                mitigation="Focus on reducing habit complexity and building consistency",
            )
        )

    if performance.slope < config.declining_slope:
        factors.append(
            RiskFactor(
                factor="Declining recent performance",
                impact=0.7,
                mitigation="Review what changed recently and adjust approach",
            )
        )

    if len(pattern.difficult_days) > config.max_difficult_days:
        factors.append(
            RiskFactor(
                factor=f"Struggles on {' and '.join(pattern.difficult_days)}",
                impact=0.6,
                mitigation=f"Plan specific strategies for {pattern.difficult_days[0]}",
            )
        )

    if performance.recent7 < config.poor_recent_week:
        factors.append(
            RiskFactor(
                factor="Poor recent week performance",
                impact=0.9,
                mitigation="Consider a streak reset with easier goals",
            )
        )

    # sorted() is stable, so equal impacts keep trigger order
    return sorted(factors, key=lambda f: f.impact, reverse=True)[: config.max_factors]
