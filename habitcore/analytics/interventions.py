"""
Intervention planning: what to suggest, and when support is needed next.

Tier suggestions always come first. Mitigations from the top risk factors
are appended after them, skipping duplicates.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from habitcore.analytics.config_models import InterventionConfig
from habitcore.analytics.models import ForecastPrediction, RiskFactor, RiskLevel

TIER_INTERVENTIONS = {
    RiskLevel.HIGH: [
        "Consider reducing habit complexity temporarily",
        "Focus on micro-habits for consistency",
    ],
    RiskLevel.MEDIUM: [
        "Review and adjust timing or context",
        "Add environmental supports or reminders",
    ],
    RiskLevel.LOW: [
        "Consider expanding habit scope or adding related habits",
        "Maintain current approach with minor optimizations",
    ],
}


def plan_interventions(
    risk_profile: RiskLevel,
    risk_factors: list[RiskFactor],
    config: InterventionConfig | None = None,
) -> list[str]:
    """Ordered, de-duplicated action list for a risk tier and its factors."""
    config = config or InterventionConfig()

    interventions = list(TIER_INTERVENTIONS[risk_profile])

    for factor in risk_factors[: config.max_factor_mitigations]:
        if factor.mitigation not in interventions:
            interventions.append(factor.mitigation)

    return interventions[: config.max_interventions]


def predict_next_critical_date(
    predictions: ForecastPrediction,
    risk_profile: RiskLevel,
    now: date | datetime,
    config: InterventionConfig | None = None,
) -> date | datetime | None:
    """
    When the next intervention is most needed.

    Returns None for a low-risk streak that still looks strong at 14 days.
    The result has the same type as `now`.
    """
    config = config or InterventionConfig()

    if risk_profile == RiskLevel.LOW and predictions.day14 > config.no_intervention_day14:
        return None

    if risk_profile == RiskLevel.HIGH:
        days_ahead = config.high_risk_days_ahead
    elif predictions.day7 < config.weak_week_threshold:
        days_ahead = config.weak_week_days_ahead
    else:
        days_ahead = config.default_days_ahead

    return now + timedelta(days=days_ahead)
