"""Tests for habitcore/analytics/interventions.py

The planner is pure: the same tier and factors always give the same list,
tier suggestions first, mitigations after, no duplicates, at most four.
"""

from datetime import timedelta

from habitcore.analytics.interventions import (
    TIER_INTERVENTIONS,
    plan_interventions,
    predict_next_critical_date,
)
from habitcore.analytics.models import ForecastPrediction, RiskFactor, RiskLevel


POOR_WEEK = RiskFactor(
    factor="Poor recent week performance",
    impact=0.9,
    mitigation="Consider a streak reset with easier goals",
)
LOW_COMPLETION = RiskFactor(
    factor="Low overall completion rate",
    impact=0.8,
    mitigation="Focus on reducing habit complexity and building consistency",
)
DECLINING = RiskFactor(
    factor="Declining recent performance",
    impact=0.7,
    mitigation="Review what changed recently and adjust approach",
)


class TestPlanInterventions:
    """Tests for the ordered action list."""

    def test_tier_suggestions_only(self):
        for level in RiskLevel:
            assert plan_interventions(level, []) == TIER_INTERVENTIONS[level]

    def test_appends_top_two_mitigations(self):
        result = plan_interventions(RiskLevel.HIGH, [POOR_WEEK, LOW_COMPLETION, DECLINING])

        assert result == [
            "Consider reducing habit complexity temporarily",
            "Focus on micro-habits for consistency",
            "Consider a streak reset with easier goals",
            "Focus on reducing habit complexity and building consistency",
        ]

    def test_skips_duplicate_mitigation(self):
        """A mitigation already in the tier list is not repeated."""
        duplicate = RiskFactor(
            factor="Some factor",
            impact=0.9,
            mitigation="Add environmental supports or reminders",
        )

        result = plan_interventions(RiskLevel.MEDIUM, [duplicate, DECLINING])

        assert result.count("Add environmental supports or reminders") == 1
        assert result[-1] == DECLINING.mitigation
        assert len(result) == 3

    def test_never_more_than_four(self):
        result = plan_interventions(RiskLevel.LOW, [POOR_WEEK, LOW_COMPLETION, DECLINING])
        assert len(result) == 4

    def test_does_not_mutate_tier_table(self):
        plan_interventions(RiskLevel.HIGH, [POOR_WEEK, LOW_COMPLETION])
        assert len(TIER_INTERVENTIONS[RiskLevel.HIGH]) == 2


class TestNextCriticalDate:
    """Tests for when support is needed next."""

    def test_none_for_strong_low_risk(self, eval_date):
        predictions = ForecastPrediction(day7=0.9, day14=0.8, day30=0.7)
        assert predict_next_critical_date(predictions, RiskLevel.LOW, eval_date) is None

    def test_low_risk_with_weak_fortnight_still_scheduled(self, eval_date):
        predictions = ForecastPrediction(day7=0.9, day14=0.7, day30=0.7)

        result = predict_next_critical_date(predictions, RiskLevel.LOW, eval_date)

        assert result == eval_date + timedelta(days=7)

    def test_high_risk_is_two_days(self, eval_date):
        predictions = ForecastPrediction(day7=0.3, day14=0.2, day30=0.1)

        result = predict_next_critical_date(predictions, RiskLevel.HIGH, eval_date)

        assert result == eval_date + timedelta(days=2)

    def test_weak_week_is_three_days(self, eval_date):
        predictions = ForecastPrediction(day7=0.55, day14=0.55, day30=0.5)

        result = predict_next_critical_date(predictions, RiskLevel.MEDIUM, eval_date)

        assert result == eval_date + timedelta(days=3)

    def test_medium_risk_default_is_a_week(self, eval_date):
        predictions = ForecastPrediction(day7=0.712, day14=0.621, day30=0.525)

        result = predict_next_critical_date(predictions, RiskLevel.MEDIUM, eval_date)

        assert result == eval_date + timedelta(days=7)
