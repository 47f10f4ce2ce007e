"""Tests for habitcore/analytics/mood_adjuster.py

Adjusted score = complexity score x mood multiplier x time-of-day multiplier,
mapped back to easy (<= 0.4), medium (<= 0.7) or hard.
"""

import logging

import pytest

from habitcore.analytics.models import (
    Complexity,
    Mood,
    MotivationalApproach,
    TimeOfDay,
    parse_mood,
)
from habitcore.analytics.mood_adjuster import (
    DEFAULT_ENERGY_ADJUSTMENT,
    adjust_difficulty,
    adjusted_score,
    score_to_complexity,
)


# ─────────────────────────────────────────────────────────────────────────────
# Scoring
# ─────────────────────────────────────────────────────────────────────────────


class TestAdjustedScore:
    """Tests for the multiplier arithmetic."""

    def test_hard_sad_morning(self):
        score = adjusted_score(Complexity.HARD, Mood.SAD, TimeOfDay.MORNING)
        assert score == pytest.approx(0.495)

    def test_medium_frustrated_night(self):
        score = adjusted_score(Complexity.MEDIUM, Mood.FRUSTRATED, TimeOfDay.NIGHT)
        assert score == pytest.approx(0.252)

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0.1, Complexity.EASY),
            (0.4, Complexity.EASY),
            (0.41, Complexity.MEDIUM),
            (0.7, Complexity.MEDIUM),
            (0.71, Complexity.HARD),
            (1.188, Complexity.HARD),
        ],
    )
    def test_score_boundaries(self, score, expected):
        assert score_to_complexity(score) == expected


# ─────────────────────────────────────────────────────────────────────────────
# Full adjustment
# ─────────────────────────────────────────────────────────────────────────────


class TestAdjustDifficulty:
    """Tests for the complete mood adjustment."""

    def test_sad_morning_lowers_hard_to_medium(self, mock_habit_id):
        result = adjust_difficulty(mock_habit_id, "Morning Run", "sad", "hard", "morning")

        assert result.adjusted_complexity == Complexity.MEDIUM
        assert result.suggestion_modification.time_reduction_pct == 25
        assert result.suggestion_modification.energy_adjustment == (
            "be extra gentle with yourself"
        )
        assert result.suggestion_modification.alternative_suggestion == (
            "Just spend 2 minutes on morning run - any progress counts"
        )
        assert result.motivational_approach == MotivationalApproach.GENTLE
        assert result.contextual_tips == [
            "Remember: any small step forward is a victory today",
            "Be compassionate with yourself - progress over perfection",
            "Morning habits set the tone for your entire day",
        ]

    def test_excited_easy_suggests_extending(self, mock_habit_id):
        result = adjust_difficulty(mock_habit_id, "Reading", "excited", "easy", "morning")

        assert result.adjusted_complexity == Complexity.EASY
        assert result.suggestion_modification.time_reduction_pct == 50
        assert result.suggestion_modification.alternative_suggestion == (
            "Consider extending your reading session today"
        )
        assert result.motivational_approach == MotivationalApproach.CELEBRATORY
        assert len(result.contextual_tips) == 3

    def test_excited_hard_keeps_full_session(self, mock_habit_id):
        """Hard stays hard and nothing is cut."""
        result = adjust_difficulty(mock_habit_id, "Reading", Mood.EXCITED, Complexity.HARD)

        assert result.adjusted_complexity == Complexity.HARD
        assert result.suggestion_modification.time_reduction_pct is None
        assert result.suggestion_modification.alternative_suggestion is None

    def test_neutral_afternoon_has_no_tips(self, mock_habit_id):
        result = adjust_difficulty(mock_habit_id, "Reading", "neutral", "medium", "afternoon")

        assert result.adjusted_complexity == Complexity.MEDIUM
        assert result.suggestion_modification.energy_adjustment == DEFAULT_ENERGY_ADJUSTMENT
        assert result.suggestion_modification.alternative_suggestion is None
        assert result.motivational_approach == MotivationalApproach.SUPPORTIVE
        assert result.contextual_tips == []

    def test_frustrated_night(self, mock_habit_id):
        result = adjust_difficulty(mock_habit_id, "Journal", "frustrated", "medium", "night")

        assert result.adjusted_complexity == Complexity.EASY
        assert result.suggestion_modification.alternative_suggestion == (
            "Use journal as a positive outlet for your feelings"
        )
        assert result.contextual_tips[-1] == "Keep it simple - your brain needs to wind down"
        assert len(result.contextual_tips) == 3

    def test_sad_easy_has_no_alternative(self, mock_habit_id):
        result = adjust_difficulty(mock_habit_id, "Reading", "sad", "easy", "evening")

        assert result.suggestion_modification.alternative_suggestion is None
        assert len(result.contextual_tips) == 2

    def test_content_mood_is_encouraging(self, mock_habit_id):
        result = adjust_difficulty(mock_habit_id, "Reading", "content", "medium", "afternoon")

        assert result.adjusted_complexity == Complexity.MEDIUM
        assert result.motivational_approach == MotivationalApproach.ENCOURAGING

    def test_defaults_are_medium_morning(self, mock_habit_id):
        result = adjust_difficulty(mock_habit_id, "Reading", "neutral")

        assert result.baseline_complexity == Complexity.MEDIUM
        assert result.contextual_tips == ["Morning habits set the tone for your entire day"]

    def test_rejects_unknown_complexity(self, mock_habit_id):
        with pytest.raises(ValueError):
            adjust_difficulty(mock_habit_id, "Reading", "sad", "impossible")

    def test_rejects_unknown_time_of_day(self, mock_habit_id):
        with pytest.raises(ValueError):
            adjust_difficulty(mock_habit_id, "Reading", "sad", "easy", "dawn")

    def test_to_dict_is_json_friendly(self, mock_habit_id):
        data = adjust_difficulty(mock_habit_id, "Reading", "sad", "hard").to_dict()

        assert data["current_mood"] == "sad"
        assert data["adjusted_complexity"] == "medium"
        assert data["suggestion_modification"]["time_reduction_pct"] == 25


class TestParseMood:
    """Tests for mood normalisation."""

    def test_canonical_values(self):
        for mood in Mood:
            assert parse_mood(mood.value) == mood

    def test_case_and_whitespace(self):
        assert parse_mood("  SAD ") == Mood.SAD

    def test_grateful_alias(self):
        assert parse_mood("grateful") == Mood.EXCITED

    def test_unknown_falls_back_to_neutral(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_mood("bored") == Mood.NEUTRAL

        assert "bored" in caplog.text
