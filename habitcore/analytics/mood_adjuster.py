"""
Tool: Mood Difficulty Adjuster
Purpose: Rescale a habit's difficulty to how the user feels right now

A hard habit on a sad evening should not be presented the same way as on
an excited morning. The baseline difficulty is scaled by a mood multiplier
and a time-of-day energy multiplier, then mapped back to easy/medium/hard.

Core Principle:
    Lower the bar, never skip the habit. A smaller version that gets done
    keeps the streak; a full version that gets avoided does not.

Usage:
    from habitcore.analytics.mood_adjuster import adjust_difficulty

    adjustment = adjust_difficulty(
        habit_id="habit_run",
        habit_title="Morning run",
        current_mood="sad",
        baseline_complexity="hard",
        time_of_day="morning",
    )
    # adjustment.adjusted_complexity == Complexity.MEDIUM
    # adjustment.suggestion_modification.time_reduction_pct == 25
"""

from __future__ import annotations

from habitcore.analytics.config_models import MoodConfig
from habitcore.analytics.models import (
    Complexity,
    Mood,
    MoodAdjustment,
    MotivationalApproach,
    SuggestionModification,
    TimeOfDay,
    parse_mood,
)

MOTIVATIONAL_APPROACHES = {
    Mood.CONTENT: MotivationalApproach.ENCOURAGING,
    Mood.NEUTRAL: MotivationalApproach.SUPPORTIVE,
    Mood.SAD: MotivationalApproach.GENTLE,
    Mood.FRUSTRATED: MotivationalApproach.SUPPORTIVE,
    Mood.EXCITED: MotivationalApproach.CELEBRATORY,
}

MOOD_TIPS = {
    Mood.SAD: [
        "Remember: any small step forward is a victory today",
        "Be compassionate with yourself - progress over perfection",
    ],
    Mood.FRUSTRATED: [
        "Use this energy constructively - habits can be great stress outlets",
        "Focus on the calming aspects of your routine",
    ],
    Mood.EXCITED: [
        "Great mood for building positive associations with habits",
        "Consider making today's session extra enjoyable",
    ],
}

TIME_TIPS = {
    TimeOfDay.MORNING: "Morning habits set the tone for your entire day",
    TimeOfDay.NIGHT: "Keep it simple - your brain needs to wind down",
}

DEFAULT_ENERGY_ADJUSTMENT = "maintain normal energy"


def complexity_to_score(complexity: Complexity, config: MoodConfig | None = None) -> float:
    config = config or MoodConfig()
    return getattr(config.complexity_scores, Complexity(complexity).value)


def score_to_complexity(score: float, config: MoodConfig | None = None) -> Complexity:
    """Map an adjusted score back to a difficulty label."""
    config = config or MoodConfig()

    if score <= config.easy_max_score:
        return Complexity.EASY
    elif score <= config.medium_max_score:
        return Complexity.MEDIUM
    return Complexity.HARD


def adjusted_score(
    baseline: Complexity, mood: Mood, time_of_day: TimeOfDay, config: MoodConfig | None = None
) -> float:
    config = config or MoodConfig()

    difficulty_multiplier = getattr(config.mood_multipliers, Mood(mood).value)
    energy_multiplier = getattr(config.time_multipliers, TimeOfDay(time_of_day).value)
    return complexity_to_score(baseline, config) * difficulty_multiplier * energy_multiplier


def suggestion_modification(
    mood: Mood,
    baseline: Complexity,
    adjusted: Complexity,
    habit_title: str,
    config: MoodConfig | None = None,
) -> SuggestionModification:
    """Time reduction from the adjusted difficulty, guidance from the mood."""
    config = config or MoodConfig()
    title = habit_title.lower()

    reduction = getattr(config.time_reduction_pct, adjusted.value)

    energy_adjustment = DEFAULT_ENERGY_ADJUSTMENT
    alternative = None

    if mood == Mood.SAD:
        energy_adjustment = "be extra gentle with yourself"
        if baseline != Complexity.EASY:
            alternative = f"Just spend 2 minutes on {title} - any progress counts"
    elif mood == Mood.FRUSTRATED:
        energy_adjustment = "channel frustration into gentle action"
        alternative = f"Use {title} as a positive outlet for your feelings"
    elif mood == Mood.EXCITED:
        energy_adjustment = "ride this positive energy wave"
        if baseline == Complexity.EASY:
            alternative = f"Consider extending your {title} session today"

    return SuggestionModification(
        energy_adjustment=energy_adjustment,
        time_reduction_pct=reduction if reduction > 0 else None,
        alternative_suggestion=alternative,
    )


def contextual_tips(
    mood: Mood, time_of_day: TimeOfDay, config: MoodConfig | None = None
) -> list[str]:
    config = config or MoodConfig()

    tips = list(MOOD_TIPS.get(mood, [])[: config.max_mood_tips])
    if time_of_day in TIME_TIPS:
        tips.append(TIME_TIPS[time_of_day])

    return tips[: config.max_tips]


def adjust_difficulty(
    habit_id: str,
    habit_title: str,
    current_mood: Mood | str,
    baseline_complexity: Complexity | str = Complexity.MEDIUM,
    time_of_day: TimeOfDay | str = TimeOfDay.MORNING,
    config: MoodConfig | None = None,
) -> MoodAdjustment:
    """
    Build the full mood adjustment for one habit.

    Args:
        habit_id: Habit identifier
        habit_title: Display title, used in the alternative suggestion
        current_mood: Canonical mood name (unknown values count as neutral)
        baseline_complexity: easy, medium or hard
        time_of_day: morning, afternoon, evening or night

    Raises:
        ValueError: for an unknown complexity or time of day
    """
    config = config or MoodConfig()

    mood = parse_mood(current_mood)
    baseline = Complexity(baseline_complexity)
    time_of_day = TimeOfDay(time_of_day)

    score = adjusted_score(baseline, mood, time_of_day, config)
    adjusted = score_to_complexity(score, config)

    return MoodAdjustment(
        habit_id=habit_id,
        baseline_complexity=baseline,
        current_mood=mood,
        adjusted_complexity=adjusted,
        suggestion_modification=suggestion_modification(
            mood, baseline, adjusted, habit_title, config
        ),
        motivational_approach=MOTIVATIONAL_APPROACHES.get(mood, MotivationalApproach.SUPPORTIVE),
        contextual_tips=contextual_tips(mood, time_of_day, config),
    )
