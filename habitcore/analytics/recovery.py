"""
Tool: Streak Recovery Planner
Purpose: Turn a broken streak into a day-by-day way back

The length of the broken streak picks the strategy:
    quick-restart     (1-3 days)   - pick up where you left off
    gradual-buildup   (4-14 days)  - micro version, growing over a week
    foundation-reset  (15+ days)   - understand, redesign, rebuild over two weeks

The action templates below are static data. Selection logic only chooses
between them; it never edits the wording or the day indices.

Usage:
    from habitcore.analytics.recovery import generate_recovery_plan

    plan = generate_recovery_plan("habit_read", broken_streak_length=5)
    # plan.strategy == RecoveryStrategy.GRADUAL_BUILDUP
    # [a.day for a in plan.actions] == [1, 3, 5, 7]
"""

from __future__ import annotations

from habitcore.analytics.models import (
    DifficultyLevel,
    EncouragementLevel,
    FocusArea,
    PsychologicalSupport,
    RecoveryAction,
    RecoveryPlan,
    RecoveryStrategy,
)

# Upper bound (inclusive) of broken streak length per strategy
QUICK_RESTART_MAX = 3
GRADUAL_BUILDUP_MAX = 14

# Upper bound (inclusive) of broken streak length per support tier
SHORT_BREAK_MAX = 7
MEDIUM_BREAK_MAX = 21

RECOVERY_TEMPLATES = {
    RecoveryStrategy.QUICK_RESTART: (
        RecoveryAction(
            day=1,
            action="Complete the habit at 50% intensity",
            reasoning="Rebuild momentum quickly",
            difficulty_level=DifficultyLevel.LOW,
        ),
        RecoveryAction(
            day=2,
            action="Return to normal habit routine",
            reasoning="Restore confidence",
            difficulty_level=DifficultyLevel.NORMAL,
        ),
        RecoveryAction(
            day=3,
            action="Focus on consistency over perfection",
            reasoning="Solidify restart",
            difficulty_level=DifficultyLevel.NORMAL,
        ),
    ),
    RecoveryStrategy.GRADUAL_BUILDUP: (
        RecoveryAction(
            day=1,
            action="Start with micro-version (2 minutes)",
            reasoning="Lower barrier to entry",
            difficulty_level=DifficultyLevel.MINIMAL,
        ),
        RecoveryAction(
            day=3,
            action="Increase to quarter-version (5 minutes)",
            reasoning="Gradual progression",
            difficulty_level=DifficultyLevel.MINIMAL,
        ),
        RecoveryAction(
            day=5,
            action="Move to half-version (10 minutes)",
            reasoning="Building capacity",
            difficulty_level=DifficultyLevel.LOW,
        ),
        RecoveryAction(
            day=7,
            action="Return to full habit",
            reasoning="Complete restoration",
            difficulty_level=DifficultyLevel.NORMAL,
        ),
    ),
    RecoveryStrategy.FOUNDATION_RESET: (
        RecoveryAction(
            day=1,
            action="Identify why the streak broke",
            reasoning="Understanding root causes",
            difficulty_level=DifficultyLevel.MINIMAL,
        ),
        RecoveryAction(
            day=2,
            action="Redesign habit for current lifestyle",
            reasoning="Address systemic issues",
            difficulty_level=DifficultyLevel.MINIMAL,
        ),
        RecoveryAction(
            day=4,
            action="Start new micro-habit version",
            reasoning="Fresh beginning",
            difficulty_level=DifficultyLevel.MINIMAL,
        ),
        RecoveryAction(
            day=7,
            action="Establish new routine and environment",
            reasoning="Supporting systems",
            difficulty_level=DifficultyLevel.LOW,
        ),
        RecoveryAction(
            day=14,
            action="Gradually increase habit scope",
            reasoning="Sustainable growth",
            difficulty_level=DifficultyLevel.LOW,
        ),
    ),
}

SUPPORT_TIERS = {
    "short": PsychologicalSupport(
        reframing_message=(
            "A small break doesn't erase your progress - you're just getting back on track."
        ),
        encouragement_level=EncouragementLevel.MEDIUM,
        focus_area=FocusArea.PROGRESS,
    ),
    "medium": PsychologicalSupport(
        reframing_message=(
            "This break is valuable feedback. You're learning what works and what doesn't."
        ),
        encouragement_level=EncouragementLevel.HIGH,
        focus_area=FocusArea.LEARNING,
    ),
    "long": PsychologicalSupport(
        reframing_message=(
            "Starting over is a sign of resilience, not failure. "
            "Every restart makes you stronger."
        ),
        encouragement_level=EncouragementLevel.HIGH,
        focus_area=FocusArea.RESILIENCE,
    ),
}


def _validate_length(broken_streak_length: int) -> None:
    if broken_streak_length < 1:
        raise ValueError(f"broken_streak_length must be at least 1, got {broken_streak_length}")


def determine_strategy(broken_streak_length: int) -> RecoveryStrategy:
    _validate_length(broken_streak_length)

    if broken_streak_length <= QUICK_RESTART_MAX:
        return RecoveryStrategy.QUICK_RESTART
    elif broken_streak_length <= GRADUAL_BUILDUP_MAX:
        return RecoveryStrategy.GRADUAL_BUILDUP
    return RecoveryStrategy.FOUNDATION_RESET


def psychological_support(broken_streak_length: int) -> PsychologicalSupport:
    _validate_length(broken_streak_length)

    if broken_streak_length <= SHORT_BREAK_MAX:
        return SUPPORT_TIERS["short"]
    elif broken_streak_length <= MEDIUM_BREAK_MAX:
        return SUPPORT_TIERS["medium"]
    return SUPPORT_TIERS["long"]


def generate_recovery_plan(habit_id: str, broken_streak_length: int) -> RecoveryPlan:
    """
    Build the recovery plan for a streak that just broke.

    Raises:
        ValueError: if broken_streak_length is less than 1
    """
    strategy = determine_strategy(broken_streak_length)

    return RecoveryPlan(
        habit_id=habit_id,
        broken_streak_length=broken_streak_length,
        strategy=strategy,
        actions=list(RECOVERY_TEMPLATES[strategy]),
        psychological_support=psychological_support(broken_streak_length),
    )
