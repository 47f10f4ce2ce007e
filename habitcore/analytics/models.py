"""
Tool: Streak Analytics Models
Purpose: Data structures for forecasts, mood adjustments and recovery plans

Every value here is computed fresh per call and never persisted by the
analytics package. Callers that want caching own it.

Usage:
    from habitcore.analytics.models import (
        StreakState,
        TimingPattern,
        ForecastPrediction,
        StreakForecast,
        RiskLevel,
        Mood,
    )
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum, StrEnum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Enumerations
# =============================================================================


class Complexity(StrEnum):
    """Habit difficulty as the user set it up."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Mood(StrEnum):
    """Canonical mood set shared with journaling and check-ins."""

    CONTENT = "content"
    NEUTRAL = "neutral"
    SAD = "sad"
    FRUSTRATED = "frustrated"
    EXCITED = "excited"


# Accepted spellings that are not enum values
MOOD_ALIASES = {
    "grateful": Mood.EXCITED,
}


class TimeOfDay(StrEnum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class EnergyPattern(StrEnum):
    """When during the day a habit usually gets done."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    FLEXIBLE = "flexible"


class RiskLevel(StrEnum):
    """Likelihood that the current streak breaks soon."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MotivationalApproach(StrEnum):
    GENTLE = "gentle"
    ENCOURAGING = "encouraging"
    CELEBRATORY = "celebratory"
    SUPPORTIVE = "supportive"


class RecoveryStrategy(StrEnum):
    """Recovery plan shape, chosen by how long the broken streak was."""

    QUICK_RESTART = "quick-restart"
    GRADUAL_BUILDUP = "gradual-buildup"
    FOUNDATION_RESET = "foundation-reset"


class DifficultyLevel(StrEnum):
    MINIMAL = "minimal"
    LOW = "low"
    NORMAL = "normal"


class EncouragementLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FocusArea(StrEnum):
    PROGRESS = "progress"
    LEARNING = "learning"
    RESILIENCE = "resilience"


def parse_mood(value: str | Mood) -> Mood:
    """
    Resolve free-form mood text to the canonical mood set.

    Unknown values fall back to neutral so a check-in with an unexpected
    mood still gets a sensible adjustment.
    """
    if isinstance(value, Mood):
        return value
    key = str(value).strip().lower()
    if key in MOOD_ALIASES:
        return MOOD_ALIASES[key]
    try:
        return Mood(key)
    except ValueError:
        logger.warning(f"Unrecognised mood '{value}', treating as neutral")
        return Mood.NEUTRAL


def serialize_value(value: Any) -> Any:
    """Make dataclass output JSON friendly."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


# =============================================================================
# Upstream inputs
# =============================================================================


@dataclass(frozen=True)
class StreakState:
    """Current and longest streak as reported by the completion ledger."""

    current: int = 0
    longest: int = 0


@dataclass(frozen=True)
class CompletionEntry:
    """One day of completion history."""

    date: date
    completed: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompletionEntry:
        day = data["date"]
        if isinstance(day, str):
            day = date.fromisoformat(day)
        elif isinstance(day, datetime):
            day = day.date()
        return cls(date=day, completed=bool(data["completed"]))


@dataclass
class TimingPattern:
    """
    Per-habit behavioural summary produced by the timing analyzer.

    difficult_days is ordered worst first.
    """

    habit_id: str
    completion_rate: float
    streak_potential: float
    optimal_hours: list[int] = field(default_factory=list)
    difficult_days: list[str] = field(default_factory=list)
    energy_pattern: EnergyPattern = EnergyPattern.FLEXIBLE
    weekday_pattern: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimingPattern:
        data = data.copy()
        if "energy_pattern" in data:
            data["energy_pattern"] = EnergyPattern(data["energy_pattern"])
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return serialize_value(asdict(self))


# =============================================================================
# Forecast outputs
# =============================================================================


@dataclass(frozen=True)
class RecentPerformance:
    """Short-window trend over recent completion history."""

    slope: float
    recent7: float
    recent14: float


@dataclass(frozen=True)
class ForecastPrediction:
    """Probability of keeping the streak alive for 7, 14 and 30 more days."""

    day7: float
    day14: float
    day30: float

    @property
    def average(self) -> float:
        return (self.day7 + self.day14 + self.day30) / 3


@dataclass(frozen=True)
class RiskFactor:
    factor: str
    impact: float  # 0-1
    mitigation: str


@dataclass
class StreakForecast:
    """Full forecast for one habit."""

    habit_id: str
    current_streak: int
    predictions: ForecastPrediction
    risk_profile: RiskLevel
    key_risk_factors: list[RiskFactor]
    streak_sustainability_score: int
    optimal_interventions: list[str]
    next_critical_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        return serialize_value(asdict(self))


@dataclass
class HabitAnalyticsResult:
    """
    Outcome of fetching and forecasting a single habit.

    Either forecast (with timing_pattern) is set, or error explains why the
    habit's analytics were unavailable.
    """

    habit_id: str
    forecast: StreakForecast | None = None
    timing_pattern: TimingPattern | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.forecast is not None


# =============================================================================
# Mood adjustment
# =============================================================================


@dataclass(frozen=True)
class SuggestionModification:
    energy_adjustment: str
    time_reduction_pct: int | None = None
    alternative_suggestion: str | None = None


@dataclass
class MoodAdjustment:
    habit_id: str
    baseline_complexity: Complexity
    current_mood: Mood
    adjusted_complexity: Complexity
    suggestion_modification: SuggestionModification
    motivational_approach: MotivationalApproach
    contextual_tips: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return serialize_value(asdict(self))


# =============================================================================
# Recovery plan
# =============================================================================


@dataclass(frozen=True)
class RecoveryAction:
    day: int  # Day of the recovery plan, 1-based
    action: str
    reasoning: str
    difficulty_level: DifficultyLevel


@dataclass(frozen=True)
class PsychologicalSupport:
    reframing_message: str
    encouragement_level: EncouragementLevel
    focus_area: FocusArea


@dataclass
class RecoveryPlan:
    habit_id: str
    broken_streak_length: int
    strategy: RecoveryStrategy
    actions: list[RecoveryAction]
    psychological_support: PsychologicalSupport

    def to_dict(self) -> dict[str, Any]:
        return serialize_value(asdict(self))
