"""
Calibration settings for streak analytics (args/streak_prediction.yaml).

Every magic number the forecast, risk, mood and recovery components use
lives here so it can be tuned and tested apart from the combination logic.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from habitcore.analytics import CONFIG_PATH

logger = logging.getLogger(__name__)


# =============================================================================
# Forecast
# =============================================================================


class HorizonTriple(BaseModel):
    """One value per forecast horizon."""

    model_config = ConfigDict(extra="forbid")
    day7: float
    day14: float
    day30: float


class ModelWeights(BaseModel):
    """Ensemble weights in model order: baseline, trend, seasonal."""

    model_config = ConfigDict(extra="forbid")
    baseline: float = Field(ge=0.0)
    trend: float = Field(ge=0.0)
    seasonal: float = Field(ge=0.0)


class BaselineModelConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    streak_stability_per_day: float = Field(default=0.05, ge=0.0)
    streak_stability_cap: float = Field(default=0.3, ge=0.0)
    decay: HorizonTriple = Field(
        default_factory=lambda: HorizonTriple(day7=0.95, day14=0.85, day30=0.70)
    )
    caps: HorizonTriple = Field(
        default_factory=lambda: HorizonTriple(day7=0.95, day14=0.90, day30=0.85)
    )


class TrendModelConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    min_factor: float = Field(default=0.1)
    max_factor: float = Field(default=1.9)
    day14_decay: float = Field(default=0.9)
    day30_decay: float = Field(default=0.7)
    caps: HorizonTriple = Field(
        default_factory=lambda: HorizonTriple(day7=0.95, day14=0.90, day30=0.85)
    )


class SeasonalModelConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    base: float = Field(default=0.7, ge=0.0, le=1.0)
    weekend_penalty: float = Field(default=0.9, ge=0.0)
    day14_decay: float = Field(default=0.9)
    day30_decay: float = Field(default=0.8)
    # January through December
    month_factors: list[float] = Field(
        default_factory=lambda: [0.9, 0.85, 0.95, 1.0, 1.05, 1.05, 0.95, 0.95, 1.0, 0.95, 0.85, 0.8]
    )

    @field_validator("month_factors")
    @classmethod
    def _twelve_months(cls, value: list[float]) -> list[float]:
        if len(value) != 12:
            raise ValueError(f"month_factors needs 12 entries, got {len(value)}")
        return value


class EnsembleConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    min_probability: float = Field(default=0.05, ge=0.0, le=1.0)
    max_probability: float = Field(default=0.95, ge=0.0, le=1.0)
    day7_weights: ModelWeights = Field(
        default_factory=lambda: ModelWeights(baseline=0.4, trend=0.4, seasonal=0.2)
    )
    day14_weights: ModelWeights = Field(
        default_factory=lambda: ModelWeights(baseline=0.4, trend=0.4, seasonal=0.2)
    )
    day30_weights: ModelWeights = Field(
        default_factory=lambda: ModelWeights(baseline=0.3, trend=0.5, seasonal=0.2)
    )


class ForecastConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    history_days: int = Field(default=14, ge=1)
    baseline: BaselineModelConfig = Field(default_factory=BaselineModelConfig)
    trend: TrendModelConfig = Field(default_factory=TrendModelConfig)
    seasonal: SeasonalModelConfig = Field(default_factory=SeasonalModelConfig)
    ensemble: EnsembleConfig = Field(default_factory=EnsembleConfig)


# =============================================================================
# Risk, scoring and interventions
# =============================================================================


class RiskConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    low_threshold: float = Field(default=0.75)
    medium_threshold: float = Field(default=0.5)
    max_factors: int = Field(default=3, ge=0)
    low_completion_rate: float = Field(default=0.6)
    declining_slope: float = Field(default=-0.1)
    max_difficult_days: int = Field(default=2, ge=0)
    poor_recent_week: float = Field(default=0.5)


class ScoringConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    prediction_weights: HorizonTriple = Field(
        default_factory=lambda: HorizonTriple(day7=0.3, day14=0.4, day30=0.3)
    )
    experience_per_longest_day: float = Field(default=2.0, ge=0.0)
    experience_cap: float = Field(default=30.0, ge=0.0)


class InterventionConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_interventions: int = Field(default=4, ge=1)
    max_factor_mitigations: int = Field(default=2, ge=0)
    no_intervention_day14: float = Field(default=0.7)
    high_risk_days_ahead: int = Field(default=2, ge=0)
    weak_week_threshold: float = Field(default=0.6)
    weak_week_days_ahead: int = Field(default=3, ge=0)
    default_days_ahead: int = Field(default=7, ge=0)


# =============================================================================
# Mood adjustment
# =============================================================================


class ComplexityScores(BaseModel):
    """Baseline difficulty score per complexity label."""

    model_config = ConfigDict(extra="forbid")
    easy: float = Field(default=0.3, ge=0.0)
    medium: float = Field(default=0.6, ge=0.0)
    hard: float = Field(default=0.9, ge=0.0)


class MoodMultipliers(BaseModel):
    """Difficulty multiplier per canonical mood."""

    model_config = ConfigDict(extra="forbid")
    content: float = Field(default=1.0, ge=0.0)
    neutral: float = Field(default=0.8, ge=0.0)
    sad: float = Field(default=0.5, ge=0.0)
    frustrated: float = Field(default=0.6, ge=0.0)
    excited: float = Field(default=1.2, ge=0.0)


class TimeMultipliers(BaseModel):
    """Energy multiplier per time of day."""

    model_config = ConfigDict(extra="forbid")
    morning: float = Field(default=1.1, ge=0.0)
    afternoon: float = Field(default=1.0, ge=0.0)
    evening: float = Field(default=0.9, ge=0.0)
    night: float = Field(default=0.7, ge=0.0)


class TimeReductions(BaseModel):
    """Suggested session cut, in percent, per adjusted complexity."""

    model_config = ConfigDict(extra="forbid")
    easy: int = Field(default=50, ge=0, le=100)
    medium: int = Field(default=25, ge=0, le=100)
    hard: int = Field(default=0, ge=0, le=100)


class MoodConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    complexity_scores: ComplexityScores = Field(default_factory=ComplexityScores)
    mood_multipliers: MoodMultipliers = Field(default_factory=MoodMultipliers)
    time_multipliers: TimeMultipliers = Field(default_factory=TimeMultipliers)
    easy_max_score: float = Field(default=0.4)
    medium_max_score: float = Field(default=0.7)
    time_reduction_pct: TimeReductions = Field(default_factory=TimeReductions)
    max_mood_tips: int = Field(default=2, ge=0)
    max_tips: int = Field(default=3, ge=0)


# =============================================================================
# Root
# =============================================================================


class StreakPredictionConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
    risk: RiskConfig = Field(default_factory=RiskConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    interventions: InterventionConfig = Field(default_factory=InterventionConfig)
    mood: MoodConfig = Field(default_factory=MoodConfig)


def load_config(path: Path | None = None) -> StreakPredictionConfig:
    """
    Load calibration from YAML, falling back to defaults.

    The file may hold the settings at the top level or nested under a
    `streak_prediction` key.
    """
    yaml_path = path or CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        raw = raw.get("streak_prediction", raw)
        return StreakPredictionConfig.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {yaml_path}: {e}, using defaults")
        return StreakPredictionConfig()
