"""
Tool: Streak Prediction Engine
Purpose: Forecast streak survival, adjust difficulty, plan streak recovery

The engine wires the pure analytics components to a data provider:

    provider --(streak, timing pattern, history)--> performance
             --> ensemble --> risk --> score --> interventions

It holds no state between calls. Construct one per provider/config pair
and share it freely; concurrent forecasts never interfere.

Failure Semantics:
    Forecasts never raise for upstream problems. If a lookup fails or
    returns nothing usable, generate_streak_forecast() returns the
    documented default forecast and logs a warning. analyze_habit() returns
    the same failure as an explicit result instead, for batch callers that
    need to know which habits were unavailable.

Usage:
    # Forecast a habit from the local ledger
    python -m habitcore.analytics.engine --action forecast --habit habit_read

    # Adjust difficulty for the current mood
    python -m habitcore.analytics.engine --action adjust --habit habit_run \\
        --title "Morning run" --mood sad --complexity hard --time-of-day morning

    # Recovery plan after a 5-day streak broke
    python -m habitcore.analytics.engine --action recovery --habit habit_read --broken-length 5

    # Record a completion
    python -m habitcore.analytics.engine --action record --habit habit_read

    # Notifications for several habits
    python -m habitcore.analytics.engine --action notify --habits habit_read,habit_run

    # When to reach out next
    python -m habitcore.analytics.engine --action strategy --habit habit_read

Dependencies:
    - pyyaml / pydantic (calibration via config_models)
    - structlog (CLI log output via habitcore.logging_config)
    - asyncio (stdlib)

Output:
    JSON result with success status and data
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from habitcore.analytics.config_models import StreakPredictionConfig, load_config
from habitcore.analytics.ensemble import ensemble_forecast
from habitcore.analytics.interventions import plan_interventions, predict_next_critical_date
from habitcore.analytics.models import (
    Complexity,
    ForecastPrediction,
    HabitAnalyticsResult,
    Mood,
    MoodAdjustment,
    RecentPerformance,
    RecoveryPlan,
    RiskFactor,
    RiskLevel,
    StreakForecast,
    StreakState,
    TimeOfDay,
    TimingPattern,
)
from habitcore.analytics.mood_adjuster import adjust_difficulty
from habitcore.analytics.performance import analyze_recent_performance
from habitcore.analytics.providers import HabitDataProvider, SQLiteHabitLedger
from habitcore.analytics.recovery import generate_recovery_plan
from habitcore.analytics.risk import classify_risk, identify_risk_factors
from habitcore.analytics.scoring import calculate_sustainability_score
from habitcore.logging_config import setup_logging

logger = logging.getLogger(__name__)


def get_default_forecast(habit_id: str) -> StreakForecast:
    """Forecast returned whenever upstream data is unavailable."""
    return StreakForecast(
        habit_id=habit_id,
        current_streak=0,
        predictions=ForecastPrediction(day7=0.5, day14=0.4, day30=0.3),
        risk_profile=RiskLevel.MEDIUM,
        key_risk_factors=[
            RiskFactor(
                factor="Insufficient data for analysis",
                impact=0.5,
                mitigation="Track consistently for better predictions",
            )
        ],
        streak_sustainability_score=50,
        optimal_interventions=["Start with consistency over complexity"],
        next_critical_date=None,
    )


class StreakPredictionEngine:
    """
    Streak forecasting and adaptive recommendations for habits.

    Args:
        provider: Source of streak state, timing patterns and history.
        config: Calibration settings. Loaded from args/streak_prediction.yaml
            when omitted.
    """

    def __init__(
        self,
        provider: HabitDataProvider,
        config: StreakPredictionConfig | None = None,
    ):
        self.provider = provider
        self.config = config or load_config()

    # -------------------------------------------------------------------------
    # Forecasting
    # -------------------------------------------------------------------------

    def build_forecast(
        self,
        habit_id: str,
        streak: StreakState,
        pattern: TimingPattern,
        performance: RecentPerformance,
        now: datetime,
    ) -> StreakForecast:
        """Pure forecast from already-fetched inputs."""
        predictions = ensemble_forecast(streak, pattern, performance, now, self.config.forecast)
        risk_profile = classify_risk(predictions, self.config.risk)
        risk_factors = identify_risk_factors(pattern, performance, self.config.risk)

        return StreakForecast(
            habit_id=habit_id,
            current_streak=streak.current,
            predictions=predictions,
            risk_profile=risk_profile,
            key_risk_factors=risk_factors,
            streak_sustainability_score=calculate_sustainability_score(
                predictions, pattern, streak, self.config.scoring
            ),
            optimal_interventions=plan_interventions(
                risk_profile, risk_factors, self.config.interventions
            ),
            next_critical_date=predict_next_critical_date(
                predictions, risk_profile, now, self.config.interventions
            ),
        )

    async def analyze_habit(
        self, habit_id: str, now: datetime | None = None
    ) -> HabitAnalyticsResult:
        """
        Fetch inputs and forecast one habit, reporting failure explicitly.

        The three lookups run concurrently.
        """
        now = now or datetime.now()
        today = now.date() if isinstance(now, datetime) else now

        try:
            streak, pattern, history = await asyncio.gather(
                self.provider.get_streak_state(habit_id),
                self.provider.get_timing_pattern(habit_id),
                self.provider.get_completion_history(
                    habit_id, self.config.forecast.history_days, today
                ),
            )
            performance = analyze_recent_performance(history)
            forecast = self.build_forecast(habit_id, streak, pattern, performance, now)
        except Exception as e:
            logger.warning(f"Analytics unavailable for habit {habit_id}: {e}")
            return HabitAnalyticsResult(habit_id=habit_id, error=str(e) or type(e).__name__)

        logger.debug(
            f"Forecast for {habit_id}: risk={forecast.risk_profile} "
            f"score={forecast.streak_sustainability_score}"
        )
        return HabitAnalyticsResult(habit_id=habit_id, forecast=forecast, timing_pattern=pattern)

    async def generate_streak_forecast(
        self, habit_id: str, now: datetime | None = None
    ) -> StreakForecast:
        """
        Forecast streak survival for one habit.

        Never raises for upstream failures; returns the default forecast
        instead.
        """
        result = await self.analyze_habit(habit_id, now)
        if not result.ok:
            return get_default_forecast(habit_id)
        return result.forecast

    async def analyze_habits(
        self, habit_ids: list[str], now: datetime | None = None
    ) -> list[HabitAnalyticsResult]:
        """Analyze several habits concurrently; one failure never aborts the rest."""
        now = now or datetime.now()
        return list(await asyncio.gather(*(self.analyze_habit(h, now) for h in habit_ids)))

    # -------------------------------------------------------------------------
    # Difficulty and recovery
    # -------------------------------------------------------------------------

    def adjust_habit_difficulty(
        self,
        habit_id: str,
        habit_title: str,
        current_mood: Mood | str,
        baseline_complexity: Complexity | str = Complexity.MEDIUM,
        time_of_day: TimeOfDay | str = TimeOfDay.MORNING,
    ) -> MoodAdjustment:
        """Rescale a habit's difficulty for the current mood and time of day."""
        return adjust_difficulty(
            habit_id,
            habit_title,
            current_mood,
            baseline_complexity,
            time_of_day,
            self.config.mood,
        )

    def generate_streak_recovery_plan(
        self, habit_id: str, broken_streak_length: int
    ) -> RecoveryPlan:
        """Recovery plan for a streak of `broken_streak_length` days that just broke."""
        return generate_recovery_plan(habit_id, broken_streak_length)


# =============================================================================
# CLI
# =============================================================================


def _run_action(args: argparse.Namespace) -> dict[str, Any]:
    # integration imports this module
    from habitcore.analytics import integration

    ledger = SQLiteHabitLedger(Path(args.db) if args.db else None)
    config = load_config(Path(args.config)) if args.config else None
    engine = StreakPredictionEngine(ledger, config)

    if args.action == "record":
        when = datetime.fromisoformat(args.date) if args.date else datetime.now()
        inserted = ledger.record_completion(args.habit, when)
        return {
            "success": True,
            "habit_id": args.habit,
            "date": when.date().isoformat(),
            "recorded": inserted,
        }

    if args.action == "forecast":
        forecast = asyncio.run(engine.generate_streak_forecast(args.habit))
        return {"success": True, "forecast": forecast.to_dict()}

    if args.action == "adjust":
        adjustment = engine.adjust_habit_difficulty(
            args.habit, args.title or args.habit, args.mood, args.complexity, args.time_of_day
        )
        return {"success": True, "adjustment": adjustment.to_dict()}

    if args.action == "recovery":
        try:
            plan = engine.generate_streak_recovery_plan(args.habit, args.broken_length)
        except ValueError as e:
            return {"success": False, "error": str(e)}
        return {"success": True, "plan": plan.to_dict()}

    if args.action == "notify":
        habit_ids = [h.strip() for h in args.habits.split(",") if h.strip()]
        batch = asyncio.run(integration.generate_contextual_notifications(engine, habit_ids))
        return {"success": True, **batch.to_dict()}

    if args.action == "strategy":
        strategy = asyncio.run(
            integration.analyze_optimal_intervention_strategy(engine, args.habit)
        )
        return {"success": True, "strategy": strategy.to_dict()}

    return {"success": False, "error": f"Unknown action: {args.action}"}


def main():
    parser = argparse.ArgumentParser(
        description="Streak Prediction Engine - Forecast, adjust and recover habit streaks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Forecast a habit
    python -m habitcore.analytics.engine --action forecast --habit habit_read

    # Difficulty for a sad morning
    python -m habitcore.analytics.engine --action adjust --habit habit_run \\
        --title "Morning run" --mood sad --complexity hard --time-of-day morning

    # Recovery plan
    python -m habitcore.analytics.engine --action recovery --habit habit_read --broken-length 12

    # Record yesterday's completion
    python -m habitcore.analytics.engine --action record --habit habit_read \\
        --date 2025-04-14T07:30:00
        """,
    )

    parser.add_argument(
        "--action",
        required=True,
        choices=["forecast", "adjust", "recovery", "record", "notify", "strategy"],
        help="Action to perform",
    )
    parser.add_argument("--habit", help="Habit ID")
    parser.add_argument("--habits", help="Comma-separated habit IDs for notify")
    parser.add_argument("--title", help="Habit title for adjust")
    parser.add_argument("--mood", default="neutral", help="Current mood for adjust")
    parser.add_argument(
        "--complexity",
        default="medium",
        choices=[c.value for c in Complexity],
        help="Baseline complexity",
    )
    parser.add_argument(
        "--time-of-day",
        default="morning",
        choices=[t.value for t in TimeOfDay],
        help="Time of day",
    )
    parser.add_argument("--broken-length", type=int, help="Length of the broken streak in days")
    parser.add_argument("--date", help="ISO timestamp for record (defaults to now)")
    parser.add_argument("--db", help="Path to the habits database")
    parser.add_argument("--config", help="Path to a calibration YAML file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    setup_logging(level="DEBUG" if args.verbose else None)

    if args.action in ("forecast", "adjust", "recovery", "record", "strategy") and not args.habit:
        print(json.dumps({"success": False, "error": "--habit required"}))
        sys.exit(1)
    if args.action == "recovery" and args.broken_length is None:
        print(json.dumps({"success": False, "error": "--broken-length required"}))
        sys.exit(1)
    if args.action == "notify" and not args.habits:
        print(json.dumps({"success": False, "error": "--habits required"}))
        sys.exit(1)

    result = _run_action(args)

    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
