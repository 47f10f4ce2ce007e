"""
Tool: Analytics Integration
Purpose: Turn forecasts into notifications and outreach timing for consumers

This is the thin layer between the analytics engine and whatever delivers
messages to the user. It decides WHAT deserves a nudge and WHEN, never how
the nudge is worded beyond a short plain message - personality and
dialogue are rendered downstream.

Batch Semantics:
    Habits are analyzed concurrently. A habit whose data can't be fetched
    is reported in NotificationBatch.unavailable instead of aborting the
    batch or silently disappearing.

Usage:
    engine = StreakPredictionEngine(SQLiteHabitLedger())

    batch = await generate_contextual_notifications(engine, ["habit_read", "habit_run"])
    for notification in batch.notifications:
        deliver(notification)

    strategy = await analyze_optimal_intervention_strategy(engine, "habit_read")
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any

from habitcore.analytics.engine import StreakPredictionEngine, get_default_forecast
from habitcore.analytics.models import RiskLevel, StreakForecast, TimingPattern, serialize_value

logger = logging.getLogger(__name__)


class NotificationType(StrEnum):
    TIMING_OPTIMAL = "timing-optimal"
    STREAK_RISK = "streak-risk"


class NotificationPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


PRIORITY_ORDER = {
    NotificationPriority.URGENT: 4,
    NotificationPriority.HIGH: 3,
    NotificationPriority.MEDIUM: 2,
    NotificationPriority.LOW: 1,
}


class OutreachStrategy(StrEnum):
    IMMEDIATE = "immediate"
    PREVENTIVE = "preventive"
    SCHEDULED = "scheduled"
    REACTIVE = "reactive"


# Notification lifetimes
OPTIMAL_TIMING_TTL = timedelta(hours=1)
STREAK_RISK_TTL = timedelta(hours=24)

# day7 below this triggers a streak-risk notification even at medium risk
STREAK_RISK_DAY7 = 0.5

# Morning, afternoon and evening slots assumed when a habit's timing is unknown
DEFAULT_OPTIMAL_HOURS = [9, 14, 19]


@dataclass
class ContextualNotification:
    """A notification ready for the delivery scheduler."""

    id: str
    habit_id: str
    type: NotificationType
    priority: NotificationPriority
    message: str
    scheduled_for: datetime
    expires_at: datetime
    action: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return serialize_value(asdict(self))


@dataclass
class NotificationBatch:
    notifications: list[ContextualNotification] = field(default_factory=list)
    # habit_id -> reason the habit's analytics were unavailable
    unavailable: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "notifications": [n.to_dict() for n in self.notifications],
            "unavailable": dict(self.unavailable),
            "total": len(self.notifications),
        }


@dataclass
class InterventionStrategy:
    habit_id: str
    strategy: OutreachStrategy
    timing: datetime
    approach: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return serialize_value(asdict(self))


def find_next_optimal_hour(optimal_hours: list[int], now: datetime) -> datetime:
    """Next optimal hour later today, else the earliest one tomorrow."""
    later_today = sorted(hour for hour in optimal_hours if hour > now.hour)
    if later_today:
        return now.replace(hour=later_today[0], minute=0, second=0, microsecond=0)

    tomorrow = now + timedelta(days=1)
    return tomorrow.replace(hour=min(optimal_hours), minute=0, second=0, microsecond=0)


def _optimal_timing_notification(
    pattern: TimingPattern, now: datetime
) -> ContextualNotification:
    success_rate = round(pattern.completion_rate * 100)
    return ContextualNotification(
        id=f"timing-{pattern.habit_id}-{int(now.timestamp())}",
        habit_id=pattern.habit_id,
        type=NotificationType.TIMING_OPTIMAL,
        priority=NotificationPriority.MEDIUM,
        message=f"Now is your optimal time for this habit ({success_rate}% success rate).",
        scheduled_for=now,
        expires_at=now + OPTIMAL_TIMING_TTL,
    )


def _streak_risk_notification(forecast: StreakForecast, now: datetime) -> ContextualNotification:
    high_risk = forecast.risk_profile == RiskLevel.HIGH
    return ContextualNotification(
        id=f"streak-risk-{forecast.habit_id}-{int(now.timestamp())}",
        habit_id=forecast.habit_id,
        type=NotificationType.STREAK_RISK,
        priority=NotificationPriority.URGENT if high_risk else NotificationPriority.HIGH,
        message=f"Your {forecast.current_streak}-day streak needs attention",
        scheduled_for=now,
        expires_at=now + STREAK_RISK_TTL,
        action={
            "type": "difficulty-adjustment",
            "data": {"reduce": True, "support_level": "high"},
        },
    )


async def generate_contextual_notifications(
    engine: StreakPredictionEngine,
    habit_ids: list[str],
    now: datetime | None = None,
) -> NotificationBatch:
    """
    Build notifications for a set of habits.

    Emits a timing notification when `now` falls in one of the habit's
    optimal hours, and a streak-risk notification when risk is high or the
    7-day outlook drops below 50%. Highest priority first.
    """
    now = now or datetime.now()
    batch = NotificationBatch()

    for result in await engine.analyze_habits(habit_ids, now):
        if not result.ok:
            batch.unavailable[result.habit_id] = result.error or "unknown error"
            continue

        pattern = result.timing_pattern
        forecast = result.forecast

        if now.hour in pattern.optimal_hours:
            batch.notifications.append(_optimal_timing_notification(pattern, now))

        if forecast.risk_profile == RiskLevel.HIGH or forecast.predictions.day7 < STREAK_RISK_DAY7:
            batch.notifications.append(_streak_risk_notification(forecast, now))

    if batch.unavailable:
        logger.warning(
            f"Notifications skipped for {len(batch.unavailable)} habit(s): "
            f"{', '.join(batch.unavailable)}"
        )

    batch.notifications.sort(key=lambda n: PRIORITY_ORDER[n.priority], reverse=True)
    return batch


async def analyze_optimal_intervention_strategy(
    engine: StreakPredictionEngine,
    habit_id: str,
    now: datetime | None = None,
) -> InterventionStrategy:
    """
    Decide when and how to reach out next for one habit.

    Order of precedence: high risk (right away), a predicted critical date
    (12 hours before it), optimal hours (the next one), otherwise wait for
    the user (two hours out). A habit whose analytics are unavailable is
    scheduled against DEFAULT_OPTIMAL_HOURS.
    """
    now = now or datetime.now()

    result = await engine.analyze_habit(habit_id, now)
    forecast = result.forecast if result.ok else get_default_forecast(habit_id)
    optimal_hours = (
        result.timing_pattern.optimal_hours if result.ok else list(DEFAULT_OPTIMAL_HOURS)
    )

    if forecast.risk_profile == RiskLevel.HIGH:
        return InterventionStrategy(
            habit_id=habit_id,
            strategy=OutreachStrategy.IMMEDIATE,
            timing=now + timedelta(minutes=5),
            approach="Urgent streak protection",
            confidence=0.9,
        )

    if forecast.next_critical_date is not None:
        critical = forecast.next_critical_date
        if not isinstance(critical, datetime):
            critical = datetime.combine(critical, now.time())
        return InterventionStrategy(
            habit_id=habit_id,
            strategy=OutreachStrategy.PREVENTIVE,
            timing=critical - timedelta(hours=12),
            approach="Proactive support before difficulty",
            confidence=0.8,
        )

    if optimal_hours:
        return InterventionStrategy(
            habit_id=habit_id,
            strategy=OutreachStrategy.SCHEDULED,
            timing=find_next_optimal_hour(optimal_hours, now),
            approach="Optimal timing engagement",
            confidence=0.75,
        )

    return InterventionStrategy(
        habit_id=habit_id,
        strategy=OutreachStrategy.REACTIVE,
        timing=now + timedelta(hours=2),
        approach="Respond to user activity",
        confidence=0.6,
    )
