"""
Recent performance: short-window trend from raw completion history.

Intentionally simple. No smoothing, no regression - the slope is the
difference between the second and first half of the window, scaled by the
first half's length, so it can be explained in one sentence.
"""

from __future__ import annotations

from collections.abc import Iterable

from habitcore.analytics.models import CompletionEntry, RecentPerformance
from habitcore.analytics.providers import DataUnavailableError


def _rate(values: list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def analyze_recent_performance(history: Iterable[CompletionEntry]) -> RecentPerformance:
    """
    Compute 7-day rate, 14-day rate and slope from a completion log.

    The log may arrive in any order; it is sorted oldest first before the
    windows are taken, so "last 7" always means the most recent 7 days.

    Raises:
        DataUnavailableError: if the log is empty
    """
    ordered = sorted(history, key=lambda entry: entry.date)
    if not ordered:
        raise DataUnavailableError("Completion history is empty")

    rates = [1 if entry.completed else 0 for entry in ordered]

    recent7 = _rate(rates[-7:])
    recent14 = _rate(rates[-14:])

    half = len(rates) // 2
    if half == 0:
        slope = 0.0
    else:
        first_half = rates[:half]
        second_half = rates[half:]
        slope = (_rate(second_half) - _rate(first_half)) / len(first_half)

    return RecentPerformance(slope=slope, recent7=recent7, recent14=recent14)
