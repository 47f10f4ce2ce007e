"""Shared test fixtures for habitcore tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A fixed, non-weekend evaluation date
- Standard streak, timing pattern and history data
- A default-calibrated config

Usage:
    def test_something(temp_db, eval_date):
        # temp_db is automatically cleaned up after the test
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from habitcore.analytics.config_models import StreakPredictionConfig
from habitcore.analytics.models import (
    CompletionEntry,
    EnergyPattern,
    RecentPerformance,
    StreakState,
    TimingPattern,
)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


# ─────────────────────────────────────────────────────────────────────────────
# Date Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def eval_date() -> datetime:
    """Tuesday 15 April 2025, 10:00. April's month factor is 1.0."""
    return datetime(2025, 4, 15, 10, 0)


@pytest.fixture
def weekend_date() -> datetime:
    """Saturday 19 April 2025, 10:00."""
    return datetime(2025, 4, 19, 10, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Habit Data Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_habit_id() -> str:
    """Standard test habit ID."""
    return "habit_read_123"


@pytest.fixture
def config() -> StreakPredictionConfig:
    """Built-in calibration, independent of args/streak_prediction.yaml."""
    return StreakPredictionConfig()


@pytest.fixture
def sample_streak() -> StreakState:
    return StreakState(current=10, longest=15)


@pytest.fixture
def sample_pattern(mock_habit_id: str) -> TimingPattern:
    """Timing pattern for a habit done fairly reliably in the morning."""
    return TimingPattern(
        habit_id=mock_habit_id,
        completion_rate=0.8,
        streak_potential=0.6,
        optimal_hours=[7, 8, 9],
        difficult_days=[],
        energy_pattern=EnergyPattern.MORNING,
    )


@pytest.fixture
def sample_performance() -> RecentPerformance:
    return RecentPerformance(slope=0.05, recent7=0.85, recent14=0.8)


@pytest.fixture
def make_history():
    """Factory: build a most-recent-first history from a 0/1 string, oldest first.

    make_history("0011", today) -> four days ending today, last two completed.
    """

    def _make(flags: str, today: date) -> list[CompletionEntry]:
        n = len(flags)
        entries = [
            CompletionEntry(date=today - timedelta(days=n - 1 - i), completed=flag == "1")
            for i, flag in enumerate(flags)
        ]
        return list(reversed(entries))

    return _make

