"""
Tool: Habit Data Providers
Purpose: Fetch streak state, timing patterns and completion history

The analytics engine never touches storage directly. It is handed a
HabitDataProvider and awaits the three lookups it needs; any of them may
fail, and the engine substitutes documented defaults when they do.

Providers:
    HabitDataProvider: Abstract async interface
    StaticDataProvider: In-memory values, for tests and embedding callers
    SQLiteHabitLedger: Reference completion ledger backed by data/habits.db,
                       including a simple timing-pattern derivation

Usage:
    ledger = SQLiteHabitLedger()
    ledger.record_completion("habit_read", completed_at=datetime.now())
    streak = await ledger.get_streak_state("habit_read")

Dependencies:
    - sqlite3 (stdlib)
    - asyncio (stdlib)
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from abc import ABC, abstractmethod
from collections import Counter
from datetime import date, datetime, timedelta
from pathlib import Path

from habitcore.analytics import DB_PATH
from habitcore.analytics.models import (
    CompletionEntry,
    EnergyPattern,
    StreakState,
    TimingPattern,
)

logger = logging.getLogger(__name__)

# Day name mapping, Monday first to match date.weekday()
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Window the timing pattern is derived from
TIMING_LOOKBACK_DAYS = 30


class DataUnavailableError(Exception):
    """An upstream lookup failed or returned nothing usable."""


class HabitDataProvider(ABC):
    """Async source of the per-habit inputs the forecast needs."""

    @abstractmethod
    async def get_streak_state(self, habit_id: str) -> StreakState:
        """Current and longest streak for a habit."""

    @abstractmethod
    async def get_timing_pattern(self, habit_id: str) -> TimingPattern:
        """Behavioural summary for a habit."""

    @abstractmethod
    async def get_completion_history(
        self, habit_id: str, days: int, today: date | None = None
    ) -> list[CompletionEntry]:
        """One entry per day for the last `days` days, most recent first."""


class StaticDataProvider(HabitDataProvider):
    """
    Serves fixed values from dictionaries keyed by habit ID.

    A missing key raises DataUnavailableError, which is how tests simulate
    an upstream outage.
    """

    def __init__(
        self,
        streaks: dict[str, StreakState] | None = None,
        patterns: dict[str, TimingPattern] | None = None,
        histories: dict[str, list[CompletionEntry]] | None = None,
    ):
        self.streaks = streaks or {}
        self.patterns = patterns or {}
        self.histories = histories or {}

    async def get_streak_state(self, habit_id: str) -> StreakState:
        if habit_id not in self.streaks:
            raise DataUnavailableError(f"No streak state for {habit_id}")
        return self.streaks[habit_id]

    async def get_timing_pattern(self, habit_id: str) -> TimingPattern:
        if habit_id not in self.patterns:
            raise DataUnavailableError(f"No timing pattern for {habit_id}")
        return self.patterns[habit_id]

    async def get_completion_history(
        self, habit_id: str, days: int, today: date | None = None
    ) -> list[CompletionEntry]:
        if habit_id not in self.histories:
            raise DataUnavailableError(f"No completion history for {habit_id}")
        ordered = sorted(self.histories[habit_id], key=lambda e: e.date, reverse=True)
        return ordered[:days]


class SQLiteHabitLedger(HabitDataProvider):
    """
    Completion ledger stored in SQLite.

    One row per habit per completed day. Blocking queries run in a worker
    thread so the async interface never stalls the event loop.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = Path(db_path) if db_path else DB_PATH

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row

        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS habit_completions (
                habit_id TEXT NOT NULL,
                date_key TEXT NOT NULL,
                completed_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                hour INTEGER NOT NULL,
                PRIMARY KEY(habit_id, date_key)
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_completions_habit ON habit_completions(habit_id)"
        )

        conn.commit()
        return conn

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def record_completion(self, habit_id: str, completed_at: datetime | None = None) -> bool:
        """
        Mark a habit done for the day of `completed_at`.

        Returns False when the day was already recorded.
        """
        ts = completed_at or datetime.now()

        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute(
            """
            INSERT OR IGNORE INTO habit_completions (habit_id, date_key, completed_at, hour)
            VALUES (?, ?, ?, ?)
        """,
            (habit_id, ts.date().isoformat(), ts.isoformat(), ts.hour),
        )
        inserted = cursor.rowcount > 0
        conn.commit()
        conn.close()

        return inserted

    # -------------------------------------------------------------------------
    # Sync queries
    # -------------------------------------------------------------------------

    def _completion_rows(self, habit_id: str, since: date | None = None) -> list[sqlite3.Row]:
        conn = self.get_connection()
        cursor = conn.cursor()
        if since is None:
            cursor.execute(
                "SELECT date_key, hour FROM habit_completions WHERE habit_id = ? ORDER BY date_key",
                (habit_id,),
            )
        else:
            cursor.execute(
                """
                SELECT date_key, hour FROM habit_completions
                WHERE habit_id = ? AND date_key >= ?
                ORDER BY date_key
            """,
                (habit_id, since.isoformat()),
            )
        rows = cursor.fetchall()
        conn.close()
        return rows

    def _completed_dates(self, habit_id: str) -> set[date]:
        return {date.fromisoformat(row["date_key"]) for row in self._completion_rows(habit_id)}

    def streak_state(self, habit_id: str, today: date | None = None) -> StreakState:
        today = today or date.today()
        dates = self._completed_dates(habit_id)
        if not dates:
            return StreakState(current=0, longest=0)

        # The streak is still alive if today or yesterday was completed
        current = 0
        check = today if today in dates else today - timedelta(days=1)
        while check in dates:
            current += 1
            check -= timedelta(days=1)

        longest = 0
        run = 0
        previous = None
        for day in sorted(dates):
            if previous is not None and day - previous == timedelta(days=1):
                run += 1
            else:
                run = 1
            longest = max(longest, run)
            previous = day

        return StreakState(current=current, longest=longest)

    def completion_history(
        self, habit_id: str, days: int, today: date | None = None
    ) -> list[CompletionEntry]:
        today = today or date.today()
        dates = self._completed_dates(habit_id)

        history = []
        for offset in range(days):
            day = today - timedelta(days=offset)
            history.append(CompletionEntry(date=day, completed=day in dates))
        return history

    def timing_pattern(self, habit_id: str, today: date | None = None) -> TimingPattern:
        """Derive a timing pattern from the last 30 days of completions."""
        today = today or date.today()
        if not self._completion_rows(habit_id):
            raise DataUnavailableError(f"No completions recorded for {habit_id}")

        history = self.completion_history(habit_id, TIMING_LOOKBACK_DAYS, today)
        completion_rate = sum(1 for e in history if e.completed) / len(history)

        totals = Counter()
        done = Counter()
        for entry in history:
            name = DAY_NAMES[entry.date.weekday()]
            totals[name] += 1
            if entry.completed:
                done[name] += 1
        weekday_pattern = {
            name: (done[name] / totals[name] if totals[name] else 0.0) for name in DAY_NAMES
        }

        # Worst two days under 50%
        difficult_days = [
            name
            for name, rate in sorted(weekday_pattern.items(), key=lambda item: item[1])
            if rate < 0.5
        ][:2]

        since = today - timedelta(days=TIMING_LOOKBACK_DAYS - 1)
        hour_counts = Counter(row["hour"] for row in self._completion_rows(habit_id, since))
        optimal_hours = [
            hour for hour, _ in sorted(hour_counts.items(), key=lambda item: (-item[1], item[0]))
        ][:3]

        current = self.streak_state(habit_id, today).current
        weekday_consistency = sum(weekday_pattern.values()) / len(DAY_NAMES)
        streak_potential = min(
            (completion_rate + min(current * 0.1, 0.3) + weekday_consistency) / 3, 0.95
        )

        return TimingPattern(
            habit_id=habit_id,
            completion_rate=completion_rate,
            streak_potential=streak_potential,
            optimal_hours=optimal_hours,
            difficult_days=difficult_days,
            energy_pattern=energy_pattern_for_hours(optimal_hours),
            weekday_pattern=weekday_pattern,
        )

    # -------------------------------------------------------------------------
    # Async interface
    # -------------------------------------------------------------------------

    async def get_streak_state(self, habit_id: str) -> StreakState:
        return await self._run(self.streak_state, habit_id)

    async def get_timing_pattern(self, habit_id: str) -> TimingPattern:
        return await self._run(self.timing_pattern, habit_id)

    async def get_completion_history(
        self, habit_id: str, days: int, today: date | None = None
    ) -> list[CompletionEntry]:
        return await self._run(self.completion_history, habit_id, days, today)

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as e:
            raise DataUnavailableError(f"Ledger query failed: {e}") from e


def energy_pattern_for_hours(hours: list[int]) -> EnergyPattern:
    """Classify a set of preferred hours by their mean."""
    if not hours:
        return EnergyPattern.FLEXIBLE

    avg_hour = sum(hours) / len(hours)
    if avg_hour <= 11:
        return EnergyPattern.MORNING
    elif avg_hour <= 16:
        return EnergyPattern.AFTERNOON
    return EnergyPattern.EVENING
