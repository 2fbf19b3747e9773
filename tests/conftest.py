"""Shared test fixtures for habit insights tests.

This module provides common fixtures used across all test modules:
- A fixed reference time so date-dependent output is reproducible
- Builders for completion histories
- A populated in-memory history store

Usage:
    def test_something(make_history, today):
        history = make_history([1, 1, 0, 1], end=today)
        ...
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

import pytest

from habit_insights.config.message_catalog import MessageCatalog
from habit_insights.exceptions import HistoryStoreError
from habit_insights.models import CompletionRecord
from habit_insights.services.history_store import HistoryStore, InMemoryHistoryStore


# ─────────────────────────────────────────────────────────────────────────────
# Reference Time
# ─────────────────────────────────────────────────────────────────────────────

# Wednesday, mid-May
FIXED_NOW = datetime(2024, 5, 15, 10, 0)
FIXED_TODAY = FIXED_NOW.date()


@pytest.fixture
def now() -> datetime:
    """Fixed 'now' (Wednesday 2024-05-15 10:00)."""
    return FIXED_NOW


@pytest.fixture
def today() -> date:
    return FIXED_TODAY


# ─────────────────────────────────────────────────────────────────────────────
# History Builders
# ─────────────────────────────────────────────────────────────────────────────


def build_history(
    flags: Sequence[int],
    end: date = FIXED_TODAY,
    hours: Optional[Sequence[Optional[int]]] = None,
    moods: Optional[Sequence[Optional[str]]] = None,
) -> List[CompletionRecord]:
    """Build an oldest-first history ending on ``end``.

    Args:
        flags: 1/0 completion flags, oldest first
        end: Date of the last record
        hours: Optional completion hour per record (ignored for misses)
        moods: Optional mood label per record
    """
    start = end - timedelta(days=len(flags) - 1)
    records = []
    for index, flag in enumerate(flags):
        day = start + timedelta(days=index)
        hour = hours[index] if hours is not None else None
        completed_at = None
        if flag and hour is not None:
            completed_at = datetime(day.year, day.month, day.day, hour, 0)
        records.append(CompletionRecord(
            date=day,
            completed=bool(flag),
            completed_at=completed_at,
            mood=moods[index] if moods is not None else None,
        ))
    return records


@pytest.fixture
def make_history():
    """Factory fixture wrapping build_history."""
    return build_history


@pytest.fixture
def catalog() -> MessageCatalog:
    """The bundled message catalog."""
    return MessageCatalog()


# ─────────────────────────────────────────────────────────────────────────────
# Store Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def store() -> InMemoryHistoryStore:
    """In-memory store with three habits.

    - 'meditate': done every morning at 07:00 for the last 30 days
    - 'run': done on alternate days in the evening
    - 'read': never done
    """
    s = InMemoryHistoryStore()
    for offset in range(30):
        day = FIXED_TODAY - timedelta(days=offset)
        s.record_completion('meditate', datetime(day.year, day.month, day.day, 7, 0), mood='happy')
        if offset % 2 == 0:
            s.record_completion('run', datetime(day.year, day.month, day.day, 19, 0))
    return s


class UnavailableStore(HistoryStore):
    """Store whose backend is down."""

    def get_completion_history(self, habit_id, days_back, today=None):
        raise HistoryStoreError("backend offline")

    def get_streak_state(self, habit_id, today=None):
        raise HistoryStoreError("backend offline")


@pytest.fixture
def unavailable_store() -> UnavailableStore:
    """Store that raises HistoryStoreError on every read."""
    return UnavailableStore()
