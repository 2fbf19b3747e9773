"""Tests for habit_insights/services/history_store.py"""

from datetime import date, datetime, timedelta

import pytest

from habit_insights.exceptions import HabitInsightsError, HistoryStoreError
from habit_insights.models import CompletionRecord, StreakState
from habit_insights.services.history_store import HistoryStore, InMemoryHistoryStore


class TestCompletionHistory:
    """Tests for the dense day series."""

    def test_one_record_per_day_oldest_first(self, store, today):
        history = store.get_completion_history('run', 7, today)

        assert len(history) == 7
        assert history[0].date == today - timedelta(days=6)
        assert history[-1].date == today
        assert [r.completed for r in history] == [True, False, True, False, True, False, True]
        assert all(r.planned for r in history)

    def test_timestamps_and_moods_carried(self, store, today):
        record = store.get_completion_history('meditate', 1, today)[0]

        assert record.completed_at == datetime(2024, 5, 15, 7, 0)
        assert record.completion_hour == 7
        assert record.mood == 'happy'

    def test_unknown_habit_is_all_missed(self, store, today):
        history = store.get_completion_history('nope', 5, today)

        assert len(history) == 5
        assert not any(r.completed for r in history)

    def test_plain_date_has_no_hour(self, today):
        s = InMemoryHistoryStore()
        s.record_completion('h', today)

        record = s.get_completion_history('h', 1, today)[0]

        assert record.completed
        assert record.completion_hour is None


class TestStreakState:
    """Tests for current and longest streak counters."""

    def test_counts_through_today(self, store, today):
        assert store.get_streak_state('meditate', today) == StreakState(current=30, longest=30)

    def test_counts_from_yesterday_when_today_open(self, today):
        s = InMemoryHistoryStore()
        for offset in (1, 2, 3):
            s.record_completion('h', today - timedelta(days=offset))

        assert s.get_streak_state('h', today).current == 3

    def test_gap_breaks_current_streak(self, today):
        s = InMemoryHistoryStore()
        for offset in (2, 3, 4, 5, 6):
            s.record_completion('h', today - timedelta(days=offset))
        s.record_completion('h', today)

        assert s.get_streak_state('h', today) == StreakState(current=1, longest=5)

    def test_future_completions_ignored(self, today):
        s = InMemoryHistoryStore()
        s.record_completion('h', today + timedelta(days=1))

        assert s.get_streak_state('h', today) == StreakState()

    def test_unknown_habit(self, store, today):
        assert store.get_streak_state('nope', today) == StreakState(current=0, longest=0)

    def test_negative_counters_rejected(self):
        with pytest.raises(ValueError):
            StreakState(current=-1)


class TestLoading:

    def test_load_records_keeps_completed_only(self, today):
        s = InMemoryHistoryStore()
        s.load_records('h', [
            CompletionRecord(date=today - timedelta(days=1), completed=False),
            CompletionRecord(date=today, completed=True, completed_at=datetime(2024, 5, 15, 18, 30), mood='tired'),
        ])

        assert s.completion_dates('h') == [today]
        assert s.habit_ids() == ['h']
        assert s.get_completion_history('h', 1, today)[0].mood == 'tired'

    def test_store_is_abstract(self):
        with pytest.raises(TypeError):
            HistoryStore()

    def test_defaults_to_real_today(self):
        s = InMemoryHistoryStore()
        s.record_completion('h', date.today())

        assert s.get_completion_history('h', 1)[0].completed


class TestStoreErrors:

    def test_store_error_is_engine_error(self, unavailable_store, today):
        with pytest.raises(HabitInsightsError):
            unavailable_store.get_completion_history('h1', 7, today)

        with pytest.raises(HistoryStoreError):
            unavailable_store.get_streak_state('h1', today)
