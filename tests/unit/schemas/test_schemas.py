"""Tests for habit_insights/schemas

Payloads arrive in camelCase from the host app and are loaded into the
engine's frozen models; invalid payloads raise InvalidInputError.
"""

from datetime import date, datetime

import pytest

from habit_insights.exceptions import InvalidInputError
from habit_insights.models import CompletionRecord, RankedHabit, StreakState
from habit_insights.schemas import (
    load_completion_records,
    load_habit_context,
    load_ranked_habits,
    load_streak_state,
    load_user_context,
)


# ─────────────────────────────────────────────────────────────────────────────
# Completion Record Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestCompletionRecords:

    def test_loads_and_sorts(self):
        records = load_completion_records([
            {'date': '2024-05-15', 'completed': True, 'completedAt': '2024-05-15T07:30:00', 'mood': 'happy'},
            {'date': '2024-05-14', 'completed': False},
        ])

        assert [r.date for r in records] == [date(2024, 5, 14), date(2024, 5, 15)]
        assert isinstance(records[0], CompletionRecord)
        assert records[0].planned is True
        assert records[1].completed_at == datetime(2024, 5, 15, 7, 30)
        assert records[1].completion_hour == 7

    def test_timestamp_on_other_day_dropped(self):
        records = load_completion_records([
            {'date': '2024-05-15', 'completed': True, 'completedAt': '2024-05-14T23:50:00'},
        ])

        assert records[0].completed_at is None
        assert records[0].completed is True

    def test_unknown_fields_ignored(self):
        records = load_completion_records([{'date': '2024-05-15', 'completed': True, 'note': 'x'}])

        assert len(records) == 1

    def test_missing_required_field(self):
        with pytest.raises(InvalidInputError) as exc_info:
            load_completion_records([{'date': '2024-05-15'}])

        assert 0 in exc_info.value.details
        assert 'completed' in exc_info.value.details[0]


class TestStreakState:

    def test_defaults(self):
        assert load_streak_state({}) == StreakState(current=0, longest=0)

    def test_negative_rejected(self):
        with pytest.raises(InvalidInputError):
            load_streak_state({'current': -2})


# ─────────────────────────────────────────────────────────────────────────────
# Habit Payload Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestRankedHabits:

    def test_loads_camel_case(self):
        habits = load_ranked_habits([
            {'id': 'a', 'title': 'Stretch', 'timeType': 'morning', 'daysOfWeek': ['mon', 'wed'], 'streak': 3},
            {'id': 'b', 'title': 'Read', 'specificTime': '21:00', 'timeType': 'specific'},
        ])

        assert habits[0] == RankedHabit(
            'a', 'Stretch', streak=3, time_type='morning', days_of_week=frozenset({'mon', 'wed'})
        )
        assert habits[1].specific_time == '21:00'
        assert habits[1].days_of_week == frozenset()

    def test_malformed_specific_time_accepted(self):
        habits = load_ranked_habits([{'id': 'a', 'timeType': 'specific', 'specificTime': 'soon'}])

        assert habits[0].specific_time == 'soon'

    def test_unknown_time_type_rejected(self):
        with pytest.raises(InvalidInputError):
            load_ranked_habits([{'id': 'a', 'timeType': 'midnight'}])

    def test_unknown_day_code_rejected(self):
        with pytest.raises(InvalidInputError):
            load_ranked_habits([{'id': 'a', 'daysOfWeek': ['funday']}])

    def test_day_codes_are_case_sensitive(self):
        with pytest.raises(InvalidInputError) as exc_info:
            load_ranked_habits([{'id': 'a', 'daysOfWeek': ['Mon']}])

        assert 0 in exc_info.value.details


class TestContexts:

    def test_habit_context(self):
        habit = load_habit_context({'id': 'a', 'name': 'Run', 'difficulty': 'hard', 'streak': 4})

        assert habit.difficulty == 'hard'
        assert habit.completed is False

    def test_habit_context_bad_difficulty(self):
        with pytest.raises(InvalidInputError):
            load_habit_context({'id': 'a', 'name': 'Run', 'difficulty': 'extreme'})

    def test_user_context(self):
        user = load_user_context({
            'currentHour': 9,
            'dayOfWeek': 'Monday',
            'completionRate': 0.25,
            'totalHabits': 4,
            'completedHabits': 1,
        })

        assert user.current_hour == 9
        assert user.day_of_week == 'Monday'
        assert user.completion_rate == 0.25

    @pytest.mark.parametrize("payload", [
        {'currentHour': 24, 'dayOfWeek': 'Monday', 'completionRate': 0.5},
        {'currentHour': 9, 'dayOfWeek': 'Mon', 'completionRate': 0.5},
        {'currentHour': 9, 'dayOfWeek': 'Monday', 'completionRate': 1.5},
    ])
    def test_user_context_invalid(self, payload):
        with pytest.raises(InvalidInputError):
            load_user_context(payload)
