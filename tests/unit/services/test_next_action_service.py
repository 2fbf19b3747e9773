"""Tests for habit_insights/services/next_action_service.py

The ranker orders today's open habits by day match, time-window proximity
and how much the streak needs help.

Key behaviors:
- Completed and excluded habits never come back
- Ties keep the caller's order
- Ranking a ranked list changes nothing
"""

from datetime import datetime

import pytest

from habit_insights.models import RankedHabit
from habit_insights.services.next_action_service import NextActionService


# Wednesday 09:00
NINE_AM = datetime(2024, 5, 15, 9, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Ranking Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestRank:
    """Tests for ordering habits."""

    def test_scheduled_morning_habit_beats_anytime(self):
        """A due morning habit with a young streak outranks an established anytime one."""
        a = RankedHabit('a', 'Stretch', time_type='morning', streak=1, days_of_week=frozenset({'wed'}))
        b = RankedHabit('b', 'Read', time_type='anytime', streak=20)

        ranked = NextActionService.rank([b, a], now=NINE_AM)

        assert [h.id for h in ranked] == ['a', 'b']
        assert NextActionService.score(a, NINE_AM) == 28
        assert NextActionService.score(b, NINE_AM) == 16

    def test_filters_completed_and_excluded(self):
        habits = [
            RankedHabit('a', 'A'),
            RankedHabit('b', 'B', completed=True),
            RankedHabit('c', 'C'),
            RankedHabit('d', 'D'),
        ]

        ranked = NextActionService.rank(habits, exclude_ids=['c'], now=NINE_AM)

        ids = [h.id for h in ranked]
        assert ids == ['a', 'd']
        for habit in ranked:
            assert not habit.completed
            assert habit.id != 'c'

    def test_ties_keep_input_order(self):
        habits = [RankedHabit(str(i), f'H{i}', time_type='anytime', streak=5) for i in range(5)]

        ranked = NextActionService.rank(habits, now=NINE_AM)

        assert [h.id for h in ranked] == ['0', '1', '2', '3', '4']

    def test_idempotent(self):
        habits = [
            RankedHabit('a', 'A', time_type='evening', streak=0),
            RankedHabit('b', 'B', time_type='morning', streak=12),
            RankedHabit('c', 'C', time_type='specific', specific_time='10:15', streak=2),
            RankedHabit('d', 'D', days_of_week=frozenset({'mon'})),
            RankedHabit('e', 'E', time_type='lunch', streak=4),
        ]

        once = NextActionService.rank(habits, now=NINE_AM)
        twice = NextActionService.rank(once, now=NINE_AM)

        assert once == twice

    def test_returns_original_objects(self):
        habit = RankedHabit('a', 'A')

        ranked = NextActionService.rank([habit], now=NINE_AM)

        assert ranked[0] is habit

    def test_empty_input(self):
        assert NextActionService.rank([], now=NINE_AM) == []

    def test_next_action(self):
        habits = [RankedHabit('a', 'A', time_type='evening', streak=30), RankedHabit('b', 'B', time_type='morning')]

        assert NextActionService.next_action(habits, now=NINE_AM).id == 'b'
        assert NextActionService.next_action([RankedHabit('a', 'A', completed=True)], now=NINE_AM) is None


# ─────────────────────────────────────────────────────────────────────────────
# Score Term Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestDayMatch:

    def test_every_day_when_unrestricted(self):
        assert NextActionService.day_match_score(RankedHabit('a', 'A'), NINE_AM) == 10

    def test_scheduled_today(self):
        habit = RankedHabit('a', 'A', days_of_week=frozenset({'mon', 'wed'}))

        assert NextActionService.day_match_score(habit, NINE_AM) == 10

    def test_not_scheduled_today(self):
        habit = RankedHabit('a', 'A', days_of_week=frozenset({'mon'}))

        assert NextActionService.day_match_score(habit, NINE_AM) == -5


class TestProximity:

    @pytest.mark.parametrize("time_type,hour,expected", [
        ('morning', 9, 8),
        ('morning', 12, 5),
        ('evening', 9, 0),
        ('afternoon', 14, 8),
        ('lunch', 11, 7),
        ('anytime', 3, 4),
        (None, 3, 4),
        ('unknown', 3, 4),
    ])
    def test_windows(self, time_type, hour, expected):
        habit = RankedHabit('a', 'A', time_type=time_type)

        assert NextActionService.proximity_score(habit, hour) == expected

    @pytest.mark.parametrize("specific_time,expected", [
        ('09:30', 10),
        ('12:00', 7),
        ('23:00', 0),
        ('abc', 0),
        ('25:00', 0),
        (None, 0),
    ])
    def test_specific_time(self, specific_time, expected):
        habit = RankedHabit('a', 'A', time_type='specific', specific_time=specific_time)

        assert NextActionService.proximity_score(habit, 9) == expected


class TestStreakNeed:

    @pytest.mark.parametrize("streak,expected", [
        (0, 10), (1, 10), (2, 7), (3, 7), (4, 5), (7, 5), (8, 2), (100, 2),
    ])
    def test_tiers(self, streak, expected):
        assert NextActionService.streak_need_score(streak) == expected

    def test_breakdown_sums_to_score(self):
        habit = RankedHabit('a', 'A', time_type='afternoon', streak=3)

        breakdown = NextActionService.score_breakdown(habit, NINE_AM)

        assert breakdown == {'day_match': 10, 'proximity': 3, 'streak_need': 7}
        assert sum(breakdown.values()) == NextActionService.score(habit, NINE_AM)
