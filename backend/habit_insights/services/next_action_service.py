"""
Next-action ranking.

Orders today's not-yet-completed habits so the first one is the best thing
to do right now. Uses only schedule metadata and streak counters.
"""

from typing import Dict, Iterable, List, Optional, Sequence
from datetime import datetime

from habit_insights.models.ranked_habit import RankedHabit
from habit_insights.utils.time_utils import hour_from_time_string, weekday_code


class NextActionService:
    """Score and order eligible habits for the current moment."""

    DAY_MATCH_BONUS = 10
    DAY_MISMATCH_PENALTY = -5

    # Time windows scored by distance from an anchor hour
    WINDOW_ANCHORS = {
        'morning': 9,
        'afternoon': 14,
        'evening': 19,
        'lunch': 12
    }
    WINDOW_MAX_SCORE = 8
    SPECIFIC_MAX_SCORE = 10
    ANYTIME_SCORE = 4

    # (max streak, score): nascent streaks need the most help
    STREAK_NEED_TIERS = [(1, 10), (3, 7), (7, 5)]
    STABLE_STREAK_SCORE = 2

    @staticmethod
    def rank(
        habits: Sequence[RankedHabit],
        exclude_ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None
    ) -> List[RankedHabit]:
        """
        Rank eligible habits best-first.

        Completed habits and excluded ids are dropped. Ties keep their input
        order. Scores are not attached to the returned habits.
        """
        now = now or datetime.now()
        excluded = set(exclude_ids or ())

        eligible = [h for h in habits if not h.completed and h.id not in excluded]
        scored = [(NextActionService.score(h, now), h) for h in eligible]
        # sorted() is stable, so equal scores keep input order
        scored = sorted(scored, key=lambda item: item[0], reverse=True)
        return [habit for _, habit in scored]

    @staticmethod
    def next_action(
        habits: Sequence[RankedHabit],
        exclude_ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None
    ) -> Optional[RankedHabit]:
        ranked = NextActionService.rank(habits, exclude_ids, now)
        return ranked[0] if ranked else None

    @staticmethod
    def score(habit: RankedHabit, now: datetime) -> int:
        breakdown = NextActionService.score_breakdown(habit, now)
        return breakdown['day_match'] + breakdown['proximity'] + breakdown['streak_need']

    @staticmethod
    def score_breakdown(habit: RankedHabit, now: datetime) -> Dict[str, int]:
        """The three score terms for one habit, for display or debugging."""
        return {
            'day_match': NextActionService.day_match_score(habit, now),
            'proximity': NextActionService.proximity_score(habit, now.hour),
            'streak_need': NextActionService.streak_need_score(habit.streak)
        }

    @staticmethod
    def day_match_score(habit: RankedHabit, now: datetime) -> int:
        if not habit.days_of_week or weekday_code(now.date()) in habit.days_of_week:
            return NextActionService.DAY_MATCH_BONUS
        return NextActionService.DAY_MISMATCH_PENALTY

    @staticmethod
    def proximity_score(habit: RankedHabit, current_hour: int) -> int:
        time_type = habit.time_type

        if time_type in NextActionService.WINDOW_ANCHORS:
            distance = abs(current_hour - NextActionService.WINDOW_ANCHORS[time_type])
            return NextActionService.WINDOW_MAX_SCORE - min(distance, NextActionService.WINDOW_MAX_SCORE)

        if time_type == 'specific':
            hour = hour_from_time_string(habit.specific_time)
            if hour is None:
                return 0
            distance = abs(current_hour - hour)
            return NextActionService.SPECIFIC_MAX_SCORE - min(distance, NextActionService.SPECIFIC_MAX_SCORE)

        # anytime, unset or unknown
        return NextActionService.ANYTIME_SCORE

    @staticmethod
    def streak_need_score(streak: int) -> int:
        for max_streak, score in NextActionService.STREAK_NEED_TIERS:
            if streak <= max_streak:
                return score
        return NextActionService.STABLE_STREAK_SCORE
