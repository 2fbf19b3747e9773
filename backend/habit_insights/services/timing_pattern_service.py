"""
Timing pattern analysis for a single habit.

Detects:
- Optimal completion hours (from completion timestamps when available)
- Day-of-week success rates and the hardest days
- Mood-to-completion rates
- Overall streak potential and energy period
"""

from typing import Callable, Dict, List, Optional, Sequence
import logging

import numpy as np

from habit_insights.models.completion_record import CompletionRecord, StreakState
from habit_insights.models.timing_pattern import HabitTimingPattern
from habit_insights.services.analytics_base import AnalyticsGrouper, AnalyticsStatsCalculator
from habit_insights.utils.time_utils import DAY_NAMES

logger = logging.getLogger(__name__)

MoodProvider = Callable[[str, Sequence[CompletionRecord]], Optional[Dict[str, float]]]


class TimingPatternService:
    """Infer when and how reliably a habit is completed."""

    DEFAULT_OPTIMAL_HOURS = [9, 14, 19]
    DEFAULT_COMPLETION_RATE = 0.5
    DEFAULT_STREAK_POTENTIAL = 0.5

    # Cold-start weekday rates: midweek slightly stronger, weekend weaker
    DEFAULT_WEEKDAY_PATTERN = {
        'Monday': 0.6,
        'Tuesday': 0.6,
        'Wednesday': 0.5,
        'Thursday': 0.5,
        'Friday': 0.4,
        'Saturday': 0.4,
        'Sunday': 0.4
    }

    # Placeholder mood tables. Completion data is not mood-tagged yet, so
    # these stand in until a mood provider or mood-tagged records exist.
    DEFAULT_MOOD_CORRELATION = {
        'happy': 0.7,
        'neutral': 0.5,
        'sad': 0.3,
        'frustrated': 0.4,
        'excited': 0.8
    }
    PLACEHOLDER_MOOD_CORRELATION = {
        'happy': 0.85,
        'neutral': 0.60,
        'sad': 0.35,
        'frustrated': 0.45,
        'excited': 0.90
    }

    MAX_OPTIMAL_HOURS = 3
    MAX_DIFFICULT_DAYS = 2
    DIFFICULT_DAY_THRESHOLD = 0.5
    STREAK_BONUS_PER_DAY = 0.1
    MAX_STREAK_BONUS = 0.3
    MAX_STREAK_POTENTIAL = 0.95

    # Upper bound (inclusive) of mean optimal hour for each energy period
    MORNING_CUTOFF_HOUR = 11
    AFTERNOON_CUTOFF_HOUR = 16

    @staticmethod
    def analyze_timing(
        habit_id: str,
        history: Sequence[CompletionRecord],
        streak: Optional[StreakState] = None,
        mood_provider: Optional[MoodProvider] = None
    ) -> HabitTimingPattern:
        """
        Build the timing pattern for one habit.

        Args:
            habit_id: Habit identifier
            history: Completion records over the lookback window, oldest first
            streak: Current/longest streak counters from the store
            mood_provider: Optional override for the mood correlation table;
                returning None falls back to the built-in behaviour

        Returns:
            HabitTimingPattern. Never raises: on any error the documented
            default pattern is returned.
        """
        try:
            if not history:
                return TimingPatternService.default_pattern(habit_id)

            streak = streak or StreakState()

            completion_rate = AnalyticsStatsCalculator.completion_ratio(history)
            weekday_pattern = TimingPatternService._calculate_weekday_pattern(history)
            observed_hours = TimingPatternService._calculate_optimal_hours(history)
            optimal_hours = observed_hours or list(TimingPatternService.DEFAULT_OPTIMAL_HOURS)

            mood_correlation = None
            if mood_provider is not None:
                mood_correlation = mood_provider(habit_id, history)
            if mood_correlation is None:
                mood_correlation = TimingPatternService._calculate_mood_correlation(history)

            return HabitTimingPattern(
                habit_id=habit_id,
                optimal_hours=optimal_hours,
                completion_rate=completion_rate,
                weekday_pattern=weekday_pattern,
                mood_correlation=mood_correlation,
                streak_potential=TimingPatternService._calculate_streak_potential(
                    completion_rate, streak.current, weekday_pattern
                ),
                difficult_days=TimingPatternService._identify_difficult_days(weekday_pattern),
                energy_pattern=TimingPatternService._determine_energy_pattern(observed_hours),
                hours_observed=bool(observed_hours)
            )
        except Exception:
            logger.exception("Error analyzing habit timing for %s", habit_id)
            return TimingPatternService.default_pattern(habit_id)

    @staticmethod
    def default_pattern(habit_id: str) -> HabitTimingPattern:
        """
        Cold-start pattern used for empty histories and on failure.

        optimal_hours=[9, 14, 19], completion_rate=0.5, energy 'flexible';
        difficult days come from the default weekday map (Friday, Saturday).
        """
        weekday_pattern = dict(TimingPatternService.DEFAULT_WEEKDAY_PATTERN)
        return HabitTimingPattern(
            habit_id=habit_id,
            optimal_hours=list(TimingPatternService.DEFAULT_OPTIMAL_HOURS),
            completion_rate=TimingPatternService.DEFAULT_COMPLETION_RATE,
            weekday_pattern=weekday_pattern,
            mood_correlation=dict(TimingPatternService.DEFAULT_MOOD_CORRELATION),
            streak_potential=TimingPatternService.DEFAULT_STREAK_POTENTIAL,
            difficult_days=TimingPatternService._identify_difficult_days(weekday_pattern),
            energy_pattern='flexible',
            hours_observed=False
        )

    @staticmethod
    def _calculate_weekday_pattern(history: Sequence[CompletionRecord]) -> Dict[str, float]:
        """Completed / total per weekday; days never observed score 0."""
        groups = AnalyticsGrouper.group_by_criterion(
            history,
            lambda r: r.date.weekday(),
            lambda r: r.completed
        )

        pattern = {}
        for index, day in enumerate(DAY_NAMES):
            flags = groups.get(index, [])
            pattern[day] = (sum(flags) / len(flags)) if flags else 0.0
        return pattern

    @staticmethod
    def _calculate_optimal_hours(history: Sequence[CompletionRecord]) -> List[int]:
        """
        Top completion hours, most frequent first (ties: earlier hour first).

        Only completed records carrying a timestamp count; an empty list means
        the history holds no time-of-day information.
        """
        hours = [r.completion_hour for r in history if r.completion_hour is not None]
        if not hours:
            return []

        hour_counts = np.bincount(np.asarray(hours, dtype=int), minlength=24)
        # Stable sort on -count keeps hours ascending within equal counts
        ranked = np.argsort(-hour_counts, kind='stable')
        return [
            int(hour) for hour in ranked[:TimingPatternService.MAX_OPTIMAL_HOURS]
            if hour_counts[hour] > 0
        ]

    @staticmethod
    def _calculate_mood_correlation(history: Sequence[CompletionRecord]) -> Dict[str, float]:
        """Per-mood completion rate when records are mood-tagged."""
        tagged = [r for r in history if r.mood]
        if not tagged:
            return dict(TimingPatternService.PLACEHOLDER_MOOD_CORRELATION)

        groups = AnalyticsGrouper.group_by_criterion(
            tagged,
            lambda r: r.mood.strip().lower(),
            lambda r: r.completed
        )
        return {
            mood: round(sum(flags) / len(flags), 2)
            for mood, flags in groups.items()
        }

    @staticmethod
    def _calculate_streak_potential(
        completion_rate: float,
        current_streak: int,
        weekday_pattern: Dict[str, float]
    ) -> float:
        streak_bonus = min(
            current_streak * TimingPatternService.STREAK_BONUS_PER_DAY,
            TimingPatternService.MAX_STREAK_BONUS
        )
        weekday_consistency = AnalyticsStatsCalculator.mean(list(weekday_pattern.values()))
        potential = (completion_rate + streak_bonus + weekday_consistency) / 3
        return min(potential, TimingPatternService.MAX_STREAK_POTENTIAL)

    @staticmethod
    def _identify_difficult_days(weekday_pattern: Dict[str, float]) -> List[str]:
        weak_days = [
            (day, rate) for day, rate in weekday_pattern.items()
            if rate < TimingPatternService.DIFFICULT_DAY_THRESHOLD
        ]
        # sorted() is stable, so equal rates keep Monday..Sunday order
        weak_days = sorted(weak_days, key=lambda item: item[1])
        return [day for day, _ in weak_days[:TimingPatternService.MAX_DIFFICULT_DAYS]]

    @staticmethod
    def _determine_energy_pattern(observed_hours: List[int]) -> str:
        if not observed_hours:
            return 'flexible'

        avg_hour = AnalyticsStatsCalculator.mean(observed_hours)
        if avg_hour <= TimingPatternService.MORNING_CUTOFF_HOUR:
            return 'morning'
        if avg_hour <= TimingPatternService.AFTERNOON_CUTOFF_HOUR:
            return 'afternoon'
        return 'evening'
