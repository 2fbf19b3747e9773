from typing import Optional, Sequence
from datetime import date
import logging

from habit_insights.config.message_catalog import MessageCatalog, get_default_catalog
from habit_insights.models.completion_record import CompletionRecord
from habit_insights.models.streak_prediction import StreakPrediction
from habit_insights.models.timing_pattern import HabitTimingPattern
from habit_insights.models.weekly_report import WeeklyHabitReport
from habit_insights.utils.time_utils import format_hour, week_start

logger = logging.getLogger(__name__)


class WeeklyReportService:
    """Seven-day summary of a daily habit."""

    TARGET_COMPLETIONS = 7  # daily habit
    DEFAULT_PRODUCTIVE_HOUR = 9
    STREAK_CONTINUATION_FACTOR = 0.9

    @staticmethod
    def generate_weekly_report(
        habit_id: str,
        habit_title: str,
        week_records: Sequence[CompletionRecord],
        pattern: HabitTimingPattern,
        prediction: StreakPrediction,
        start: Optional[date] = None,
        catalog: Optional[MessageCatalog] = None
    ) -> WeeklyHabitReport:
        """
        Summarize the last week of a habit.

        Args:
            week_records: The week's completion records (up to 7)
            pattern: Timing pattern over the longer lookback window
            prediction: Current streak prediction
            start: Week start; defaults to the Sunday starting this week
        """
        catalog = catalog or get_default_catalog()
        start = start or week_start(date.today())
        try:
            completions = sum(1 for r in week_records if r.completed)
            productive_hour = (
                pattern.optimal_hours[0] if pattern.optimal_hours
                else WeeklyReportService.DEFAULT_PRODUCTIVE_HOUR
            )

            return WeeklyHabitReport(
                habit_id=habit_id,
                habit_title=habit_title,
                week_start=start,
                completions=completions,
                target_completions=WeeklyReportService.TARGET_COMPLETIONS,
                success_rate=completions / WeeklyReportService.TARGET_COMPLETIONS,
                streak_change=WeeklyReportService.calculate_streak_change(completions),
                most_productive_hour=productive_hour,
                avg_completion_time=format_hour(productive_hour),
                consistency_score=pattern.completion_rate,
                next_week_success=prediction.confidence_score,
                streak_continuation=prediction.confidence_score * WeeklyReportService.STREAK_CONTINUATION_FACTOR,
                recommended_focus=catalog.render(
                    'weekly_focus',
                    WeeklyReportService.recommended_focus_key(pattern, prediction),
                    day=pattern.difficult_days[0] if pattern.difficult_days else ''
                )
            )
        except Exception:
            logger.exception("Error generating weekly report for %s", habit_id)
            return WeeklyReportService.default_report(habit_id, habit_title, start, catalog)

    @staticmethod
    def default_report(
        habit_id: str,
        habit_title: str,
        start: date,
        catalog: Optional[MessageCatalog] = None
    ) -> WeeklyHabitReport:
        catalog = catalog or get_default_catalog()
        return WeeklyHabitReport(
            habit_id=habit_id,
            habit_title=habit_title,
            week_start=start,
            completions=0,
            target_completions=WeeklyReportService.TARGET_COMPLETIONS,
            success_rate=0.0,
            streak_change=0,
            most_productive_hour=WeeklyReportService.DEFAULT_PRODUCTIVE_HOUR,
            avg_completion_time=format_hour(WeeklyReportService.DEFAULT_PRODUCTIVE_HOUR),
            consistency_score=0.0,
            next_week_success=0.5,
            streak_continuation=0.5,
            recommended_focus=catalog.render('weekly_focus', 'start_tracking')
        )

    @staticmethod
    def calculate_streak_change(completions: int) -> int:
        if completions >= 5:
            return 1
        if completions >= 3:
            return 0
        return -1

    @staticmethod
    def recommended_focus_key(pattern: HabitTimingPattern, prediction: StreakPrediction) -> str:
        if prediction.confidence_score > 0.8:
            return 'maintain'
        if pattern.difficult_days:
            return 'difficult_day'
        if pattern.completion_rate < 0.6:
            return 'consistency'
        return 'momentum'
