"""
Store-backed façade over the analytics services.

One engine instance is bound to one history store; all methods are
independent, side-effect free reads and can be called concurrently.
"""

from typing import Iterable, List, Mapping, Optional, Sequence
from datetime import date, datetime
import logging

from habit_insights.config.message_catalog import MessageCatalog, get_default_catalog
from habit_insights.models import (
    DifficultyAdjustment,
    HabitContext,
    HabitCorrelationInsight,
    HabitTimingPattern,
    RankedHabit,
    SmartInsights,
    StreakForecast,
    StreakPrediction,
    StreakRecoveryPlan,
    StreakState,
    UserContext,
    WeeklyHabitReport
)
from habit_insights.services.correlation_service import CorrelationService
from habit_insights.services.history_store import HistoryStore
from habit_insights.services.insight_service import InsightService
from habit_insights.services.next_action_service import NextActionService
from habit_insights.services.streak_forecast_service import StreakForecastService
from habit_insights.services.streak_prediction_service import StreakPredictionService
from habit_insights.services.timing_pattern_service import TimingPatternService
from habit_insights.services.weekly_report_service import WeeklyReportService
from habit_insights.utils.time_utils import week_start

logger = logging.getLogger(__name__)


class HabitAnalyticsEngine:

    def __init__(
        self,
        store: HistoryStore,
        catalog: Optional[MessageCatalog] = None,
        timing_days: int = 30,
        recent_days: int = 14,
        correlation_days: int = 60,
        weekly_days: int = 7
    ):
        self.store = store
        self.catalog = catalog or get_default_catalog()
        self.timing_days = timing_days
        self.recent_days = recent_days
        self.correlation_days = correlation_days
        self.weekly_days = weekly_days
        self.insights = InsightService(store, self.catalog, timing_days, recent_days)

    @classmethod
    def from_config(cls, store: HistoryStore, config_class, catalog: Optional[MessageCatalog] = None):
        return cls(
            store,
            catalog=catalog,
            timing_days=config_class.TIMING_LOOKBACK_DAYS,
            recent_days=config_class.RECENT_WINDOW_DAYS,
            correlation_days=config_class.CORRELATION_LOOKBACK_DAYS,
            weekly_days=config_class.WEEKLY_REPORT_DAYS
        )

    def _streak(self, habit_id: str, today: date) -> StreakState:
        try:
            return self.store.get_streak_state(habit_id, today)
        except Exception:
            logger.warning("Streak state unavailable for %s", habit_id, exc_info=True)
            return StreakState()

    def _history(self, habit_id: str, days_back: int, today: date) -> list:
        try:
            return self.store.get_completion_history(habit_id, days_back, today)
        except Exception:
            logger.warning("History unavailable for %s", habit_id, exc_info=True)
            return []

    def analyze_timing(self, habit_id: str, today: Optional[date] = None) -> HabitTimingPattern:
        today = today or date.today()
        history = self._history(habit_id, self.timing_days, today)
        return TimingPatternService.analyze_timing(habit_id, history, self._streak(habit_id, today))

    def predict_streak_risk(self, habit_id: str, today: Optional[date] = None) -> StreakPrediction:
        today = today or date.today()
        streak = self._streak(habit_id, today)
        history = self._history(habit_id, self.timing_days, today)
        pattern = TimingPatternService.analyze_timing(habit_id, history, streak)
        recent = self._history(habit_id, self.recent_days, today)
        return StreakPredictionService.predict_risk(habit_id, streak, pattern, recent, today, self.catalog)

    def forecast_streak(self, habit_id: str, today: Optional[date] = None) -> StreakForecast:
        today = today or date.today()
        streak = self._streak(habit_id, today)
        history = self._history(habit_id, self.timing_days, today)
        pattern = TimingPatternService.analyze_timing(habit_id, history, streak)
        recent = self._history(habit_id, self.recent_days, today)
        return StreakForecastService.generate_forecast(habit_id, streak, pattern, recent, today, self.catalog)

    def analyze_habit_correlations(
        self,
        habit_ids: Sequence[str],
        today: Optional[date] = None,
        habit_names: Optional[Mapping[str, str]] = None
    ) -> List[HabitCorrelationInsight]:
        today = today or date.today()
        # Same window for every habit, so position alignment is by day
        histories = {
            habit_id: self._history(habit_id, self.correlation_days, today)
            for habit_id in habit_ids
        }
        return CorrelationService.analyze_correlations(
            histories, habit_names=habit_names, catalog=self.catalog
        )

    def generate_insights(
        self,
        habit: HabitContext,
        user_context: UserContext,
        sibling_habits: Optional[Sequence[HabitContext]] = None,
        now: Optional[datetime] = None
    ) -> SmartInsights:
        return self.insights.generate_insights(habit, user_context, sibling_habits, now)

    def rank_next_actions(
        self,
        habits: Sequence[RankedHabit],
        exclude_ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None
    ) -> List[RankedHabit]:
        return NextActionService.rank(habits, exclude_ids, now)

    def weekly_report(
        self,
        habit_id: str,
        habit_title: str,
        today: Optional[date] = None
    ) -> WeeklyHabitReport:
        today = today or date.today()
        week_records = self._history(habit_id, self.weekly_days, today)
        return WeeklyReportService.generate_weekly_report(
            habit_id,
            habit_title,
            week_records,
            self.analyze_timing(habit_id, today),
            self.predict_streak_risk(habit_id, today),
            start=week_start(today),
            catalog=self.catalog
        )

    def recovery_plan(self, habit_id: str, broken_streak_length: int) -> StreakRecoveryPlan:
        return StreakForecastService.generate_recovery_plan(habit_id, broken_streak_length, self.catalog)

    def adjust_difficulty(
        self,
        habit_id: str,
        habit_title: str,
        current_mood: str,
        baseline_complexity: str = 'medium',
        time_of_day: str = 'morning'
    ) -> DifficultyAdjustment:
        return StreakForecastService.adjust_difficulty(
            habit_id, habit_title, current_mood, baseline_complexity, time_of_day, self.catalog
        )
