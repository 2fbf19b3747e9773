from .analytics_base import AnalyticsGrouper, AnalyticsStatsCalculator, CompletionSeriesExtractor
from .history_store import HistoryStore, InMemoryHistoryStore
from .timing_pattern_service import TimingPatternService
from .streak_prediction_service import StreakPredictionService
from .streak_forecast_service import StreakForecastService
from .correlation_service import CorrelationService
from .insight_service import InsightService
from .next_action_service import NextActionService
from .weekly_report_service import WeeklyReportService
from .engine import HabitAnalyticsEngine

__all__ = [
    'AnalyticsGrouper', 'AnalyticsStatsCalculator', 'CompletionSeriesExtractor',
    'HistoryStore', 'InMemoryHistoryStore', 'TimingPatternService',
    'StreakPredictionService', 'StreakForecastService', 'CorrelationService',
    'InsightService', 'NextActionService', 'WeeklyReportService', 'HabitAnalyticsEngine'
]
