from .completion_record import CompletionRecord, StreakState
from .timing_pattern import HabitTimingPattern
from .streak_prediction import (
    StreakPrediction,
    StreakForecast,
    RiskFactor,
    RecoveryAction,
    StreakRecoveryPlan,
    DifficultyAdjustment
)
from .correlation_insight import HabitCorrelationInsight
from .insight import HabitContext, UserContext, EnhancedInsight, SmartInsights
from .ranked_habit import RankedHabit
from .weekly_report import WeeklyHabitReport

__all__ = [
    'CompletionRecord', 'StreakState', 'HabitTimingPattern', 'StreakPrediction',
    'StreakForecast', 'RiskFactor', 'RecoveryAction', 'StreakRecoveryPlan',
    'DifficultyAdjustment', 'HabitCorrelationInsight', 'HabitContext', 'UserContext',
    'EnhancedInsight', 'SmartInsights', 'RankedHabit', 'WeeklyHabitReport'
]
