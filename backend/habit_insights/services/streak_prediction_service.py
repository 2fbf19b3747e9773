"""
Streak risk prediction.

Combines a habit's timing pattern with its last two weeks of completions to
estimate how likely the current streak is to survive, and why.
"""

from typing import List, Optional, Sequence
from datetime import date, timedelta
import logging
import math

from habit_insights.config.message_catalog import MessageCatalog, get_default_catalog
from habit_insights.models.completion_record import CompletionRecord, StreakState
from habit_insights.models.streak_prediction import StreakPrediction
from habit_insights.models.timing_pattern import HabitTimingPattern
from habit_insights.services.analytics_base import AnalyticsStatsCalculator

logger = logging.getLogger(__name__)


class StreakPredictionService:
    """Predict streak-break risk for a single habit."""

    # Risk thresholds
    LOW_COMPLETION_RATE = 0.6
    MAX_RECENT_MISSES = 3
    LOW_STREAK_POTENTIAL = 0.5

    # Strength thresholds
    HIGH_COMPLETION_RATE = 0.8
    STRONG_STREAK_DAYS = 7
    HIGH_STREAK_POTENTIAL = 0.7

    # Confidence composition
    RATE_WEIGHT = 1.2
    MAX_BASE_SCORE = 0.95
    STREAK_BONUS_PER_DAY = 0.05
    MAX_STREAK_BONUS = 0.3
    MIN_CONFIDENCE = 0.1
    MAX_CONFIDENCE = 0.95
    MIN_RECENT_PERFORMANCE = 0.1
    MAX_RECENT_PERFORMANCE = 0.9
    EMPTY_RECENT_PERFORMANCE = 0.5

    # Below this confidence a break date is projected
    AT_RISK_CONFIDENCE = 0.6
    STRONG_CONFIDENCE = 0.8
    PROJECTION_HORIZON_DAYS = 14

    @staticmethod
    def predict_risk(
        habit_id: str,
        streak: StreakState,
        pattern: HabitTimingPattern,
        recent: Sequence[CompletionRecord],
        today: Optional[date] = None,
        catalog: Optional[MessageCatalog] = None
    ) -> StreakPrediction:
        """
        Predict whether the current streak is likely to break.

        Args:
            habit_id: Habit identifier
            streak: Current/longest streak counters
            pattern: Timing pattern for the habit
            recent: Completion records for the last 14 days, oldest first
            today: Reference date for the projected break (defaults to today)
            catalog: Copy text catalog

        Returns:
            StreakPrediction. Never raises: errors produce the fallback
            prediction (confidence 0.1, 'insufficient_data').
        """
        catalog = catalog or get_default_catalog()
        try:
            today = today or date.today()

            risk_factors = StreakPredictionService.identify_risk_factors(pattern, recent)
            strength_factors = StreakPredictionService.identify_strength_factors(pattern, streak)
            confidence = StreakPredictionService.calculate_confidence(
                pattern.completion_rate, streak.current, recent
            )

            predicted_end = None
            if confidence < StreakPredictionService.AT_RISK_CONFIDENCE:
                predicted_end = StreakPredictionService.estimate_streak_end_date(
                    pattern.completion_rate, today
                )

            key = StreakPredictionService.recommendation_tier(confidence)
            return StreakPrediction(
                habit_id=habit_id,
                current_streak=streak.current,
                predicted_streak_end=predicted_end,
                risk_factors=risk_factors,
                strength_factors=strength_factors,
                confidence_score=confidence,
                recommendation=StreakPredictionService._render_recommendation(
                    key, risk_factors, strength_factors, catalog
                ),
                recommendation_key=key
            )
        except Exception:
            logger.exception("Error predicting streak risk for %s", habit_id)
            return StreakPredictionService.fallback_prediction(habit_id, catalog)

    @staticmethod
    def fallback_prediction(habit_id: str, catalog: Optional[MessageCatalog] = None) -> StreakPrediction:
        catalog = catalog or get_default_catalog()
        return StreakPrediction(
            habit_id=habit_id,
            current_streak=0,
            predicted_streak_end=None,
            risk_factors=[],
            strength_factors=[],
            confidence_score=StreakPredictionService.MIN_CONFIDENCE,
            recommendation=catalog.render('streak_recommendation', 'insufficient_data'),
            recommendation_key='insufficient_data'
        )

    @staticmethod
    def identify_risk_factors(
        pattern: HabitTimingPattern,
        recent: Sequence[CompletionRecord]
    ) -> List[str]:
        risks = []

        if pattern.completion_rate < StreakPredictionService.LOW_COMPLETION_RATE:
            risks.append('Low overall completion rate')

        if pattern.difficult_days:
            risks.append(f"Struggles on {' and '.join(pattern.difficult_days)}")

        recent_misses = sum(1 for r in recent if not r.completed)
        if recent_misses > StreakPredictionService.MAX_RECENT_MISSES:
            risks.append('Recent missed days increasing')

        if pattern.streak_potential < StreakPredictionService.LOW_STREAK_POTENTIAL:
            risks.append('Low streak maintenance probability')

        return risks

    @staticmethod
    def identify_strength_factors(pattern: HabitTimingPattern, streak: StreakState) -> List[str]:
        strengths = []

        if pattern.completion_rate > StreakPredictionService.HIGH_COMPLETION_RATE:
            strengths.append('Excellent overall completion rate')

        if streak.current >= StreakPredictionService.STRONG_STREAK_DAYS:
            strengths.append('Strong current streak momentum')

        if pattern.energy_pattern != 'flexible':
            strengths.append(f'Consistent {pattern.energy_pattern} routine')

        if pattern.streak_potential > StreakPredictionService.HIGH_STREAK_POTENTIAL:
            strengths.append('High streak maintenance potential')

        return strengths

    @staticmethod
    def calculate_recent_performance(recent: Sequence[CompletionRecord]) -> float:
        if not recent:
            return StreakPredictionService.EMPTY_RECENT_PERFORMANCE
        return AnalyticsStatsCalculator.clamp(
            AnalyticsStatsCalculator.completion_ratio(recent),
            StreakPredictionService.MIN_RECENT_PERFORMANCE,
            StreakPredictionService.MAX_RECENT_PERFORMANCE
        )

    @staticmethod
    def calculate_confidence(
        completion_rate: float,
        current_streak: int,
        recent: Sequence[CompletionRecord]
    ) -> float:
        """
        Mean of (rate * 1.2 capped at 0.95, streak bonus, recent performance),
        clamped to [0.1, 0.95].
        """
        base_score = min(
            completion_rate * StreakPredictionService.RATE_WEIGHT,
            StreakPredictionService.MAX_BASE_SCORE
        )
        streak_bonus = min(
            current_streak * StreakPredictionService.STREAK_BONUS_PER_DAY,
            StreakPredictionService.MAX_STREAK_BONUS
        )
        recent_performance = StreakPredictionService.calculate_recent_performance(recent)

        return AnalyticsStatsCalculator.clamp(
            (base_score + streak_bonus + recent_performance) / 3,
            StreakPredictionService.MIN_CONFIDENCE,
            StreakPredictionService.MAX_CONFIDENCE
        )

    @staticmethod
    def estimate_streak_end_date(completion_rate: float, today: date) -> date:
        """Lower completion rates project a nearer break, never before tomorrow."""
        days_until_risk = max(
            1, math.floor(StreakPredictionService.PROJECTION_HORIZON_DAYS * completion_rate)
        )
        return today + timedelta(days=days_until_risk)

    @staticmethod
    def recommendation_tier(confidence: float) -> str:
        if confidence > StreakPredictionService.STRONG_CONFIDENCE:
            return 'reinforce'
        if confidence > StreakPredictionService.AT_RISK_CONFIDENCE:
            return 'focus_risk'
        return 'minimal_action'

    @staticmethod
    def _render_recommendation(
        key: str,
        risks: List[str],
        strengths: List[str],
        catalog: MessageCatalog
    ) -> str:
        if key == 'reinforce':
            strength = strengths[0].lower() if strengths else 'consistency'
            return catalog.render('streak_recommendation', 'reinforce', strength=strength)
        if key == 'focus_risk':
            if risks:
                return catalog.render('streak_recommendation', 'focus_risk', risk=risks[0].lower())
            return catalog.render('streak_recommendation', 'focus_timing')
        risk = risks[0].lower() if risks else 'improve consistency'
        return catalog.render('streak_recommendation', 'minimal_action', risk=risk)
