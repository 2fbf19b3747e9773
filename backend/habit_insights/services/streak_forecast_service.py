"""
Streak forecasting and recovery planning.

Supports:
- Ensemble streak forecast (basic, trend and seasonal models)
- Risk profile used by the insight feed
- Recovery plans for broken streaks
- Mood-based difficulty adjustment
"""

from typing import Dict, List, Optional, Sequence
from datetime import date, timedelta
import logging

import numpy as np

from habit_insights.config.message_catalog import MessageCatalog, get_default_catalog
from habit_insights.models.completion_record import CompletionRecord, StreakState
from habit_insights.models.streak_prediction import (
    DifficultyAdjustment,
    RecoveryAction,
    RiskFactor,
    StreakForecast,
    StreakRecoveryPlan
)
from habit_insights.models.timing_pattern import HabitTimingPattern
from habit_insights.services.analytics_base import AnalyticsStatsCalculator

logger = logging.getLogger(__name__)


class StreakForecastService:
    """Multi-model streak forecasts and the plans built on them."""

    HORIZONS = ('day7', 'day14', 'day30')

    # Ensemble weights per horizon: (basic, trend, seasonal)
    ENSEMBLE_WEIGHTS = {
        'day7': (0.4, 0.4, 0.2),
        'day14': (0.4, 0.4, 0.2),
        'day30': (0.3, 0.5, 0.2)
    }
    MIN_PREDICTION = 0.05
    MAX_PREDICTION = 0.95

    LOW_RISK_THRESHOLD = 0.75
    MEDIUM_RISK_THRESHOLD = 0.5

    # Seasonal model
    BASE_SEASONAL = 0.7
    WEEKEND_PENALTY = 0.9
    MONTH_FACTORS = [0.9, 0.85, 0.95, 1.0, 1.05, 1.05, 0.95, 0.95, 1.0, 0.95, 0.85, 0.8]  # Jan-Dec

    MAX_KEY_RISK_FACTORS = 3
    MAX_INTERVENTIONS = 4

    RECOVERY_ACTIONS = {
        'quick-restart': [
            (1, 'Complete the habit at 50% intensity', 'Rebuild momentum quickly', 'low'),
            (2, 'Return to normal habit routine', 'Restore confidence', 'normal'),
            (3, 'Focus on consistency over perfection', 'Solidify restart', 'normal')
        ],
        'gradual-buildup': [
            (1, 'Start with micro-version (2 minutes)', 'Lower barrier to entry', 'minimal'),
            (3, 'Increase to quarter-version (5 minutes)', 'Gradual progression', 'minimal'),
            (5, 'Move to half-version (10 minutes)', 'Building capacity', 'low'),
            (7, 'Return to full habit', 'Complete restoration', 'normal')
        ],
        'foundation-reset': [
            (1, 'Identify why the streak broke', 'Understanding root causes', 'minimal'),
            (2, 'Redesign habit for current lifestyle', 'Address systemic issues', 'minimal'),
            (4, 'Start new micro-habit version', 'Fresh beginning', 'minimal'),
            (7, 'Establish new routine and environment', 'Supporting systems', 'low'),
            (14, 'Gradually increase habit scope', 'Sustainable growth', 'low')
        ]
    }

    # broken length upper bound -> (support tier, encouragement, focus area)
    SUPPORT_TIERS = [
        (7, 'short', 'medium', 'progress'),
        (21, 'medium', 'high', 'learning'),
        (None, 'long', 'high', 'resilience')
    ]

    MOOD_DIFFICULTY_MULTIPLIERS = {
        'happy': 1.0,
        'neutral': 0.8,
        'sad': 0.5,
        'frustrated': 0.6,
        'excited': 1.2
    }
    TIME_ENERGY_MULTIPLIERS = {
        'morning': 1.1,
        'afternoon': 1.0,
        'evening': 0.9,
        'night': 0.7
    }
    COMPLEXITY_SCORES = {'easy': 0.3, 'medium': 0.6, 'hard': 0.9}
    TIME_REDUCTIONS = {'easy': 50, 'medium': 25, 'hard': 0}
    MOTIVATIONAL_APPROACHES = {
        'happy': 'encouraging',
        'neutral': 'supportive',
        'sad': 'gentle',
        'frustrated': 'supportive',
        'excited': 'celebratory'
    }

    # ------------------------------------------------------------------
    # Forecast
    # ------------------------------------------------------------------

    @staticmethod
    def generate_forecast(
        habit_id: str,
        streak: StreakState,
        pattern: HabitTimingPattern,
        recent: Sequence[CompletionRecord],
        today: Optional[date] = None,
        catalog: Optional[MessageCatalog] = None
    ) -> StreakForecast:
        """
        Forecast streak survival over 7/14/30 days.

        Returns:
            StreakForecast. Never raises: errors produce the default
            medium-risk forecast.
        """
        catalog = catalog or get_default_catalog()
        try:
            today = today or date.today()
            performance = StreakForecastService.analyze_recent_performance(recent)

            basic = StreakForecastService._basic_prediction(streak, pattern)
            trend = StreakForecastService._trend_prediction(performance)
            seasonal = StreakForecastService._seasonal_prediction(today)

            predictions = {
                horizon: StreakForecastService._ensemble_prediction(
                    [basic[horizon], trend[horizon], seasonal[horizon]],
                    StreakForecastService.ENSEMBLE_WEIGHTS[horizon]
                )
                for horizon in StreakForecastService.HORIZONS
            }

            risk_profile = StreakForecastService.calculate_risk_profile(predictions)
            risk_factors = StreakForecastService._identify_key_risk_factors(pattern, performance, catalog)

            return StreakForecast(
                habit_id=habit_id,
                current_streak=streak.current,
                predictions=predictions,
                risk_profile=risk_profile,
                key_risk_factors=risk_factors,
                streak_sustainability_score=StreakForecastService._calculate_sustainability_score(
                    predictions, pattern, streak
                ),
                optimal_interventions=StreakForecastService._generate_interventions(
                    risk_profile, risk_factors, catalog
                ),
                next_critical_date=StreakForecastService._predict_next_critical_date(
                    predictions, risk_profile, today
                )
            )
        except Exception:
            logger.exception("Error generating streak forecast for %s", habit_id)
            return StreakForecastService.default_forecast(habit_id, catalog)

    @staticmethod
    def default_forecast(habit_id: str, catalog: Optional[MessageCatalog] = None) -> StreakForecast:
        catalog = catalog or get_default_catalog()
        return StreakForecast(
            habit_id=habit_id,
            current_streak=0,
            predictions={'day7': 0.5, 'day14': 0.4, 'day30': 0.3},
            risk_profile='medium',
            key_risk_factors=[RiskFactor(
                factor='Insufficient data for analysis',
                impact=0.5,
                mitigation=catalog.render('risk_mitigation', 'insufficient_data')
            )],
            streak_sustainability_score=50,
            optimal_interventions=[catalog.render('intervention', 'default')],
            next_critical_date=None
        )

    @staticmethod
    def analyze_recent_performance(recent: Sequence[CompletionRecord]) -> Dict[str, float]:
        """
        Last-7 and last-14 completion rates plus a half-over-half slope.

        slope = (mean(second half) - mean(first half)) / len(first half)
        """
        rates = np.array([1.0 if r.completed else 0.0 for r in recent], dtype=float)
        if rates.size == 0:
            return {'slope': 0.0, 'recent7': 0.5, 'recent14': 0.5}

        recent7 = float(rates[-7:].mean())
        recent14 = float(rates[-14:].mean())

        half = rates.size // 2
        if half == 0:
            slope = 0.0
        else:
            slope = float((rates[half:].mean() - rates[:half].mean()) / half)

        return {'slope': slope, 'recent7': recent7, 'recent14': recent14}

    @staticmethod
    def calculate_risk_profile(predictions: Dict[str, float]) -> str:
        avg_prediction = AnalyticsStatsCalculator.mean(list(predictions.values()))
        if avg_prediction > StreakForecastService.LOW_RISK_THRESHOLD:
            return 'low'
        if avg_prediction > StreakForecastService.MEDIUM_RISK_THRESHOLD:
            return 'medium'
        return 'high'

    @staticmethod
    def _basic_prediction(streak: StreakState, pattern: HabitTimingPattern) -> Dict[str, float]:
        streak_stability = min(streak.current * 0.05, 0.3)
        baseline = (pattern.completion_rate + streak_stability + pattern.streak_potential) / 3
        return {
            'day7': min(0.95, baseline * 0.95),
            'day14': min(0.90, baseline * 0.85),
            'day30': min(0.85, baseline * 0.70)
        }

    @staticmethod
    def _trend_prediction(performance: Dict[str, float]) -> Dict[str, float]:
        trend_factor = AnalyticsStatsCalculator.clamp(1 + performance['slope'], 0.1, 1.9)
        return {
            'day7': min(0.95, performance['recent7'] * trend_factor),
            'day14': min(0.90, performance['recent14'] * trend_factor * 0.9),
            'day30': min(0.85, performance['recent14'] * trend_factor * 0.7)
        }

    @staticmethod
    def _seasonal_prediction(today: date) -> Dict[str, float]:
        weekend_penalty = StreakForecastService.WEEKEND_PENALTY if today.weekday() >= 5 else 1.0
        month_factor = StreakForecastService.MONTH_FACTORS[today.month - 1]
        base = StreakForecastService.BASE_SEASONAL
        return {
            'day7': base * weekend_penalty * month_factor,
            'day14': base * weekend_penalty * month_factor * 0.9,
            'day30': base * month_factor * 0.8
        }

    @staticmethod
    def _ensemble_prediction(predictions: List[float], weights: Sequence[float]) -> float:
        weighted = float(np.average(predictions, weights=weights))
        return AnalyticsStatsCalculator.clamp(
            weighted,
            StreakForecastService.MIN_PREDICTION,
            StreakForecastService.MAX_PREDICTION
        )

    @staticmethod
    def _identify_key_risk_factors(
        pattern: HabitTimingPattern,
        performance: Dict[str, float],
        catalog: MessageCatalog
    ) -> List[RiskFactor]:
        factors = []

        if pattern.completion_rate < 0.6:
            factors.append(RiskFactor(
                'Low overall completion rate', 0.8,
                catalog.render('risk_mitigation', 'low_completion')
            ))

        if performance['slope'] < -0.1:
            factors.append(RiskFactor(
                'Declining recent performance', 0.7,
                catalog.render('risk_mitigation', 'declining')
            ))

        if len(pattern.difficult_days) >= 2:
            factors.append(RiskFactor(
                f"Struggles on {' and '.join(pattern.difficult_days)}", 0.6,
                catalog.render('risk_mitigation', 'difficult_days', day=pattern.difficult_days[0])
            ))

        if performance['recent7'] < 0.5:
            factors.append(RiskFactor(
                'Poor recent week performance', 0.9,
                catalog.render('risk_mitigation', 'poor_recent_week')
            ))

        factors.sort(key=lambda f: f.impact, reverse=True)
        return factors[:StreakForecastService.MAX_KEY_RISK_FACTORS]

    @staticmethod
    def _calculate_sustainability_score(
        predictions: Dict[str, float],
        pattern: HabitTimingPattern,
        streak: StreakState
    ) -> int:
        prediction_score = (
            predictions['day7'] * 0.3 + predictions['day14'] * 0.4 + predictions['day30'] * 0.3
        ) * 100
        consistency_score = pattern.completion_rate * 100
        experience_score = min(streak.longest * 2, 30)
        return int(round((prediction_score + consistency_score + experience_score) / 3))

    @staticmethod
    def _generate_interventions(
        risk_profile: str,
        risk_factors: List[RiskFactor],
        catalog: MessageCatalog
    ) -> List[str]:
        interventions = [
            catalog.render('intervention', f'{risk_profile}_{index}') for index in (1, 2)
        ]

        for factor in risk_factors[:2]:
            if factor.mitigation not in interventions:
                interventions.append(factor.mitigation)

        return interventions[:StreakForecastService.MAX_INTERVENTIONS]

    @staticmethod
    def _predict_next_critical_date(
        predictions: Dict[str, float],
        risk_profile: str,
        today: date
    ) -> Optional[date]:
        if risk_profile == 'low' and predictions['day14'] > 0.7:
            return None

        if risk_profile == 'high':
            days_ahead = 2
        elif predictions['day7'] < 0.6:
            days_ahead = 3
        else:
            days_ahead = 7
        return today + timedelta(days=days_ahead)

    # ------------------------------------------------------------------
    # Recovery plans
    # ------------------------------------------------------------------

    @staticmethod
    def generate_recovery_plan(
        habit_id: str,
        broken_streak_length: int,
        catalog: Optional[MessageCatalog] = None
    ) -> StreakRecoveryPlan:
        """
        Plan the restart after a broken streak.

        Strategy: <=3 days quick-restart, <=14 gradual-buildup, otherwise
        foundation-reset.
        """
        catalog = catalog or get_default_catalog()
        strategy = StreakForecastService.determine_recovery_strategy(broken_streak_length)
        actions = [
            RecoveryAction(day=day, action=action, reasoning=reasoning, difficulty_level=level)
            for day, action, reasoning, level in StreakForecastService.RECOVERY_ACTIONS[strategy]
        ]

        for upper_bound, tier, encouragement, focus_area in StreakForecastService.SUPPORT_TIERS:
            if upper_bound is None or broken_streak_length <= upper_bound:
                break

        return StreakRecoveryPlan(
            habit_id=habit_id,
            broken_streak_length=broken_streak_length,
            recovery_strategy=strategy,
            recommended_actions=actions,
            reframing_message=catalog.render('recovery_reframing', tier),
            encouragement_level=encouragement,
            focus_area=focus_area
        )

    @staticmethod
    def determine_recovery_strategy(broken_streak_length: int) -> str:
        if broken_streak_length <= 3:
            return 'quick-restart'
        if broken_streak_length <= 14:
            return 'gradual-buildup'
        return 'foundation-reset'

    # ------------------------------------------------------------------
    # Mood-based difficulty adjustment
    # ------------------------------------------------------------------

    @staticmethod
    def adjust_difficulty(
        habit_id: str,
        habit_title: str,
        current_mood: str,
        baseline_complexity: str = 'medium',
        time_of_day: str = 'morning',
        catalog: Optional[MessageCatalog] = None
    ) -> DifficultyAdjustment:
        """
        Scale a habit's difficulty to the user's mood and time of day.

        Unknown moods are treated as 'neutral', unknown times of day as
        'afternoon', unknown complexities as 'medium'.
        """
        catalog = catalog or get_default_catalog()
        mood = current_mood if current_mood in StreakForecastService.MOOD_DIFFICULTY_MULTIPLIERS else 'neutral'
        if baseline_complexity not in StreakForecastService.COMPLEXITY_SCORES:
            baseline_complexity = 'medium'

        score = (
            StreakForecastService.COMPLEXITY_SCORES[baseline_complexity]
            * StreakForecastService.MOOD_DIFFICULTY_MULTIPLIERS[mood]
            * StreakForecastService.TIME_ENERGY_MULTIPLIERS.get(time_of_day, 1.0)
        )
        adjusted = StreakForecastService._score_to_complexity(score)

        reduction = StreakForecastService.TIME_REDUCTIONS[adjusted]
        title = habit_title.lower()

        alternative = None
        if mood == 'sad' and baseline_complexity != 'easy':
            alternative = catalog.render('difficulty_alternative', 'sad', habit=title)
        elif mood == 'frustrated':
            alternative = catalog.render('difficulty_alternative', 'frustrated', habit=title)
        elif mood == 'excited' and baseline_complexity == 'easy':
            alternative = catalog.render('difficulty_alternative', 'excited', habit=title)

        energy_key = mood if catalog.has_message('difficulty_energy', mood) else 'default'

        tips = []
        for index in (1, 2):
            tip_key = f'{mood}_{index}'
            if catalog.has_message('difficulty_tip', tip_key):
                tips.append(catalog.render('difficulty_tip', tip_key))
        if catalog.has_message('difficulty_tip', time_of_day):
            tips.append(catalog.render('difficulty_tip', time_of_day))

        return DifficultyAdjustment(
            habit_id=habit_id,
            baseline_complexity=baseline_complexity,
            current_mood=mood,
            adjusted_complexity=adjusted,
            time_reduction=reduction if reduction > 0 else None,
            energy_adjustment=catalog.render('difficulty_energy', energy_key),
            alternative_suggestion=alternative,
            motivational_approach=StreakForecastService.MOTIVATIONAL_APPROACHES[mood],
            contextual_tips=tips[:3]
        )

    @staticmethod
    def _score_to_complexity(score: float) -> str:
        if score <= 0.4:
            return 'easy'
        if score <= 0.7:
            return 'medium'
        return 'hard'
