"""
Smart insight synthesis for the habit card.

Combines a habit's timing pattern, streak prediction and forecast with the
user's context for the day into at most three prioritized insights, plus a
personalized tip and a motivational message.
"""

from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple
from datetime import date, datetime
import logging

from habit_insights.config.message_catalog import MessageCatalog, get_default_catalog
from habit_insights.models.insight import EnhancedInsight, HabitContext, SmartInsights, UserContext
from habit_insights.models.streak_prediction import StreakForecast, StreakPrediction
from habit_insights.models.timing_pattern import HabitTimingPattern
from habit_insights.services.history_store import HistoryStore
from habit_insights.services.streak_forecast_service import StreakForecastService
from habit_insights.services.streak_prediction_service import StreakPredictionService
from habit_insights.services.timing_pattern_service import TimingPatternService
from habit_insights.utils.time_utils import is_weekend

logger = logging.getLogger(__name__)


class InsightFacts(NamedTuple):
    """Everything the rule tables look at for one synthesis call."""
    habit: HabitContext
    user: UserContext
    pattern: Optional[HabitTimingPattern]
    prediction: Optional[StreakPrediction]
    forecast: Optional[StreakForecast]
    streak_risk: Optional[str]


Rule = Tuple[str, Callable[[InsightFacts], bool]]

# First matching row wins
TIP_RULES: List[Rule] = [
    ('high_risk', lambda f: f.streak_risk == 'high'),
    ('difficult_day', lambda f: f.pattern is not None and bool(f.pattern.difficult_days)),
    ('evening_slump', lambda f: f.user.completion_rate < 0.5 and f.user.current_hour > 18),
    ('expand_routine', lambda f: f.habit.streak >= 21),
]

MOTIVATION_RULES: List[Rule] = [
    ('perfect_day', lambda f: f.user.completion_rate >= 1.0),
    ('outstanding', lambda f: f.user.completion_rate >= 0.8),
    ('halfway', lambda f: f.user.completion_rate >= 0.5),
    ('fresh_start', lambda f: f.user.current_hour < 12),
    ('keep_momentum', lambda f: f.user.current_hour < 18),
    ('reflect', lambda f: True),
]

FALLBACK_MOTIVATION_RULES: List[Rule] = [
    ('start_strong', lambda f: f.user.current_hour < 12),
    ('keep_going', lambda f: f.user.current_hour < 18),
    ('reflect', lambda f: True),
]

# Prediction tier -> risk profile, used when no forecast is available
RECOMMENDATION_RISK = {
    'minimal_action': 'high',
    'focus_risk': 'medium',
    'reinforce': 'low'
}


def select_rule(rules: Sequence[Rule], facts: InsightFacts) -> Optional[str]:
    for key, condition in rules:
        if condition(facts):
            return key
    return None


class InsightService:
    """
    Builds SmartInsights for one habit per display refresh.

    The service pulls history from the injected store; each sub-analysis is
    best-effort and only suppresses the insights that depend on it.
    """

    MAX_PRIMARY_INSIGHTS = 3
    LATE_HOUR = 20
    HIGH_COMPLETION = 0.8
    LOW_COMPLETION = 0.3
    MILESTONE_INTERVAL = 7

    def __init__(
        self,
        store: HistoryStore,
        catalog: Optional[MessageCatalog] = None,
        timing_days: int = 30,
        recent_days: int = 14
    ):
        self.store = store
        self.catalog = catalog or get_default_catalog()
        self.timing_days = timing_days
        self.recent_days = recent_days

    def generate_insights(
        self,
        habit: HabitContext,
        user_context: UserContext,
        sibling_habits: Optional[Sequence[HabitContext]] = None,
        now: Optional[datetime] = None
    ) -> SmartInsights:
        """
        Generate the insight feed for a habit.

        Args:
            habit: Habit being displayed
            user_context: Hour, weekday and today's completion ratio
            sibling_habits: The user's other habits for today
            now: Reference time (defaults to now)

        Returns:
            SmartInsights. Never raises: on failure a reduced fallback is
            returned.
        """
        try:
            now = now or datetime.now()
            sibling_habits = sibling_habits or []

            pattern, prediction, forecast = self._run_analyses(habit.id, now.date())
            facts = InsightFacts(
                habit=habit,
                user=user_context,
                pattern=pattern,
                prediction=prediction,
                forecast=forecast,
                streak_risk=self._resolve_streak_risk(prediction, forecast)
            )

            insights: List[EnhancedInsight] = []
            insights.extend(self._timing_insights(facts))
            insights.extend(self._streak_insights(facts))
            insights.extend(self._motivational_insights(facts))
            insights.extend(self._pattern_insights(facts, sibling_habits))
            insights.extend(self._recommendation_insights(facts))

            tip_key = select_rule(TIP_RULES, facts)
            motivation_key = select_rule(MOTIVATION_RULES, facts)

            return SmartInsights(
                primary_insights=self.select_top_insights(insights),
                optimal_time=self.format_optimal_time(pattern),
                streak_risk=facts.streak_risk,
                personalized_tip=self._render_tip(tip_key, facts),
                motivational_message=self.catalog.render('motivation', motivation_key),
                tip_key=tip_key,
                motivation_key=motivation_key
            )
        except Exception:
            logger.exception("Error generating smart insights for %s", habit.id)
            return self.fallback_insights(habit, user_context)

    # ------------------------------------------------------------------
    # Sub-analyses
    # ------------------------------------------------------------------

    def _run_analyses(
        self,
        habit_id: str,
        today: date
    ) -> Tuple[Optional[HabitTimingPattern], Optional[StreakPrediction], Optional[StreakForecast]]:
        try:
            history = self.store.get_completion_history(habit_id, self.timing_days, today)
            streak = self.store.get_streak_state(habit_id, today)
            recent = history[-self.recent_days:]
        except Exception:
            logger.warning("History unavailable for %s; skipping analytics insights", habit_id, exc_info=True)
            return None, None, None

        pattern = TimingPatternService.analyze_timing(habit_id, history, streak)

        prediction = None
        try:
            prediction = StreakPredictionService.predict_risk(
                habit_id, streak, pattern, recent, today, self.catalog
            )
        except Exception:
            logger.warning("Streak prediction failed for %s", habit_id, exc_info=True)

        forecast = None
        try:
            forecast = StreakForecastService.generate_forecast(
                habit_id, streak, pattern, recent, today, self.catalog
            )
        except Exception:
            logger.warning("Streak forecast failed for %s", habit_id, exc_info=True)

        return pattern, prediction, forecast

    @staticmethod
    def _resolve_streak_risk(
        prediction: Optional[StreakPrediction],
        forecast: Optional[StreakForecast]
    ) -> Optional[str]:
        if forecast is not None:
            return forecast.risk_profile
        if prediction is not None:
            return RECOMMENDATION_RISK.get(prediction.recommendation_key)
        return None

    # ------------------------------------------------------------------
    # Insight generators
    # ------------------------------------------------------------------

    def _timing_insights(self, facts: InsightFacts) -> List[EnhancedInsight]:
        habit, user, pattern = facts.habit, facts.user, facts.pattern
        if pattern is None or not pattern.optimal_hours or habit.completed:
            return []

        name = habit.name.lower()
        if user.current_hour in pattern.optimal_hours:
            return [self._build_insight(
                'timing_optimal', f'timing-optimal-{habit.id}', 'timing', 'high', 0.9,
                actionable=True, habit=name, habit_name=habit.name
            )]

        next_hour = self.next_optimal_hour(pattern.optimal_hours, user.current_hour)
        return [self._build_insight(
            'timing_upcoming', f'timing-upcoming-{habit.id}', 'timing', 'medium', 0.7,
            habit=name, hour=next_hour
        )]

    def _streak_insights(self, facts: InsightFacts) -> List[EnhancedInsight]:
        habit = facts.habit
        if facts.streak_risk == 'high':
            return [self._build_insight(
                'streak_risk', f'streak-risk-{habit.id}', 'streak', 'high', 0.8,
                actionable=True, streak=habit.streak
            )]
        if habit.streak >= self.MILESTONE_INTERVAL and habit.streak % self.MILESTONE_INTERVAL == 0:
            return [self._build_insight(
                'streak_milestone', f'streak-milestone-{habit.id}', 'streak', 'medium', 1.0,
                streak=habit.streak, habit_name=habit.name
            )]
        return []

    def _motivational_insights(self, facts: InsightFacts) -> List[EnhancedInsight]:
        habit, user = facts.habit, facts.user
        if user.completion_rate >= self.HIGH_COMPLETION:
            return [self._build_insight(
                'motivation_progress', f'motivation-progress-{habit.id}', 'motivation', 'medium', 1.0,
                percent=int(round(user.completion_rate * 100))
            )]
        if user.completion_rate < self.LOW_COMPLETION and user.current_hour < self.LATE_HOUR:
            return [self._build_insight(
                'motivation_encouragement', f'motivation-encouragement-{habit.id}', 'motivation',
                'medium', 0.7, actionable=True, habit_name=habit.name
            )]
        return []

    def _pattern_insights(
        self,
        facts: InsightFacts,
        sibling_habits: Sequence[HabitContext]
    ) -> List[EnhancedInsight]:
        habit, user = facts.habit, facts.user
        insights = []

        completed_siblings = [h for h in sibling_habits if h.completed and h.id != habit.id]
        if completed_siblings and not habit.completed:
            last_completed = completed_siblings[-1]
            insights.append(self._build_insight(
                'pattern_stack', f'pattern-stack-{habit.id}', 'pattern', 'medium', 0.6,
                actionable=True, habit_name=habit.name, sibling_name=last_completed.name
            ))

        if is_weekend(user.day_of_week) and habit.difficulty == 'hard':
            insights.append(self._build_insight(
                'pattern_weekend', f'pattern-weekend-{habit.id}', 'pattern', 'low', 0.5
            ))

        return insights

    def _recommendation_insights(self, facts: InsightFacts) -> List[EnhancedInsight]:
        habit, user, pattern = facts.habit, facts.user, facts.pattern
        insights = []

        if facts.streak_risk == 'high' and habit.difficulty == 'hard':
            insights.append(self._build_insight(
                'recommendation_difficulty', f'rec-difficulty-{habit.id}', 'recommendation',
                'medium', 0.7, actionable=True
            ))

        if pattern is not None and user.day_of_week in pattern.difficult_days:
            insights.append(self._build_insight(
                'recommendation_timing', f'rec-timing-{habit.id}', 'recommendation',
                'medium', 0.6, actionable=True, day=user.day_of_week
            ))

        return insights

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_insight(
        self,
        kind: str,
        insight_id: str,
        insight_type: str,
        priority: str,
        confidence: float,
        actionable: bool = False,
        **values
    ) -> EnhancedInsight:
        copy = self.catalog.get_section(f'insight_{kind}')
        suggested_action = copy['action'].format(**values) if actionable and 'action' in copy else None
        return EnhancedInsight(
            id=insight_id,
            type=insight_type,
            icon=copy['icon'],
            title=copy['title'].format(**values),
            message=copy['message'].format(**values),
            priority=priority,
            confidence=confidence,
            actionable=actionable,
            suggested_action=suggested_action
        )

    def _render_tip(self, tip_key: Optional[str], facts: InsightFacts) -> Optional[str]:
        if tip_key is None:
            return None
        day = facts.pattern.difficult_days[0] if facts.pattern and facts.pattern.difficult_days else ''
        return self.catalog.render('tip', tip_key, day=day)

    @staticmethod
    def select_top_insights(insights: Sequence[EnhancedInsight]) -> List[EnhancedInsight]:
        """Highest priority first, then highest confidence; stable for ties."""
        ranked = sorted(insights, key=lambda i: i.sort_key, reverse=True)
        return ranked[:InsightService.MAX_PRIMARY_INSIGHTS]

    @staticmethod
    def next_optimal_hour(optimal_hours: Sequence[int], current_hour: int) -> int:
        """Earliest optimal hour later today, else the most frequent one."""
        later = [h for h in optimal_hours if h > current_hour]
        return min(later) if later else optimal_hours[0]

    @staticmethod
    def format_optimal_time(pattern: Optional[HabitTimingPattern]) -> Optional[str]:
        if pattern is None or not pattern.optimal_hours:
            return None
        hours = pattern.optimal_hours
        if len(hours) == 1:
            return f"{hours[0]}:00"
        return f"{min(hours)}:00-{max(hours)}:00"

    def fallback_insights(self, habit: HabitContext, user_context: UserContext) -> SmartInsights:
        facts = InsightFacts(habit, user_context, None, None, None, None)

        insights = []
        if not habit.completed and user_context.current_hour < self.LATE_HOUR:
            insights.append(self._build_insight(
                'fallback', f'fallback-{habit.id}', 'motivation', 'medium', 0.5,
                actionable=True, habit_name=habit.name
            ))

        motivation_key = select_rule(FALLBACK_MOTIVATION_RULES, facts)
        return SmartInsights(
            primary_insights=insights,
            personalized_tip=self.catalog.render('tip', 'fallback'),
            motivational_message=self.catalog.render('fallback_motivation', motivation_key),
            tip_key='fallback',
            motivation_key=motivation_key
        )
