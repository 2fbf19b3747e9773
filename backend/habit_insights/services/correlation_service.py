"""
Correlation analysis service for detecting relationships between habits.

Each habit's history becomes a 0/1 completion series; every unordered pair
of habits is scored with Pearson correlation and only notable pairs are
reported.
"""

from typing import List, Mapping, Optional, Sequence
from itertools import combinations
import logging

from habit_insights.config.message_catalog import MessageCatalog, get_default_catalog
from habit_insights.models.completion_record import CompletionRecord
from habit_insights.models.correlation_insight import HabitCorrelationInsight
from habit_insights.services.analytics_base import (
    AnalyticsStatsCalculator,
    CompletionSeriesExtractor
)

logger = logging.getLogger(__name__)


class CorrelationService:
    """Detect and describe correlations between pairs of habits."""

    # |r| must exceed this to be reported
    MIN_CORRELATION = 0.3
    CONFIDENCE_WEIGHT = 1.2
    MAX_CONFIDENCE = 0.95

    ALIGN_BY_POSITION = 'position'
    ALIGN_BY_DATE = 'date'

    @staticmethod
    def analyze_correlations(
        histories: Mapping[str, Sequence[CompletionRecord]],
        align: str = ALIGN_BY_POSITION,
        habit_names: Optional[Mapping[str, str]] = None,
        catalog: Optional[MessageCatalog] = None
    ) -> List[HabitCorrelationInsight]:
        """
        Correlate every unordered pair of habit histories.

        Args:
            histories: habit id -> completion records (oldest first)
            align: 'position' pairs records index by index and expects
                equal-length, same-window histories; 'date' joins each pair
                on calendar date first
            habit_names: Optional display names used in the insight text
            catalog: Copy text catalog

        Returns:
            Insights with |r| > 0.3, strongest first. Never raises: errors
            produce an empty list.
        """
        catalog = catalog or get_default_catalog()
        habit_names = habit_names or {}

        try:
            if align not in (CorrelationService.ALIGN_BY_POSITION, CorrelationService.ALIGN_BY_DATE):
                raise ValueError(f"Unknown alignment '{align}'")

            correlations = []
            for habit_a, habit_b in combinations(list(histories.keys()), 2):
                insight = CorrelationService._analyze_pair(
                    habit_a, histories[habit_a],
                    habit_b, histories[habit_b],
                    align, habit_names, catalog
                )
                if insight is not None:
                    correlations.append(insight)

            correlations.sort(key=lambda c: abs(c.correlation), reverse=True)
            return correlations
        except Exception:
            logger.exception("Error analyzing habit correlations")
            return []

    @staticmethod
    def _analyze_pair(
        habit_a: str,
        records_a: Sequence[CompletionRecord],
        habit_b: str,
        records_b: Sequence[CompletionRecord],
        align: str,
        habit_names: Mapping[str, str],
        catalog: MessageCatalog
    ) -> Optional[HabitCorrelationInsight]:
        if align == CorrelationService.ALIGN_BY_DATE:
            x, y = CompletionSeriesExtractor.align_by_date(records_a, records_b)
        else:
            x, y = CompletionSeriesExtractor.align_by_position(records_a, records_b)

        r = AnalyticsStatsCalculator.pearson_correlation(x, y)
        if abs(r) <= CorrelationService.MIN_CORRELATION:
            return None

        return HabitCorrelationInsight(
            habit_a=habit_a,
            habit_b=habit_b,
            correlation=r,
            type=CorrelationService.classify_correlation(r),
            insight=CorrelationService._generate_insight_text(
                r,
                habit_names.get(habit_a, habit_a),
                habit_names.get(habit_b, habit_b),
                catalog
            ),
            confidence=min(abs(r) * CorrelationService.CONFIDENCE_WEIGHT, CorrelationService.MAX_CONFIDENCE),
            sample_size=len(x),
            p_value=AnalyticsStatsCalculator.correlation_p_value(r, len(x))
        )

    @staticmethod
    def classify_correlation(r: float) -> str:
        if r > CorrelationService.MIN_CORRELATION:
            return 'positive'
        if r < -CorrelationService.MIN_CORRELATION:
            return 'negative'
        return 'neutral'

    @staticmethod
    def _generate_insight_text(r: float, name_a: str, name_b: str, catalog: MessageCatalog) -> str:
        strength = AnalyticsStatsCalculator._classify_correlation_strength(abs(r))
        direction = 'positive' if r > 0 else 'negative'
        return catalog.render('correlation', f'{strength}_{direction}', habit_a=name_a, habit_b=name_b)
