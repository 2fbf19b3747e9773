# ============================================================================
# SHARED ANALYTICS BASE LAYER
# ============================================================================


from typing import Dict, List, Any, Callable, Sequence, Tuple
from datetime import date
import numpy as np
from scipy import stats

from habit_insights.models.completion_record import CompletionRecord


class CompletionSeriesExtractor:
    """
    Turns completion histories into numeric series for analysis.
    """
    
    @staticmethod
    def to_binary_sequence(records: Sequence[CompletionRecord]) -> np.ndarray:
        """1.0 for completed days, 0.0 otherwise, in record order."""
        return np.array([1.0 if r.completed else 0.0 for r in records], dtype=float)
    
    @staticmethod
    def align_by_position(
        records_a: Sequence[CompletionRecord],
        records_b: Sequence[CompletionRecord]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Pair records index by index, truncating to the shorter history.
        
        Callers are expected to pass same-window histories; nothing here
        checks that index i of both lists refers to the same day.
        """
        n = min(len(records_a), len(records_b))
        return (
            CompletionSeriesExtractor.to_binary_sequence(records_a[:n]),
            CompletionSeriesExtractor.to_binary_sequence(records_b[:n])
        )
    
    @staticmethod
    def align_by_date(
        records_a: Sequence[CompletionRecord],
        records_b: Sequence[CompletionRecord]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Join two histories on calendar date (inner join, date ascending).
        
        When a history holds several records for one date, the last wins.
        """
        by_date_a: Dict[date, bool] = {r.date: r.completed for r in records_a}
        by_date_b: Dict[date, bool] = {r.date: r.completed for r in records_b}
        shared = sorted(set(by_date_a) & set(by_date_b))
        x = np.array([1.0 if by_date_a[d] else 0.0 for d in shared], dtype=float)
        y = np.array([1.0 if by_date_b[d] else 0.0 for d in shared], dtype=float)
        return x, y


class AnalyticsGrouper:
    """
    Shared utilities for grouping records.
    """
    
    @staticmethod
    def group_by_criterion(
        data: Sequence[Any],
        group_fn: Callable[[Any], Any],
        value_fn: Callable[[Any], Any] = lambda item: item
    ) -> Dict[Any, List[Any]]:
        """
        Group data by any criterion using a grouping function.
        
        Args:
            data: Items to group
            group_fn: Function that takes an item and returns its group key
            value_fn: Function that takes an item and returns the value kept
        
        Returns:
            Dict mapping group keys to lists of values
        
        Example:
            # Completion flags by weekday
            grouped = AnalyticsGrouper.group_by_criterion(
                records,
                lambda r: r.date.weekday(),
                lambda r: r.completed
            )
        """
        groups = {}
        
        for item in data:
            group_key = group_fn(item)
            if group_key is None:
                continue
            groups.setdefault(group_key, []).append(value_fn(item))
        
        return groups


class AnalyticsStatsCalculator:
    """
    Shared statistical calculations.
    """
    
    @staticmethod
    def clamp(value: float, low: float, high: float) -> float:
        return max(low, min(high, value))
    
    @staticmethod
    def completion_ratio(records: Sequence[CompletionRecord], empty_value: float = 0.0) -> float:
        if not records:
            return empty_value
        completed = sum(1 for r in records if r.completed)
        return completed / len(records)
    
    @staticmethod
    def mean(values: Sequence[float], empty_value: float = 0.0) -> float:
        if len(values) == 0:
            return empty_value
        return float(np.mean(np.asarray(values, dtype=float)))
    
    @staticmethod
    def pearson_correlation(x: np.ndarray, y: np.ndarray) -> float:
        """
        Pearson r from raw sums:
        
            r = (nΣxy − ΣxΣy) / sqrt((nΣx² − (Σx)²)(nΣy² − (Σy)²))
        
        Returns 0 when either series is constant or empty. Sequences of
        different length are truncated to the shorter one.
        """
        n = min(len(x), len(y))
        if n == 0:
            return 0.0
        x = np.asarray(x[:n], dtype=float)
        y = np.asarray(y[:n], dtype=float)
        
        sum_x = x.sum()
        sum_y = y.sum()
        sum_xx = (x * x).sum()
        sum_yy = (y * y).sum()
        sum_xy = (x * y).sum()
        
        numerator = n * sum_xy - sum_x * sum_y
        spread_x = n * sum_xx - sum_x * sum_x
        spread_y = n * sum_yy - sum_y * sum_y
        if spread_x <= 0 or spread_y <= 0:
            return 0.0
        
        r = numerator / np.sqrt(spread_x * spread_y)
        # Float error can push |r| a hair past 1
        return float(np.clip(r, -1.0, 1.0))
    
    @staticmethod
    def correlation_p_value(r: float, n: int) -> float:
        """Two-sided p-value for Pearson r over n paired observations."""
        if n < 3:
            return 1.0
        if abs(r) >= 1.0:
            return 0.0
        t_stat = r * np.sqrt((n - 2) / (1.0 - r * r))
        return float(2 * stats.t.sf(abs(t_stat), df=n - 2))
    
    @staticmethod
    def _classify_correlation_strength(abs_r_value: float) -> str:
        """Classify correlation strength based on r-value."""
        if abs_r_value > 0.7:
            return 'strong'
        elif abs_r_value > 0.5:
            return 'moderate'
        else:
            return 'weak'
