"""Utility functions and helpers for the habit insights engine."""

from .time_utils import (
    DAY_NAMES,
    DAY_CODES,
    WEEKEND_DAYS,
    weekday_name,
    weekday_code,
    is_weekend,
    hour_from_time_string,
    format_hour,
    week_start
)

__all__ = [
    'DAY_NAMES',
    'DAY_CODES',
    'WEEKEND_DAYS',
    'weekday_name',
    'weekday_code',
    'is_weekend',
    'hour_from_time_string',
    'format_hour',
    'week_start'
]
