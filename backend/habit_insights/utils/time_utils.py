"""
Calendar and clock helpers shared by the analytics services.
Weekdays are indexed the way ``date.weekday()`` does: 0=Monday .. 6=Sunday.
"""
from datetime import date, timedelta
from typing import Optional

DAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
DAY_CODES = ['mon', 'tue', 'wed', 'thu', 'fri', 'sat', 'sun']
WEEKEND_DAYS = ('Saturday', 'Sunday')


def weekday_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]


def weekday_code(day: date) -> str:
    return DAY_CODES[day.weekday()]


def is_weekend(day_name: str) -> bool:
    return day_name in WEEKEND_DAYS


def hour_from_time_string(value: Optional[str]) -> Optional[int]:
    """
    Parse the hour out of an "HH:MM" (or bare "HH") string.

    Returns None for empty or malformed input and for hours outside 0-23.
    """
    if not value or not isinstance(value, str):
        return None
    hour_part = value.strip().split(':', 1)[0]
    try:
        hour = int(hour_part)
    except ValueError:
        return None
    if hour < 0 or hour > 23:
        return None
    return hour


def format_hour(hour: int) -> str:
    # 9 -> "09:00"
    return f"{hour:02d}:00"


def week_start(day: date) -> date:
    """Sunday that starts the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)
