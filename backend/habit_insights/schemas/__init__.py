from typing import Any, Dict, Iterable, List

from marshmallow import ValidationError

from habit_insights.exceptions import InvalidInputError
from .completion_record_schema import CompletionRecordSchema, StreakStateSchema
from .habit_schemas import RankedHabitSchema, HabitContextSchema, UserContextSchema


def _load(schema, payload, many=False):
    try:
        return schema.load(payload, many=many)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid {type(schema).__name__} payload", e.messages)


def load_completion_records(payload: Iterable[Dict[str, Any]]) -> List:
    """Load store records, sorted by date ascending."""
    records = _load(CompletionRecordSchema(), list(payload), many=True)
    return sorted(records, key=lambda r: r.date)


def load_streak_state(payload: Dict[str, Any]):
    return _load(StreakStateSchema(), payload)


def load_ranked_habits(payload: Iterable[Dict[str, Any]]) -> List:
    return _load(RankedHabitSchema(), list(payload), many=True)


def load_habit_context(payload: Dict[str, Any]):
    return _load(HabitContextSchema(), payload)


def load_user_context(payload: Dict[str, Any]):
    return _load(UserContextSchema(), payload)


__all__ = [
    'CompletionRecordSchema', 'StreakStateSchema', 'RankedHabitSchema',
    'HabitContextSchema', 'UserContextSchema', 'load_completion_records',
    'load_streak_state', 'load_ranked_habits', 'load_habit_context', 'load_user_context'
]
