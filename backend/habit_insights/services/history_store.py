"""
Read interface to habit completion history.

The engine never writes history; it only asks a store for the dense day
series of a habit and for its streak counters.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional, Union
from datetime import date, datetime, timedelta

from habit_insights.models.completion_record import CompletionRecord, StreakState


class HistoryStore(ABC):
    """
    Narrow read-only view of a habit store.

    Implementations raise HistoryStoreError when their backend cannot answer;
    callers in the engine degrade to empty history on that error.
    """

    @abstractmethod
    def get_completion_history(
        self,
        habit_id: str,
        days_back: int,
        today: Optional[date] = None
    ) -> List[CompletionRecord]:
        """
        One record per day for the last ``days_back`` days, oldest first.

        Raises:
            HistoryStoreError: the backend could not supply records
        """

    @abstractmethod
    def get_streak_state(self, habit_id: str, today: Optional[date] = None) -> StreakState:
        """
        Current and longest streak for a habit.

        Raises:
            HistoryStoreError: the backend could not supply counters
        """


class InMemoryHistoryStore(HistoryStore):
    """
    Dict-backed store holding completion events per habit.

    Data structure:
    {
        "habit_id": {
            date(2024, 5, 1): {"completed_at": datetime | None, "mood": str | None},
            ...
        }
    }
    """

    def __init__(self):
        self._completions: Dict[str, Dict[date, Dict[str, object]]] = {}

    def record_completion(
        self,
        habit_id: str,
        when: Union[date, datetime],
        mood: Optional[str] = None
    ) -> None:
        """Mark a habit done on a day; a datetime also records the hour."""
        if isinstance(when, datetime):
            day, completed_at = when.date(), when
        else:
            day, completed_at = when, None
        self._completions.setdefault(habit_id, {})[day] = {
            'completed_at': completed_at,
            'mood': mood
        }

    def load_records(self, habit_id: str, records: Iterable[CompletionRecord]) -> None:
        """Import completed records (e.g. loaded through CompletionRecordSchema)."""
        for record in records:
            if record.completed:
                self.record_completion(habit_id, record.completed_at or record.date, record.mood)

    def habit_ids(self) -> List[str]:
        return list(self._completions.keys())

    def completion_dates(self, habit_id: str) -> List[date]:
        return sorted(self._completions.get(habit_id, {}).keys())

    def get_completion_history(
        self,
        habit_id: str,
        days_back: int,
        today: Optional[date] = None
    ) -> List[CompletionRecord]:
        today = today or date.today()
        completions: Mapping[date, Dict[str, object]] = self._completions.get(habit_id, {})

        records = []
        for offset in range(days_back - 1, -1, -1):
            day = today - timedelta(days=offset)
            entry = completions.get(day)
            records.append(CompletionRecord(
                date=day,
                completed=entry is not None,
                planned=True,
                completed_at=entry['completed_at'] if entry else None,
                mood=entry['mood'] if entry else None
            ))
        return records

    def get_streak_state(self, habit_id: str, today: Optional[date] = None) -> StreakState:
        """
        Current streak counts back from today, or from yesterday when today
        is not done yet; longest is the longest run of consecutive days.
        """
        today = today or date.today()
        done = set(d for d in self._completions.get(habit_id, {}) if d <= today)
        if not done:
            return StreakState(current=0, longest=0)

        current = 0
        check = today if today in done else today - timedelta(days=1)
        while check in done:
            current += 1
            check -= timedelta(days=1)

        longest = 0
        run = 0
        previous = None
        for day in sorted(done):
            if previous is not None and day - previous == timedelta(days=1):
                run += 1
            else:
                run = 1
            longest = max(longest, run)
            previous = day

        return StreakState(current=current, longest=longest)
