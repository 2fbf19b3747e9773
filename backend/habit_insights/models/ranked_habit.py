from dataclasses import dataclass
from typing import FrozenSet, Optional

TIME_TYPES = ('morning', 'afternoon', 'evening', 'specific', 'anytime', 'lunch')


@dataclass(frozen=True)
class RankedHabit:
    """
    A habit scheduled for today, as seen by the next-action ranker.

    days_of_week holds weekday codes ('mon'..'sun'); empty means every day.
    """
    id: str
    title: str
    completed: bool = False
    streak: int = 0
    time_type: Optional[str] = None
    specific_time: Optional[str] = None  # "HH:MM"
    days_of_week: FrozenSet[str] = frozenset()
    
    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'completed': self.completed,
            'streak': self.streak,
            'timeType': self.time_type,
            'specificTime': self.specific_time,
            'daysOfWeek': sorted(self.days_of_week)
        }
    
    def __repr__(self):
        return f'<RankedHabit {self.id} {self.time_type or "anytime"} streak={self.streak}>'
