from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class CompletionRecord:
    """
    One day of a habit's history, as supplied by the history store.

    ``completed_at`` carries the time of day the habit was done when the
    store knows it; ``mood`` is the mood label logged alongside (if any).
    Records are ordered by date ascending and never mutated by the engine.
    """
    date: date
    completed: bool
    planned: bool = True
    completed_at: Optional[datetime] = None
    mood: Optional[str] = None
    
    @property
    def completion_hour(self) -> Optional[int]:
        if not self.completed or self.completed_at is None:
            return None
        return self.completed_at.hour
    
    def to_dict(self):
        return {
            'date': self.date.isoformat(),
            'completed': self.completed,
            'planned': self.planned,
            'completedAt': self.completed_at.isoformat() if self.completed_at else None,
            'mood': self.mood
        }
    
    def __repr__(self):
        return f'<CompletionRecord {self.date} completed={self.completed}>'


@dataclass(frozen=True)
class StreakState:
    current: int = 0
    longest: int = 0
    
    def __post_init__(self):
        if self.current < 0 or self.longest < 0:
            raise ValueError("Streak counters must be non-negative")
    
    def to_dict(self):
        return {'current': self.current, 'longest': self.longest}
