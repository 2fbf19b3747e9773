from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class HabitTimingPattern:
    """
    When and how reliably a habit gets done.

    Data structure:
    - optimal_hours: up to 3 hours (0-23), most frequent first
    - weekday_pattern: {"Monday": 0.8, ..., "Sunday": 0.4}
    - mood_correlation: {"happy": 0.85, ...}
    - difficult_days: at most 2 weekdays with rate < 0.5, weakest first
    - hours_observed: False when optimal_hours are the default placeholder
    """
    habit_id: str
    optimal_hours: List[int]
    completion_rate: float
    weekday_pattern: Dict[str, float]
    mood_correlation: Dict[str, float]
    streak_potential: float
    difficult_days: List[str] = field(default_factory=list)
    energy_pattern: str = 'flexible'
    hours_observed: bool = False
    
    def to_dict(self):
        return {
            'habitId': self.habit_id,
            'optimalHours': list(self.optimal_hours),
            'completionRate': self.completion_rate,
            'weekdayPattern': dict(self.weekday_pattern),
            'moodCorrelation': dict(self.mood_correlation),
            'streakPotential': self.streak_potential,
            'difficultDays': list(self.difficult_days),
            'energyPattern': self.energy_pattern,
            'hoursObserved': self.hours_observed
        }
    
    def __repr__(self):
        return f'<HabitTimingPattern {self.habit_id} rate={self.completion_rate:.2f} energy={self.energy_pattern}>'
