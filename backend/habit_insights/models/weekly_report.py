from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class WeeklyHabitReport:
    habit_id: str
    habit_title: str
    week_start: date
    completions: int
    target_completions: int
    success_rate: float
    streak_change: int  # -1 | 0 | 1
    most_productive_hour: int
    avg_completion_time: str  # "HH:00"
    consistency_score: float
    next_week_success: float
    streak_continuation: float
    recommended_focus: str
    
    def to_dict(self):
        return {
            'habitId': self.habit_id,
            'habitTitle': self.habit_title,
            'weekStart': self.week_start.isoformat(),
            'completions': self.completions,
            'targetCompletions': self.target_completions,
            'successRate': self.success_rate,
            'streakChange': self.streak_change,
            'timeAnalysis': {
                'mostProductiveHour': self.most_productive_hour,
                'avgCompletionTime': self.avg_completion_time,
                'consistencyScore': self.consistency_score
            },
            'predictions': {
                'nextWeekSuccess': self.next_week_success,
                'streakContinuation': self.streak_continuation,
                'recommendedFocus': self.recommended_focus
            }
        }
