from dataclasses import dataclass, field
from typing import List, Optional

PRIORITY_ORDER = {'high': 3, 'medium': 2, 'low': 1}


@dataclass(frozen=True)
class HabitContext:
    """The habit being displayed, as the home screen sees it."""
    id: str
    name: str
    completed: bool = False
    streak: int = 0
    difficulty: str = 'medium'  # easy | medium | hard
    time: Optional[str] = None
    
    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'completed': self.completed,
            'streak': self.streak,
            'difficulty': self.difficulty,
            'time': self.time
        }


@dataclass(frozen=True)
class UserContext:
    current_hour: int
    day_of_week: str  # "Monday".."Sunday"
    completion_rate: float  # today's completed / total
    total_habits: int = 0
    completed_habits: int = 0
    
    def to_dict(self):
        return {
            'currentHour': self.current_hour,
            'dayOfWeek': self.day_of_week,
            'completionRate': self.completion_rate,
            'totalHabits': self.total_habits,
            'completedHabits': self.completed_habits
        }


@dataclass(frozen=True)
class EnhancedInsight:
    id: str
    type: str
    icon: str
    title: str
    message: str
    priority: str  # low | medium | high
    confidence: float
    actionable: bool = False
    suggested_action: Optional[str] = None
    
    @property
    def sort_key(self):
        return (PRIORITY_ORDER.get(self.priority, 0), self.confidence)
    
    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'icon': self.icon,
            'title': self.title,
            'message': self.message,
            'priority': self.priority,
            'actionable': self.actionable,
            'suggestedAction': self.suggested_action,
            'confidence': self.confidence
        }


@dataclass(frozen=True)
class SmartInsights:
    """
    Everything the habit card renders for one refresh.

    tip_key / motivation_key name the decision-table rows that produced the
    personalized tip and motivational message.
    """
    primary_insights: List[EnhancedInsight] = field(default_factory=list)
    optimal_time: Optional[str] = None
    streak_risk: Optional[str] = None
    personalized_tip: Optional[str] = None
    motivational_message: Optional[str] = None
    tip_key: Optional[str] = None
    motivation_key: Optional[str] = None
    
    def to_dict(self):
        return {
            'primaryInsights': [i.to_dict() for i in self.primary_insights],
            'optimalTime': self.optimal_time,
            'streakRisk': self.streak_risk,
            'personalizedTip': self.personalized_tip,
            'motivationalMessage': self.motivational_message
        }
