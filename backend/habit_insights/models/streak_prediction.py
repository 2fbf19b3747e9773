from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional


@dataclass(frozen=True)
class StreakPrediction:
    habit_id: str
    current_streak: int
    predicted_streak_end: Optional[date]
    risk_factors: List[str]
    strength_factors: List[str]
    confidence_score: float
    recommendation: str
    recommendation_key: str
    
    def to_dict(self):
        return {
            'habitId': self.habit_id,
            'currentStreak': self.current_streak,
            'predictedStreakEnd': self.predicted_streak_end.isoformat() if self.predicted_streak_end else None,
            'riskFactors': list(self.risk_factors),
            'strengthFactors': list(self.strength_factors),
            'confidenceScore': self.confidence_score,
            'recommendation': self.recommendation
        }


@dataclass(frozen=True)
class RiskFactor:
    factor: str
    impact: float  # 0-1
    mitigation: str
    
    def to_dict(self):
        return {'factor': self.factor, 'impact': self.impact, 'mitigation': self.mitigation}


@dataclass(frozen=True)
class StreakForecast:
    """
    Ensemble forecast of streak survival.

    predictions holds the probability of keeping the streak for 7, 14 and 30
    more days under the keys 'day7', 'day14', 'day30'.
    """
    habit_id: str
    current_streak: int
    predictions: Dict[str, float]
    risk_profile: str  # low | medium | high
    key_risk_factors: List[RiskFactor] = field(default_factory=list)
    streak_sustainability_score: int = 50  # 0-100
    optimal_interventions: List[str] = field(default_factory=list)
    next_critical_date: Optional[date] = None
    
    def to_dict(self):
        return {
            'habitId': self.habit_id,
            'currentStreak': self.current_streak,
            'predictions': dict(self.predictions),
            'riskProfile': self.risk_profile,
            'keyRiskFactors': [f.to_dict() for f in self.key_risk_factors],
            'streakSustainabilityScore': self.streak_sustainability_score,
            'optimalInterventions': list(self.optimal_interventions),
            'nextCriticalDate': self.next_critical_date.isoformat() if self.next_critical_date else None
        }


@dataclass(frozen=True)
class RecoveryAction:
    day: int
    action: str
    reasoning: str
    difficulty_level: str  # minimal | low | normal
    
    def to_dict(self):
        return {
            'day': self.day,
            'action': self.action,
            'reasoning': self.reasoning,
            'difficultyLevel': self.difficulty_level
        }


@dataclass(frozen=True)
class StreakRecoveryPlan:
    habit_id: str
    broken_streak_length: int
    recovery_strategy: str  # quick-restart | gradual-buildup | foundation-reset
    recommended_actions: List[RecoveryAction]
    reframing_message: str
    encouragement_level: str
    focus_area: str
    
    def to_dict(self):
        return {
            'habitId': self.habit_id,
            'brokenStreakLength': self.broken_streak_length,
            'recoveryStrategy': self.recovery_strategy,
            'recommendedActions': [a.to_dict() for a in self.recommended_actions],
            'psychologicalSupport': {
                'reframingMessage': self.reframing_message,
                'encouragementLevel': self.encouragement_level,
                'focusArea': self.focus_area
            }
        }


@dataclass(frozen=True)
class DifficultyAdjustment:
    habit_id: str
    baseline_complexity: str
    current_mood: str
    adjusted_complexity: str
    time_reduction: Optional[int]
    energy_adjustment: str
    alternative_suggestion: Optional[str]
    motivational_approach: str
    contextual_tips: List[str]
    
    def to_dict(self):
        return {
            'habitId': self.habit_id,
            'baselineComplexity': self.baseline_complexity,
            'currentMood': self.current_mood,
            'adjustedComplexity': self.adjusted_complexity,
            'suggestionModification': {
                'timeReduction': self.time_reduction,
                'energyAdjustment': self.energy_adjustment,
                'alternativeSuggestion': self.alternative_suggestion
            },
            'motivationalApproach': self.motivational_approach,
            'contextualTips': list(self.contextual_tips)
        }
