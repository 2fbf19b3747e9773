from dataclasses import dataclass


@dataclass(frozen=True)
class HabitCorrelationInsight:
    habit_a: str
    habit_b: str
    correlation: float  # -1 to 1
    type: str  # positive | negative | neutral
    insight: str
    confidence: float  # 0-0.95
    sample_size: int = 0
    p_value: float = 1.0
    
    def to_dict(self):
        return {
            'habitA': self.habit_a,
            'habitB': self.habit_b,
            'correlation': self.correlation,
            'type': self.type,
            'insight': self.insight,
            'confidence': self.confidence,
            'sampleSize': self.sample_size,
            'pValue': self.p_value
        }
    
    def __repr__(self):
        return f'<HabitCorrelationInsight {self.habit_a}~{self.habit_b} r={self.correlation:.2f}>'
