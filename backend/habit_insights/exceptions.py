class HabitInsightsError(Exception):
    """Base class for errors raised inside the engine."""


class HistoryStoreError(HabitInsightsError):
    """The history store could not supply records or streak counters."""


class InvalidInputError(HabitInsightsError):
    """Input payload failed schema validation."""
    
    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.details = details or {}
