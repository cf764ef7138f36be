from .session import GameSession, GameState, Difficulty, DifficultyProfile, DIFFICULTIES, RepOutcome
from .rules import RepRules, MAX_MISSES
from .timers import TimerQueue, TimerHandle
from .machine import RepTimingGame

__all__ = [
    "GameSession", "GameState", "Difficulty", "DifficultyProfile", "DIFFICULTIES",
    "RepOutcome", "RepRules", "MAX_MISSES", "TimerQueue", "TimerHandle", "RepTimingGame",
]
