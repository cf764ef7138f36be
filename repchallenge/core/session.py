from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class GameState(Enum):
    Ready = 1
    Playing = 2
    Hit = 3
    Miss = 4
    GameOver = 5


class Difficulty(Enum):
    Easy = "easy"
    Medium = "medium"
    Hard = "hard"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Accepts a Difficulty, a case-insensitive name, or None (Medium)."""
        if value is None:
            return cls.Medium
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown difficulty: {value!r}")


@dataclass(frozen=True)
class DifficultyProfile:
    label: str
    speed: float                     # track units per tick unit
    window: Tuple[float, float]      # inclusive power zone


DIFFICULTIES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.Easy: DifficultyProfile("Beginner", 15.0, (40.0, 60.0)),
    Difficulty.Medium: DifficultyProfile("Intermediate", 20.0, (45.0, 55.0)),
    Difficulty.Hard: DifficultyProfile("Advanced", 30.0, (47.0, 53.0)),
}


@dataclass
class GameSession:
    """
    All volatile state of one run. A fresh instance replaces the old one on
    quit/restart, so nothing from a discarded run can leak into the next.
    """
    difficulty: Difficulty = Difficulty.Medium
    state: GameState = GameState.Ready
    position: float = 0.0
    speed: float = DIFFICULTIES[Difficulty.Medium].speed
    window: Tuple[float, float] = DIFFICULTIES[Difficulty.Medium].window

    score: int = 0
    combo: int = 0
    best_combo: int = 0
    total_hits: int = 0
    total_misses: int = 0

    paused: bool = False
    paused_position: float = 0.0
    finalized: bool = False
    new_record: bool = False

    def apply_difficulty(self, difficulty: Difficulty) -> None:
        profile = DIFFICULTIES[difficulty]
        self.difficulty = difficulty
        self.speed = profile.speed
        self.window = profile.window

    @property
    def is_active(self) -> bool:
        return self.state in (GameState.Playing, GameState.Hit, GameState.Miss)

    def to_dict(self) -> Dict[str, object]:
        """Debug dump"""
        return {
            "state": self.state.name,
            "difficulty": self.difficulty.value,
            "pos": round(self.position, 2),
            "score": self.score,
            "combo": self.combo,
            "best": self.best_combo,
            "hits": self.total_hits,
            "misses": self.total_misses,
            "paused": self.paused,
        }


@dataclass(frozen=True)
class RepOutcome:
    hit: bool
    position: float
    accuracy: float
    points: int
    combo: int                  # combo after the rep was resolved
    rating: Optional[str]       # None for misses
    timed_out: bool = False
