from __future__ import annotations
import math
from typing import Tuple

TRACK_START = 0.0
TRACK_END = 100.0
TRACK_CENTER = 50.0

MAX_MISSES = 3
COMBO_BONUS = 0.1

# (minimum accuracy, rating), best first
RATINGS = (
    (95.0, "PERFECT"),
    (85.0, "GREAT"),
    (70.0, "GOOD"),
)
DEFAULT_RATING = "REP"


class RepRules:
    """
    Scoring math for a single rep. Pure functions, no session state.
    """

    @staticmethod
    def accuracy(position: float, center: float = TRACK_CENTER) -> float:
        """
        100 at the centre, minus 2 per unit of distance, clamped to [0, 100].
        Measured from the fixed track centre, not from the power zone centre.
        """
        raw = 100.0 - abs(position - center) * 2.0
        return max(0.0, min(100.0, raw))

    @staticmethod
    def in_window(position: float, window: Tuple[float, float]) -> bool:
        start, end = window
        return start <= position <= end

    @staticmethod
    def points(accuracy: float, combo: int) -> int:
        """Points for a hit made while `combo` reps were already chained."""
        return round_half_up(accuracy * (1 + combo * COMBO_BONUS))

    @staticmethod
    def rating(accuracy: float) -> str:
        for threshold, label in RATINGS:
            if accuracy >= threshold:
                return label
        return DEFAULT_RATING

    @staticmethod
    def hit_rate(hits: int, misses: int) -> int:
        if hits <= 0:
            return 0
        return round_half_up(hits / (hits + misses) * 100)


def round_half_up(value: float) -> int:
    # builtin round() is banker's rounding; scores round .5 upwards
    return int(math.floor(value + 0.5))
