from __future__ import annotations
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "high_score"


class HighScoreStore(ABC):
    """Persistent best score across sessions."""

    @abstractmethod
    def get(self) -> int:
        pass

    @abstractmethod
    def set(self, value: int) -> None:
        pass


def _check_score(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"High score must be an int, got {value!r}")
    if value < 0:
        raise ValueError(f"High score must be non-negative, got {value}")
    return value


class MemoryHighScoreStore(HighScoreStore):
    def __init__(self, value: int = 0):
        self._value = _check_score(value)

    def get(self) -> int:
        return self._value

    def set(self, value: int) -> None:
        self._value = _check_score(value)


class JsonHighScoreStore(HighScoreStore):
    """
    Keeps {"high_score": N} in a small JSON file, by default under
    runtime/cache/ next to the package. Writes go through a temp file so a
    crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, path: Optional[Path] = None):
        if path is None:
            root = Path(__file__).resolve().parents[2] / "runtime" / "cache"
            path = root / "high_score.json"
        self.path = Path(path)

    def get(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return _check_score(int(data[HIGH_SCORE_KEY]))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Unreadable high score file %s (%s); starting from 0", self.path, e)
            return 0

    def set(self, value: int) -> None:
        value = _check_score(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({HIGH_SCORE_KEY: value}, f)
        os.replace(tmp_path, self.path)
        logger.debug("High score %d saved to %s", value, self.path)
