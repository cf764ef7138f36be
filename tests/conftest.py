"""
Shared fixtures: in-memory collaborators so no file, network or display is
touched by the core tests.
"""
import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "hide")

from repchallenge.core import Difficulty, RepTimingGame
from repchallenge.services.high_score import MemoryHighScoreStore
from repchallenge.services.tasks import TaskClient


class RecordingStore(MemoryHighScoreStore):
    def __init__(self, value: int = 0):
        super().__init__(value)
        self.writes = []

    def set(self, value: int) -> None:
        super().set(value)
        self.writes.append(value)


class BrokenStore(MemoryHighScoreStore):
    def get(self) -> int:
        raise OSError("disk unplugged")

    def set(self, value: int) -> None:
        raise OSError("disk unplugged")


class RecordingTasks(TaskClient):
    def __init__(self):
        self.summaries = []

    def create_task(self, summary) -> None:
        self.summaries.append(summary)


class BrokenTasks(TaskClient):
    def __init__(self):
        self.calls = 0

    def create_task(self, summary) -> None:
        self.calls += 1
        raise ConnectionError("tracker down")


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def tasks():
    return RecordingTasks()


@pytest.fixture
def game(store, tasks):
    return RepTimingGame(store, tasks=tasks)


@pytest.fixture
def playing(game):
    """A Medium session that has just started."""
    game.start(Difficulty.Medium)
    return game
