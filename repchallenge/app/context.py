from __future__ import annotations
from dataclasses import dataclass, field
import pygame
from typing import Any, Tuple
from repchallenge.api.config import EngineConfig


@dataclass
class Context:
    screen: pygame.Surface
    clock: pygame.time.Clock
    cfg: EngineConfig
    # services shared with the game: "high_scores", "tasks"
    resources: dict[str, Any]
    screen_size: Tuple[int, int]
    exit_requested: bool = field(default=False)

    def request_exit(self) -> None:
        """Ask the platform loop to stop after the current frame."""
        self.exit_requested = True
