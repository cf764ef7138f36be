from __future__ import annotations
import pygame
from typing import List, Tuple

from repchallenge.api.frame_data import Point

PRIMARY_BUTTON = 1


class PointerInput:
    """
    Collects primary-button clicks and touch-downs between frames:
    - one Point per press, emitted once (no hold repeat).
    - window coords are converted to logical coords, so --mirror flips x.
    """

    def __init__(self, screen_size: Tuple[int, int], mirror: bool = False):
        self.screen_size = screen_size
        self.mirror = mirror
        self._presses: List[Point] = []

    def _to_logical(self, x: float, y: float) -> Tuple[float, float]:
        w, _ = self.screen_size
        if self.mirror:
            x = (w - 1) - x
        return float(x), float(y)

    def handle_pygame_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN:
            # touches also arrive as synthetic mouse events; FINGERDOWN covers them
            if event.button == PRIMARY_BUTTON and not getattr(event, "touch", False):
                self._presses.append(Point(*self._to_logical(*event.pos)))

        elif event.type == pygame.FINGERDOWN:
            # touch coords are normalized to [0, 1]
            w, h = self.screen_size
            self._presses.append(Point(*self._to_logical(event.x * w, event.y * h)))

        elif event.type == pygame.WINDOWFOCUSLOST:
            self._presses.clear()

    def emit_points(self) -> List[Point]:
        """Return the presses since the last call and forget them."""
        out, self._presses = self._presses, []
        return out
