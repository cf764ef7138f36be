from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

if TYPE_CHECKING:
    from repchallenge.app.context import Context

from .frame_data import FrameData


class Game:
    """
    Hooks run_game calls on a game folder's get_game() object.

    Order per frame: on_event for every pygame event, then on_update with the
    pointer presses gathered that frame, then on_draw. on_unload always runs
    when the window closes, including after an error.
    """

    def on_load(self, ctx: Context, manifest: dict) -> None:
        """Once, before the first frame. ctx.resources holds the high-score store and task client."""
        ...

    def on_update(self, dt_ms: float, frame: FrameData) -> None:
        """dt_ms is wall time since the last frame; frame.presses are mouse/touch presses in screen coords."""
        ...

    def on_draw(self, surface: pygame.Surface) -> None:
        """Draw onto surface; the loop clears it first and mirrors it if configured."""
        ...

    def on_event(self, event: pygame.event.Event) -> None:
        """Raw pygame events, keyboard included. Call ctx.request_exit() to close the window."""
        ...

    def on_unload(self) -> None:
        """Discard or flush anything in progress."""
        ...
