from __future__ import annotations
from typing import Callable, List


class TimerHandle:
    """A one-shot callback due at an absolute time on a TimerQueue clock."""

    def __init__(self, due_ms: float, callback: Callable[[], None], generation: int = 0):
        self.due_ms = due_ms
        self.callback = callback
        self.generation = generation
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerQueue:
    """
    Frame-driven timers. Time only moves when advance() is called, so the
    queue runs on the same loop (and thread) as the game it belongs to.
    """

    def __init__(self):
        self.now_ms: float = 0.0
        self._timers: List[TimerHandle] = []

    def call_later(self, delay_ms: float, callback: Callable[[], None], generation: int = 0) -> TimerHandle:
        handle = TimerHandle(self.now_ms + max(0.0, delay_ms), callback, generation)
        self._timers.append(handle)
        return handle

    def cancel_all(self) -> None:
        for t in self._timers:
            t.cancel()
        self._timers = []

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if t.active)

    def advance(self, dt_ms: float) -> int:
        """Move the clock forward and run every timer that became due. Returns how many ran."""
        self.now_ms += max(0.0, dt_ms)

        due = [t for t in self._timers if t.active and t.due_ms <= self.now_ms]
        self._timers = [t for t in self._timers if t.active and t.due_ms > self.now_ms]
        due.sort(key=lambda t: t.due_ms)

        ran = 0
        for t in due:
            # an earlier callback in this batch may have cancelled it
            if t.cancelled:
                continue
            t.fired = True
            t.callback()
            ran += 1
        return ran
