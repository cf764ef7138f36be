from __future__ import annotations
import logging
from typing import Callable, Optional

from repchallenge.core.rules import MAX_MISSES, TRACK_END, RepRules
from repchallenge.core.session import (
    DIFFICULTIES, Difficulty, GameSession, GameState, RepOutcome)
from repchallenge.core.timers import TimerHandle, TimerQueue
from repchallenge.services.high_score import HighScoreStore
from repchallenge.services.tasks import TaskClient, WorkoutSummary

logger = logging.getLogger(__name__)

FRAME_MS = 1000.0 / 60.0        # one animation frame at 60 Hz
FRAMES_PER_TICK_UNIT = 10       # speed is expressed per 10 frames
MAX_FRAME_MS = 100.0            # longest frame charged to the indicator (6 frames)

HIT_RECOVERY_MS = 800
MISS_RECOVERY_MS = 1000
GAME_OVER_DELAY_MS = 500


class RepTimingGame:
    """
    The rep timing state machine.

    Ready -> Playing -> (Hit | Miss) -> Playing ... -> GameOver -> Ready.

    Every operation is safe to call in any state; calls that make no sense in
    the current state do nothing and return False/None. Delayed transitions
    are TimerHandles tagged with the session generation, so a timer that
    outlives a pause, quit or restart can never touch the newer session.
    """

    def __init__(
        self,
        high_scores: HighScoreStore,
        tasks: Optional[TaskClient] = None,
        difficulty=None,
    ):
        self.high_scores = high_scores
        self.tasks = tasks
        self.timers = TimerQueue()
        self.generation = 0
        self.session = GameSession()
        self.session.apply_difficulty(Difficulty.parse(difficulty))
        self.last_outcome: Optional[RepOutcome] = None
        self._pending: Optional[TimerHandle] = None
        self.high_score = self._load_high_score()

    # ---------- read-only views ----------
    @property
    def state(self) -> GameState:
        return self.session.state

    @property
    def paused(self) -> bool:
        return self.session.paused

    @property
    def game_over_pending(self) -> bool:
        s = self.session
        return s.state == GameState.Miss and s.total_misses >= MAX_MISSES

    # ---------- collaborators ----------
    def _load_high_score(self) -> int:
        try:
            return self.high_scores.get()
        except Exception:
            logger.exception("Could not read the stored high score")
            return 0

    # ---------- timers ----------
    def _schedule(self, delay_ms: float, expected: GameState, action: Callable[[], None]) -> None:
        self._cancel_pending()
        generation = self.generation

        def fire():
            if generation != self.generation or self.session.state != expected:
                logger.debug("Dropped stale timer (gen %d, expected %s)", generation, expected.name)
                return
            self._pending = None
            action()

        self._pending = self.timers.call_later(delay_ms, fire, generation)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    # ---------- lifecycle ----------
    def select_difficulty(self, difficulty) -> bool:
        if self.session.state != GameState.Ready:
            return False
        self.session.apply_difficulty(Difficulty.parse(difficulty))
        return True

    def start(self, difficulty=None) -> bool:
        if self.session.state == GameState.GameOver:
            self.restart()
        if self.session.state != GameState.Ready:
            return False

        chosen = Difficulty.parse(difficulty) if difficulty is not None else self.session.difficulty
        self.generation += 1
        self.session = GameSession()
        self.session.apply_difficulty(chosen)
        self.last_outcome = None
        logger.info("Session started (%s, speed %.0f, zone %s)",
                    DIFFICULTIES[chosen].label, self.session.speed, self.session.window)
        self._begin_rep()
        return True

    def _begin_rep(self) -> None:
        s = self.session
        s.state = GameState.Playing
        s.position = 0.0
        s.paused = False
        s.paused_position = 0.0

    def _discard(self) -> None:
        self._cancel_pending()
        self.timers.cancel_all()
        self.generation += 1
        difficulty = self.session.difficulty
        self.session = GameSession()
        self.session.apply_difficulty(difficulty)
        self.last_outcome = None

    def quit(self, confirmed: bool = False) -> bool:
        if not confirmed or not self.session.is_active:
            return False
        logger.info("Session quit at score %d", self.session.score)
        self._discard()
        return True

    def restart(self) -> bool:
        if self.session.state != GameState.GameOver:
            return False
        self._discard()
        return True

    # ---------- pause ----------
    def pause(self) -> bool:
        s = self.session
        if not s.is_active or s.paused or self.game_over_pending:
            return False

        if s.state in (GameState.Hit, GameState.Miss):
            # park at the start of the next rep
            self._cancel_pending()
            self.generation += 1
            s.state = GameState.Playing
            s.position = 0.0

        s.paused = True
        s.paused_position = s.position
        logger.debug("Paused at %.2f", s.position)
        return True

    def resume(self) -> bool:
        s = self.session
        if s.state != GameState.Playing or not s.paused:
            return False
        s.paused = False
        s.position = s.paused_position
        logger.debug("Resumed at %.2f", s.position)
        return True

    def toggle_pause(self) -> bool:
        if self.session.paused:
            return self.resume()
        return self.pause()

    # ---------- frame driving ----------
    def update(self, dt_ms: float) -> None:
        """
        One frame from the host loop: due timers first, then the indicator.

        A long frame (window drag, stall) moves the indicator at most
        MAX_FRAME_MS worth of frames. A rep started by a timer in this frame
        begins at 0 and only moves from the next frame on.
        """
        before = self.session.state
        if self.timers.advance(dt_ms) and self.session.state != before:
            return
        self.tick(min(max(0.0, dt_ms), MAX_FRAME_MS) / FRAME_MS)

    def tick(self, frames: float = 1.0) -> None:
        s = self.session
        if s.state != GameState.Playing or s.paused:
            return
        step = s.speed * frames / FRAMES_PER_TICK_UNIT
        if s.position + step >= TRACK_END:
            s.position = TRACK_END
            self._miss(accuracy=0.0, timed_out=True)
            return
        s.position += step

    # ---------- reps ----------
    def trigger(self) -> Optional[RepOutcome]:
        s = self.session
        if s.state != GameState.Playing or s.paused:
            return None

        accuracy = RepRules.accuracy(s.position)
        if RepRules.in_window(s.position, s.window):
            return self._hit(accuracy)
        return self._miss(accuracy)

    def _hit(self, accuracy: float) -> RepOutcome:
        s = self.session
        points = RepRules.points(accuracy, s.combo)
        s.score += points
        s.combo += 1
        s.best_combo = max(s.best_combo, s.combo)
        s.total_hits += 1
        s.state = GameState.Hit

        self.last_outcome = RepOutcome(
            hit=True, position=s.position, accuracy=accuracy, points=points,
            combo=s.combo, rating=RepRules.rating(accuracy))
        logger.debug("Hit at %.2f: +%d (combo %d)", s.position, points, s.combo)
        self._schedule(HIT_RECOVERY_MS, GameState.Hit, self._begin_rep)
        return self.last_outcome

    def _miss(self, accuracy: float, timed_out: bool = False) -> RepOutcome:
        s = self.session
        s.best_combo = max(s.best_combo, s.combo)
        s.combo = 0
        s.total_misses += 1
        s.state = GameState.Miss

        self.last_outcome = RepOutcome(
            hit=False, position=s.position, accuracy=accuracy, points=0,
            combo=0, rating=None, timed_out=timed_out)
        logger.debug("Miss at %.2f (%d/%d)%s", s.position, s.total_misses, MAX_MISSES,
                     " - too slow" if timed_out else "")

        if s.total_misses >= MAX_MISSES:
            self._schedule(GAME_OVER_DELAY_MS, GameState.Miss, self._game_over)
        else:
            self._schedule(MISS_RECOVERY_MS, GameState.Miss, self._begin_rep)
        return self.last_outcome

    # ---------- end of session ----------
    def _game_over(self) -> None:
        self.session.state = GameState.GameOver
        self.finalize()

    def finalize(self) -> None:
        s = self.session
        if s.state != GameState.GameOver or s.finalized:
            return
        s.finalized = True

        if s.score > self.high_score:
            self.high_score = s.score
            s.new_record = True
            try:
                self.high_scores.set(s.score)
            except Exception:
                logger.exception("Could not save the new high score %d", s.score)

        logger.info("Workout complete: score %d, reps %d, misses %d, best combo %d%s",
                    s.score, s.total_hits, s.total_misses, s.best_combo,
                    " (new high score)" if s.new_record else "")

        if self.tasks is None:
            return
        summary = WorkoutSummary(
            score=s.score, total_hits=s.total_hits,
            total_misses=s.total_misses, best_combo=s.best_combo)
        try:
            self.tasks.create_task(summary)
        except Exception:
            logger.exception("Error saving workout stats")
