from __future__ import annotations
import pygame
from typing import Optional

from repchallenge.api import Game, FrameData
from repchallenge.app.context import Context
from repchallenge.core import (
    DIFFICULTIES, MAX_MISSES, Difficulty, GameState, RepOutcome, RepRules, RepTimingGame)
from repchallenge.render.shapes import draw_button, draw_text, draw_text_centered
from repchallenge.services.high_score import MemoryHighScoreStore


# -----------------------------
# Layout / colors
# -----------------------------
TRACK_MARGIN_X = 120
TRACK_HEIGHT = 18
INDICATOR_RADIUS = 16
BUTTON_W, BUTTON_H = 240, 64
SMALL_BUTTON_W, SMALL_BUTTON_H = 130, 44

HUD_COLOR = (230, 230, 230)
DIM_COLOR = (150, 150, 150)
TRACK_COLOR = (60, 66, 74)
ZONE_COLOR = (50, 200, 120)
INDICATOR_COLOR = (255, 200, 0)
HIT_COLOR = (50, 220, 80)
MISS_COLOR = (230, 70, 70)
RECORD_COLOR = (255, 215, 0)

DIFFICULTY_KEYS = {
    pygame.K_1: Difficulty.Easy,
    pygame.K_2: Difficulty.Medium,
    pygame.K_3: Difficulty.Hard,
}
DIFFICULTY_ORDER = [Difficulty.Easy, Difficulty.Medium, Difficulty.Hard]

INSTRUCTIONS = [
    "Watch the indicator move from left to right",
    "Press SPACE or click DO REP! inside the power zone",
    "Perfect timing = more points, combos add a bonus",
    "3 bad form reps = workout over",
    "P to pause, ESC to quit",
]


def format_outcome(outcome: RepOutcome) -> str:
    if not outcome.hit:
        return "TOO SLOW! BAD FORM!" if outcome.timed_out else "BAD FORM!"
    prefix = "REP!" if outcome.rating == "REP" else f"{outcome.rating} REP!"
    text = f"{prefix} +{outcome.points}"
    if outcome.combo > 1:
        text += f" ({outcome.combo}x COMBO!)"
    return text


class RepChallenge(Game):
    def on_load(self, ctx: Context, manifest):
        self.ctx = ctx
        self.manifest = manifest
        options = manifest.get("options", {}) or {}
        self.show_instructions = bool(options.get("show_instructions", True))

        high_scores = ctx.resources.get("high_scores") or MemoryHighScoreStore()
        self.game = RepTimingGame(
            high_scores,
            tasks=ctx.resources.get("tasks"),
            difficulty=options.get("default_difficulty"),
        )

        self.confirming = False
        self._paused_for_confirm = False
        self._layout()

    def _layout(self):
        w, h = self.ctx.screen_size
        self.track_rect = pygame.Rect(
            TRACK_MARGIN_X, int(h * 0.45), w - 2 * TRACK_MARGIN_X, TRACK_HEIGHT)
        self.rep_button = pygame.Rect(
            (w - BUTTON_W) // 2, int(h * 0.62), BUTTON_W, BUTTON_H)
        self.start_button = pygame.Rect(
            (w - BUTTON_W) // 2, int(h * 0.50), BUTTON_W, BUTTON_H)
        self.play_again_button = pygame.Rect(
            (w - BUTTON_W) // 2, int(h * 0.78), BUTTON_W, BUTTON_H)
        self.pause_button = pygame.Rect(
            w - 2 * SMALL_BUTTON_W - 40, 110, SMALL_BUTTON_W, SMALL_BUTTON_H)
        self.quit_button = pygame.Rect(
            w - SMALL_BUTTON_W - 20, 110, SMALL_BUTTON_W, SMALL_BUTTON_H)

        gap = 24
        total = len(DIFFICULTY_ORDER) * BUTTON_W + (len(DIFFICULTY_ORDER) - 1) * gap
        x0 = (w - total) // 2
        self.difficulty_buttons = {
            d: pygame.Rect(x0 + i * (BUTTON_W + gap), int(h * 0.34), BUTTON_W, BUTTON_H)
            for i, d in enumerate(DIFFICULTY_ORDER)
        }

    # ---------- quit confirmation ----------
    def _open_confirm(self):
        self.confirming = True
        self._paused_for_confirm = self.game.pause()

    def _close_confirm(self, resume: bool):
        self.confirming = False
        if resume and self._paused_for_confirm:
            self.game.resume()
        self._paused_for_confirm = False

    def _confirm_quit(self):
        self.confirming = False
        self._paused_for_confirm = False
        self.game.quit(confirmed=True)

    # ---------- input ----------
    def on_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        key = event.key
        state = self.game.state

        if self.confirming:
            if key in (pygame.K_y, pygame.K_RETURN):
                self._confirm_quit()
            elif key in (pygame.K_n, pygame.K_ESCAPE):
                self._close_confirm(resume=True)
            return

        if state == GameState.Ready:
            if key in DIFFICULTY_KEYS:
                self.game.select_difficulty(DIFFICULTY_KEYS[key])
            elif key in (pygame.K_LEFT, pygame.K_RIGHT):
                step = -1 if key == pygame.K_LEFT else 1
                i = DIFFICULTY_ORDER.index(self.game.session.difficulty)
                self.game.select_difficulty(DIFFICULTY_ORDER[(i + step) % len(DIFFICULTY_ORDER)])
            elif key in (pygame.K_SPACE, pygame.K_RETURN):
                self.game.start()
            elif key == pygame.K_ESCAPE:
                self.ctx.request_exit()

        elif state == GameState.GameOver:
            if key in (pygame.K_SPACE, pygame.K_RETURN, pygame.K_r):
                self.game.restart()
            elif key == pygame.K_ESCAPE:
                self.ctx.request_exit()

        else:
            if key == pygame.K_SPACE:
                self.game.trigger()
            elif key == pygame.K_p:
                self.game.toggle_pause()
            elif key == pygame.K_ESCAPE:
                self._open_confirm()

    def _handle_press(self, x: float, y: float) -> None:
        state = self.game.state
        if self.confirming:
            return

        if state == GameState.Ready:
            for d, rect in self.difficulty_buttons.items():
                if rect.collidepoint(x, y):
                    self.game.select_difficulty(d)
                    return
            if self.start_button.collidepoint(x, y):
                self.game.start()

        elif state == GameState.GameOver:
            if self.play_again_button.collidepoint(x, y):
                self.game.restart()

        else:
            if self.rep_button.collidepoint(x, y):
                self.game.trigger()
            elif self.pause_button.collidepoint(x, y):
                self.game.toggle_pause()
            elif self.quit_button.collidepoint(x, y):
                self._open_confirm()

    # ---------- update ----------
    def on_update(self, dt_ms: float, frame: FrameData) -> None:
        for p in frame.presses:
            self._handle_press(p.x, p.y)

        self.game.update(dt_ms)

        # the third miss can end the session while the prompt is open
        if self.confirming and not self.game.session.is_active:
            self._close_confirm(resume=False)

    # ---------- draw ----------
    def on_draw(self, surface: pygame.Surface) -> None:
        w, _ = self.ctx.screen_size
        draw_text_centered(surface, "Rep Challenge", (w // 2, 36), HUD_COLOR, size=48)
        self._draw_stats(surface)

        state = self.game.state
        if state == GameState.Ready:
            self._draw_menu(surface)
        elif state == GameState.GameOver:
            self._draw_game_over(surface)
        else:
            self._draw_field(surface)

        if self.confirming:
            self._draw_overlay(surface, "Quit workout?", "Your progress will be lost.  Y = quit, N = keep going")

    def _draw_stats(self, surface: pygame.Surface):
        s = self.game.session
        stats = [
            ("Score", str(s.score)),
            ("High Score", str(self.game.high_score)),
            ("Combo", f"{s.combo}x"),
            ("Reps", str(s.total_hits)),
            ("Misses", f"{s.total_misses}/{MAX_MISSES}"),
        ]
        for i, (label, value) in enumerate(stats):
            x = 20 + i * 150
            draw_text(surface, label, (x, 70), DIM_COLOR, size=20)
            draw_text(surface, value, (x, 88), HUD_COLOR, size=30)

    def _draw_menu(self, surface: pygame.Surface):
        w, h = self.ctx.screen_size
        selected = self.game.session.difficulty
        draw_text_centered(surface, "Select Intensity", (w // 2, int(h * 0.28)), HUD_COLOR, size=32)
        for d, rect in self.difficulty_buttons.items():
            draw_button(surface, rect, DIFFICULTIES[d].label, active=(d == selected))
        draw_button(surface, self.start_button, "Start Workout", ZONE_COLOR)

        if self.show_instructions:
            y = int(h * 0.66)
            for line in INSTRUCTIONS:
                draw_text_centered(surface, line, (w // 2, y), DIM_COLOR, size=22)
                y += 26

    def _draw_field(self, surface: pygame.Surface):
        s = self.game.session
        profile = DIFFICULTIES[s.difficulty]
        track = self.track_rect

        draw_text(surface, f"{profile.label} Mode", (20, 120), DIM_COLOR, size=24)
        draw_button(surface, self.pause_button, "Resume" if s.paused else "Pause", size=24)
        draw_button(surface, self.quit_button, "Quit", MISS_COLOR, size=24)

        pygame.draw.rect(surface, TRACK_COLOR, track, border_radius=TRACK_HEIGHT // 2)

        start, end = s.window
        zx0 = track.x + int(track.w * start / 100.0)
        zx1 = track.x + int(track.w * end / 100.0)
        zone = pygame.Rect(zx0, track.y - 14, max(2, zx1 - zx0), track.h + 28)
        pygame.draw.rect(surface, ZONE_COLOR, zone, width=2)
        draw_text_centered(surface, "POWER ZONE", (zone.centerx, zone.bottom + 18), ZONE_COLOR, size=22)

        ix = track.x + int(track.w * min(100.0, s.position) / 100.0)
        pygame.draw.circle(surface, INDICATOR_COLOR, (ix, track.centery), INDICATOR_RADIUS)

        draw_button(surface, self.rep_button, "DO REP!", HIT_COLOR,
                    enabled=(s.state == GameState.Playing and not s.paused), size=34)

        outcome = self.game.last_outcome
        if outcome is not None and s.state in (GameState.Hit, GameState.Miss):
            color = HIT_COLOR if outcome.hit else MISS_COLOR
            w, h = self.ctx.screen_size
            draw_text_centered(surface, format_outcome(outcome), (w // 2, int(h * 0.33)), color, size=40)

        if s.paused and not self.confirming:
            self._draw_overlay(surface, "PAUSED", "Press P or click Resume to continue")

    def _draw_game_over(self, surface: pygame.Surface):
        w, h = self.ctx.screen_size
        s = self.game.session
        draw_text_centered(surface, "Workout Complete!", (w // 2, int(h * 0.25)), HUD_COLOR, size=44)

        rows = [
            ("Final Score", str(s.score)),
            ("Total Reps", str(s.total_hits)),
            ("Best Combo", f"{s.best_combo}x"),
            ("Bad Form", str(s.total_misses)),
            ("Accuracy", f"{RepRules.hit_rate(s.total_hits, s.total_misses)}%"),
        ]
        y = int(h * 0.34)
        for label, value in rows:
            draw_text(surface, label, (w // 2 - 160, y), DIM_COLOR, size=28)
            draw_text(surface, value, (w // 2 + 80, y), HUD_COLOR, size=28)
            y += 34

        if s.new_record:
            draw_text_centered(surface, f"NEW HIGH SCORE! {s.score}", (w // 2, y + 24), RECORD_COLOR, size=36)
        if self.game.tasks is not None:
            draw_text_centered(surface, "Saving workout to your tasks", (w // 2, y + 60), DIM_COLOR, size=22)

        draw_button(surface, self.play_again_button, "Train Again", ZONE_COLOR)

    def _draw_overlay(self, surface: pygame.Surface, title: str, subtitle: Optional[str] = None):
        w, h = self.ctx.screen_size
        shade = pygame.Surface((w, h), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 170))
        surface.blit(shade, (0, 0))
        draw_text_centered(surface, title, (w // 2, h // 2 - 20), HUD_COLOR, size=56)
        if subtitle:
            draw_text_centered(surface, subtitle, (w // 2, h // 2 + 30), DIM_COLOR, size=26)

    def on_unload(self) -> None:
        # a session abandoned by closing the window is discarded, not recorded
        self.game.quit(confirmed=True)


def get_game():
    return RepChallenge()
