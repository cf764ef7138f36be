from __future__ import annotations
import logging
import time
from pathlib import Path
import pygame

from repchallenge.api.config import EngineConfig
from repchallenge.api.frame_data import FrameData
from repchallenge.app.context import Context
from repchallenge.app.loader import load_game_manifest, load_game_module
from repchallenge.input.pointer_input import PointerInput
from repchallenge.services.high_score import JsonHighScoreStore
from repchallenge.services.tasks import HttpTaskClient
from repchallenge.settings import Settings

logger = logging.getLogger(__name__)

GAMES_DIR = Path(__file__).resolve().parents[2] / "games"


def build_resources(cfg: EngineConfig, settings: Settings) -> dict:
    """Services handed to the game through Context.resources."""
    tasks = None
    if cfg.sync_tasks:
        tasks = HttpTaskClient(
            settings.api_url, token=settings.api_token, timeout=settings.request_timeout)
    else:
        logger.info("Task sync disabled; workouts will not be recorded")
    return {
        "high_scores": JsonHighScoreStore(settings.high_score_file),
        "tasks": tasks,
    }


def run_game(
    game_id: str,
    screen_size: tuple[int, int],
    settings: Settings,
    fps: int = 60,
    mirror: bool = False,
    sync_tasks: bool = True,
):
    cfg = EngineConfig(
        screen_size=screen_size,
        fps=fps,
        mirror=mirror,
        sync_tasks=sync_tasks,
    )

    # load game before opening a window so a broken game folder fails fast
    game_root = GAMES_DIR / game_id
    manifest = load_game_manifest(game_root)
    module = load_game_module(game_root)
    game = module.get_game()

    pygame.init()
    pygame.display.set_caption(f"{manifest.get('name', game_id)}")
    screen = pygame.display.set_mode(screen_size)
    clock = pygame.time.Clock()

    pointer = PointerInput(screen_size, mirror=mirror)

    # Render target: draw to off-screen if mirroring, otherwise draw directly to screen
    render_surface = screen if not mirror else pygame.Surface(
        screen_size).convert()

    ctx = Context(
        screen=render_surface,
        clock=clock,
        cfg=cfg,
        resources=build_resources(cfg, settings),
        screen_size=screen_size,
    )

    game.on_load(ctx, manifest)
    logger.info("Loaded game %s (%dx%d @ %d fps)", game_id, screen_size[0], screen_size[1], fps)

    try:
        while not ctx.exit_requested:
            dt = clock.tick(cfg.fps)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    ctx.request_exit()
                    continue
                pointer.handle_pygame_event(event)
                game.on_event(event)

            frame_data = FrameData(timestamp=time.time(),
                                   presses=pointer.emit_points())

            # ---- draw to render_surface ----
            render_surface.fill((12, 14, 18))
            game.on_update(dt, frame_data)
            game.on_draw(render_surface)

            # ---- present to window ----
            if mirror:
                flipped = pygame.transform.flip(render_surface, True, False)
                screen.blit(flipped, (0, 0))

            pygame.display.flip()

    finally:
        game.on_unload()
        pygame.quit()
        logger.info("Game %s closed", game_id)
