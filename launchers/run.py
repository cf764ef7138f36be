import argparse
import sys
from pathlib import Path
import os
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = "hide"

# Ensure repo root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from repchallenge.app.loop import run_game
from repchallenge.logger import setup_logging
from repchallenge.settings import Settings


def parse_screen(value: str) -> tuple[int, int]:
    try:
        w, h = map(int, value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Screen size must look like 1280x720, got {value!r}")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError("Screen size must be positive")
    return w, h


def main():
    parser = argparse.ArgumentParser(description="Rep Challenge Launcher")
    parser.add_argument("--game", default="rep-challenge", help="Game folder name under games/")
    parser.add_argument("--screen", default="1280x720", type=parse_screen, help="Screen size WxH, e.g. 1280x720")
    parser.add_argument("--fps", type=int, default=60, help="Frame rate cap")
    parser.add_argument("--mirror", action="store_true", help="Mirror the game window horizontally")
    parser.add_argument("--offline", action="store_true", help="Do not send workout summaries to the task tracker")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: search upwards for .env)")
    parser.add_argument("--log-level", default=None, help="Override REP_LOG_LEVEL")
    args = parser.parse_args()

    overrides = {"REP_LOG_LEVEL": args.log_level} if args.log_level else None
    settings = Settings.from_env(dotenv_path=args.env_file, overrides=overrides)
    setup_logging(settings.log_level_value, settings.log_file)

    run_game(
        game_id=args.game,
        screen_size=args.screen,
        settings=settings,
        fps=args.fps,
        mirror=args.mirror,
        sync_tasks=not args.offline,
    )


if __name__ == "__main__":
    main()
