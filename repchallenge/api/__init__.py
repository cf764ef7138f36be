"""What a game folder imports: the Game hooks and the per-frame input it receives."""
from .config import EngineConfig
from .frame_data import FrameData, Point
from .game_base import Game

__all__ = ["EngineConfig", "FrameData", "Game", "Point"]
