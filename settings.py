from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from entities import ARENA_SIZE

CELL_PIXELS = 16
FPS = 60
HUD_HEIGHT = 48
WINDOW_CAPTION = "Shrinking Snake"
LOG_LEVEL = "INFO"
ERROR_LOG_FILE = Path(__file__).resolve().parent / "error_log.txt"

BACKGROUND_COLOR = (12, 16, 28)
ARENA_COLOR = (24, 30, 48)
BORDER_COLOR = (238, 94, 42)
SNAKE_COLOR = (124, 252, 0)
SNAKE_HEAD_COLOR = (200, 255, 120)
FRUIT_COLOR = (255, 60, 60)
TEXT_COLOR = (240, 240, 240)

ENV_PREFIX = "SHRINK_SNAKE_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Presentation/runtime options; game rules are not configurable."""

    cell_pixels: int = CELL_PIXELS
    fps: int = FPS
    log_level: str = LOG_LEVEL
    error_log: Path = ERROR_LOG_FILE

    @property
    def arena_pixels(self) -> int:
        return ARENA_SIZE * self.cell_pixels

    @property
    def window_size(self) -> tuple[int, int]:
        return (self.arena_pixels, self.arena_pixels + HUD_HEIGHT)


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX + name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{ENV_PREFIX + name} must be positive, got {value}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``SHRINK_SNAKE_*`` environment variables."""
    if env is None:
        env = os.environ

    log_level = env.get(ENV_PREFIX + "LOG_LEVEL", "").strip().upper() or LOG_LEVEL
    if log_level not in LOG_LEVELS:
        raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    error_log = env.get(ENV_PREFIX + "ERROR_LOG", "").strip()

    return Settings(
        cell_pixels=_positive_int(env, "CELL_PIXELS", CELL_PIXELS),
        fps=_positive_int(env, "FPS", FPS),
        log_level=log_level,
        error_log=Path(error_log) if error_log else ERROR_LOG_FILE,
    )
