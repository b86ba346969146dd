"""Game configuration with environment overrides."""

import os
from dataclasses import dataclass
from typing import Optional

from tetris_engine.rng import GENERATORS


@dataclass
class GameConfig:
    """Tunable game parameters.

    The board is always Board.WIDTH x Board.HEIGHT (10x20).
    """

    tick_ms: int = 1000  # Automatic descent period
    points_per_line: int = 100
    hard_drop_grace_ms: int = 0  # 0 = hard drop locks immediately
    randomizer: str = "uniform"
    seed: Optional[int] = None
    frame_ms: int = 50  # Server gravity loop wake-up interval

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check that every field is usable.

        Raises:
            ValueError: If a value is out of range
        """
        if self.tick_ms <= 0:
            raise ValueError(f"tick_ms must be positive, got {self.tick_ms}")
        if self.frame_ms <= 0:
            raise ValueError(f"frame_ms must be positive, got {self.frame_ms}")
        if self.hard_drop_grace_ms < 0:
            raise ValueError(f"hard_drop_grace_ms must not be negative, got {self.hard_drop_grace_ms}")
        if self.points_per_line < 0:
            raise ValueError(f"points_per_line must not be negative, got {self.points_per_line}")
        if self.randomizer.lower() not in GENERATORS:
            raise ValueError(f"Unknown randomizer: {self.randomizer}")

    @classmethod
    def from_env(cls) -> "GameConfig":
        """Build a config from TETRIS_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a variable holds an invalid value
        """
        defaults = cls()
        seed = _env_int("TETRIS_SEED", None)
        return cls(
            tick_ms=_env_int("TETRIS_TICK_MS", defaults.tick_ms),
            hard_drop_grace_ms=_env_int("TETRIS_HARD_DROP_GRACE_MS", defaults.hard_drop_grace_ms),
            randomizer=os.getenv("TETRIS_RANDOMIZER", defaults.randomizer),
            seed=seed,
            frame_ms=_env_int("TETRIS_FRAME_MS", defaults.frame_ms),
        )


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")
