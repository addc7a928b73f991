"""Food, golden food and the single-use item."""

from __future__ import annotations

import logging

import numpy as np

from reversnake.grid import Grid, Position, WallMode
from reversnake.snake import Direction

logger = logging.getLogger(__name__)

# Inclusive spawn area for golden food, kept clear of the starting entities.
_GOLDEN_X_RANGE = (3, 22)
_GOLDEN_Y_RANGE = (3, 11)


class Food:
    """The player-steered food item.

    ``immune_until`` is a millisecond timestamp; the snake cannot eat the
    food while ``now <= immune_until``.
    """

    def __init__(self, x: int, y: int) -> None:
        self.position: Position = (x, y)
        self.direction = Direction.NONE
        self.immune_until = 0
        self.is_golden = False

    def move(self, grid: Grid, wall_mode: WallMode = WallMode.STOP) -> bool:
        """Move one cell in the current direction. Returns True if it moved."""
        if self.direction == Direction.NONE:
            return False
        new_pos, blocked = grid.step(self.position, self.direction, wall_mode)
        if blocked:
            return False
        self.position = new_pos
        return True

    def is_immune(self, now: int) -> bool:
        return now <= self.immune_until

    def grant_immunity(self, now: int, duration_ms: int) -> None:
        self.immune_until = now + duration_ms

    def to_dict(self, now: int) -> dict:
        return {
            "position": list(self.position),
            "direction": self.direction.name.lower(),
            "golden": self.is_golden,
            "immune": self.is_immune(now),
        }


class GoldenFood:
    """A stationary one-time pickup that empowers the food."""

    def __init__(self, x: int, y: int, effect_ms: int = 5000) -> None:
        self.position: Position = (x, y)
        self.visible = True
        self.effect_duration = effect_ms

    @classmethod
    def spawn(
        cls,
        rng: np.random.Generator | None = None,
        effect_ms: int = 5000,
    ) -> GoldenFood:
        """Place golden food at a random cell inside the spawn area.

        Uses a seeded NumPy RNG for deterministic, reproducible placement.
        """
        rng = rng if rng is not None else np.random.default_rng()
        x = int(rng.integers(_GOLDEN_X_RANGE[0], _GOLDEN_X_RANGE[1] + 1))
        y = int(rng.integers(_GOLDEN_Y_RANGE[0], _GOLDEN_Y_RANGE[1] + 1))
        return cls(x, y, effect_ms=effect_ms)

    def consume(self) -> bool:
        """Hide the pickup. Returns False if it was already consumed."""
        if not self.visible:
            return False
        self.visible = False
        return True

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "visible": self.visible,
        }


class Item:
    """Single-use ability granting the food temporary immunity."""

    def __init__(self, effect_ms: int = 3000) -> None:
        self.used = False
        self.effect_duration = effect_ms

    def use(self) -> bool:
        """Spend the item. Returns False if it was already used."""
        if self.used:
            return False
        self.used = True
        return True

    def to_dict(self) -> dict:
        return {"used": self.used}
