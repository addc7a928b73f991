"""Grid geometry for the reversed snake board."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from reversnake.snake import Direction

Position = tuple[int, int]


class WallMode(enum.Enum):
    """Defines behavior when a moving entity reaches the grid boundary."""

    STOP = "stop"
    WRAP = "wrap"


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2
    GOLDEN_FOOD = 3


class Grid:
    """Playable board with a NumPy cell array for hosts that draw it.

    Coordinates are ``(x, y)`` and 1-based: column and row 0 belong to the
    border, so the playable area spans ``1..width`` by ``1..height``.
    The cell array is indexed ``cells[y - 1, x - 1]``.
    """

    def __init__(self, width: int = 25, height: int = 14) -> None:
        if width < 4 or height < 4:
            raise ValueError("Grid dimensions must be at least 4×4.")
        self.width = width
        self.height = height
        self.cells = np.zeros((height, width), dtype=np.int8)

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellType.EMPTY

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the playable area."""
        return 1 <= x <= self.width and 1 <= y <= self.height

    def wrap(self, x: int, y: int) -> Position:
        """Wrap coordinates around the playable edges."""
        return (x - 1) % self.width + 1, (y - 1) % self.height + 1

    def step(
        self,
        position: Position,
        direction: Direction,
        wall_mode: WallMode = WallMode.STOP,
    ) -> tuple[Position, bool]:
        """Apply one cell of *direction* to *position*.

        Returns the resulting position and whether the boundary blocked the
        move. A blocked move leaves the position unchanged.
        """
        dx, dy = direction.value
        x, y = position[0] + dx, position[1] + dy
        if self.in_bounds(x, y):
            return (x, y), False
        if wall_mode == WallMode.WRAP:
            return self.wrap(x, y), False
        return position, True

    def get(self, x: int, y: int) -> CellType:
        """Return the cell type at the given coordinate."""
        return CellType(self.cells[y - 1, x - 1])

    def set(self, x: int, y: int, cell_type: CellType) -> None:
        """Set the cell type at the given coordinate."""
        self.cells[y - 1, x - 1] = cell_type

    def paint(
        self,
        snake_body: Iterable[Position],
        food: Position | None = None,
        golden_food: Position | None = None,
    ) -> np.ndarray:
        """Repaint the cell array from entity positions and return it.

        Later layers win: golden food, then snake, then food on top.
        """
        self.clear()
        if golden_food is not None and self.in_bounds(*golden_food):
            self.set(*golden_food, CellType.GOLDEN_FOOD)
        for x, y in snake_body:
            if self.in_bounds(x, y):
                self.set(x, y, CellType.SNAKE)
        if food is not None and self.in_bounds(*food):
            self.set(*food, CellType.FOOD)
        return self.cells

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "cells": self.cells.tolist(),
        }
