"""Snake representation, movement and starvation logic."""

from __future__ import annotations

import enum
import logging
from collections import deque

from reversnake.grid import Grid, Position
from reversnake.outcome import Outcome

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Movement intents with (dx, dy) values. ``NONE`` means standing still."""

    NONE = (0, 0)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.NONE: Direction.NONE,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``. Instead of growing
    when it eats, this snake shrinks whenever its starvation deadline
    passes, and the interval until the next deadline grows each time.
    """

    def __init__(
        self,
        start_x: int,
        start_y: int,
        direction: Direction = Direction.RIGHT,
        length: int = 10,
        starve_interval_ms: int = 5000,
        starve_increment_ms: int = 1000,
        now: int = 0,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        if direction == Direction.NONE:
            raise ValueError("Snake must start with a movement direction.")
        dx, dy = direction.value
        self.body: deque[Position] = deque()
        for i in range(length):
            self.body.append((start_x - dx * i, start_y - dy * i))
        self.direction = direction
        self.last_direction = direction
        self.hit_wall = False
        self.starve_interval = starve_interval_ms
        self.starve_increment = starve_increment_ms
        self.starve_deadline = now + starve_interval_ms

    @property
    def head(self) -> Position:
        """Return the head coordinate."""
        return self.body[0]

    def set_direction(self, new_direction: Direction) -> bool:
        """Change direction unless it reverses the last committed move.

        A reversal is allowed right after a wall bounce, since the snake
        did not actually travel in ``last_direction`` on that tick.
        Returns whether the proposal was accepted.
        """
        if new_direction == Direction.NONE:
            return False
        if new_direction == self.last_direction.opposite and not self.hit_wall:
            return False
        self.direction = new_direction
        return True

    def advance(
        self, grid: Grid, now: int, starvation: bool = True,
    ) -> Outcome | None:
        """Move the snake one tick.

        Returns a terminal :class:`Outcome` when the snake can no longer
        move, otherwise ``None``.
        """
        if not self.body:
            return Outcome.CONSUMED_BY_FOOD

        new_head, self.hit_wall = grid.step(self.head, self.direction)
        self.last_direction = self.direction

        if starvation and now >= self.starve_deadline:
            if len(self.body) == 1:
                return Outcome.STARVED
            self.starve_interval += self.starve_increment
            self.starve_deadline = now + self.starve_interval
            self.body.appendleft(new_head)
            self.body.pop()
            self.body.pop()
            logger.debug(
                "Snake starved down to %d segments; next deadline in %d ms.",
                len(self.body), self.starve_interval,
            )
            return None

        self.body.appendleft(new_head)
        self.body.pop()
        return None

    def hungry_ms(self, now: int) -> int:
        """Milliseconds elapsed in the current starvation interval."""
        return self.starve_interval - (self.starve_deadline - now)

    def index_of(self, position: Position) -> int | None:
        """Return the first body index at *position*, scanning head to tail."""
        for i, seg in enumerate(self.body):
            if seg == position:
                return i
        return None

    def occupies(self, position: Position) -> bool:
        """Check whether the snake occupies a given cell."""
        return position in self.body

    def bite(self, index: int) -> None:
        """Cut the body at *index*, keeping the bitten segment.

        A bite in the front half keeps the head side. A bite in the back
        half keeps the tail side, reversed so the old tail becomes the head.
        A bite on the head devours the whole snake.
        """
        segments = list(self.body)
        if index == 0:
            kept = []
        elif index <= len(segments) // 2:
            kept = segments[:index + 1]
        else:
            kept = segments[index:]
            kept.reverse()
        self.body = deque(kept)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
            "last_direction": self.last_direction.name.lower(),
            "hit_wall": self.hit_wall,
        }
