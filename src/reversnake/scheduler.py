"""Fixed-rate frame counters deciding when each entity moves."""

from __future__ import annotations

from typing import NamedTuple


class TickPlan(NamedTuple):
    """Which movement passes fire on the current frame."""

    snake: bool
    food: bool


class TickScheduler:
    """Two independent frame counters driven by the same frame signal.

    The snake moves every ``threshold`` frames. The food counter keeps
    accumulating while the food stands still, so the food moves on the
    very frame it is given a direction and then every ``threshold``
    frames after that.
    """

    def __init__(self, threshold: int = 4) -> None:
        if threshold < 1:
            raise ValueError("threshold must be at least 1.")
        self.threshold = threshold
        self.snake_frames = 0
        self.food_frames = threshold

    def reset(self) -> None:
        self.snake_frames = 0
        self.food_frames = self.threshold

    def tick(self, food_moving: bool) -> TickPlan:
        """Count one frame and report which passes are due."""
        self.snake_frames += 1
        snake_due = self.snake_frames >= self.threshold
        if snake_due:
            self.snake_frames = 0

        self.food_frames += 1
        food_due = food_moving and self.food_frames >= self.threshold
        if food_due:
            self.food_frames = 0

        return TickPlan(snake=snake_due, food=food_due)
