"""Collision resolution between the snake, the food and golden food."""

from __future__ import annotations

import logging

from reversnake.food import Food, GoldenFood
from reversnake.grid import Grid, WallMode
from reversnake.outcome import Outcome
from reversnake.snake import Snake

logger = logging.getLogger(__name__)


class CollisionEngine:
    """Runs the movement passes and the checks that follow each one.

    Entities never reference each other; the engine reads them together
    and writes the results back. Each pass returns a terminal
    :class:`Outcome` or ``None``.
    """

    def __init__(
        self,
        grid: Grid,
        food_wall_mode: WallMode = WallMode.STOP,
        starvation_enabled: bool = True,
        golden_food_enabled: bool = True,
    ) -> None:
        self.grid = grid
        self.food_wall_mode = food_wall_mode
        self.starvation_enabled = starvation_enabled
        self.golden_food_enabled = golden_food_enabled

    def snake_pass(self, snake: Snake, food: Food, now: int) -> Outcome | None:
        """Advance the snake one cell, then check collisions."""
        outcome = snake.advance(self.grid, now, starvation=self.starvation_enabled)
        if outcome is not None:
            return outcome
        return self.check(snake, food, now)

    def food_pass(
        self, snake: Snake, food: Food, golden: GoldenFood, now: int,
    ) -> Outcome | None:
        """Advance the food one cell, collect golden food, then check."""
        food.move(self.grid, self.food_wall_mode)
        if self.golden_food_enabled:
            self.golden_pickup(food, golden, now)
        return self.check(snake, food, now)

    def check(self, snake: Snake, food: Food, now: int) -> Outcome | None:
        """Resolve snake/food contact after either entity moved."""
        if not food.is_immune(now) and snake.occupies(food.position):
            return Outcome.EATEN_BY_SNAKE

        if food.is_golden:
            if not food.is_immune(now):
                food.is_golden = False
                logger.info("Golden effect expired.")
            else:
                return self.golden_bite(snake, food)
        return None

    @staticmethod
    def golden_pickup(food: Food, golden: GoldenFood, now: int) -> bool:
        """Empower the food if it stands on visible golden food."""
        if not golden.visible or food.position != golden.position:
            return False
        golden.consume()
        food.grant_immunity(now, golden.effect_duration)
        food.is_golden = True
        logger.info("Golden food collected; golden until %d.", food.immune_until)
        return True

    @staticmethod
    def golden_bite(snake: Snake, food: Food) -> Outcome | None:
        """Let golden food bite through the snake where they overlap.

        Only the first overlapping segment, scanning head to tail, is
        bitten.
        """
        index = snake.index_of(food.position)
        if index is None:
            return None
        snake.bite(index)
        logger.info(
            "Golden food bit the snake at segment %d; %d segments remain.",
            index, len(snake.body),
        )
        if not snake.body:
            return Outcome.CONSUMED_BY_FOOD
        return None
