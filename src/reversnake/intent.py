"""Input symbols and the directional intent resolver."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from reversnake.food import Food, Item
from reversnake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class Key(enum.Enum):
    """Logical input symbols. Hosts map their physical keys onto these."""

    SNAKE_LEFT = "snake_left"
    SNAKE_RIGHT = "snake_right"
    SNAKE_UP = "snake_up"
    SNAKE_DOWN = "snake_down"
    FOOD_LEFT = "food_left"
    FOOD_RIGHT = "food_right"
    FOOD_UP = "food_up"
    FOOD_DOWN = "food_down"
    ITEM = "item"
    START = "start"


# Arbitration order when several symbols arrive in the same frame.
SNAKE_KEYS: tuple[tuple[Key, Direction], ...] = (
    (Key.SNAKE_LEFT, Direction.LEFT),
    (Key.SNAKE_RIGHT, Direction.RIGHT),
    (Key.SNAKE_UP, Direction.UP),
    (Key.SNAKE_DOWN, Direction.DOWN),
)

FOOD_KEYS: tuple[tuple[Key, Direction], ...] = (
    (Key.FOOD_LEFT, Direction.LEFT),
    (Key.FOOD_RIGHT, Direction.RIGHT),
    (Key.FOOD_UP, Direction.UP),
    (Key.FOOD_DOWN, Direction.DOWN),
)

_FOOD_KEY_FOR: dict[Direction, Key] = {d: k for k, d in FOOD_KEYS}


@dataclass(frozen=True)
class FrameInput:
    """Key transitions observed by the host during one frame."""

    pressed: frozenset[Key] = field(default_factory=frozenset)
    released: frozenset[Key] = field(default_factory=frozenset)
    held: frozenset[Key] = field(default_factory=frozenset)

    @classmethod
    def from_names(
        cls,
        pressed: Iterable[str] = (),
        released: Iterable[str] = (),
        held: Iterable[str] = (),
    ) -> FrameInput:
        """Build a frame from symbol names such as ``"food_left"``.

        Raises ``ValueError`` for unknown names.
        """
        return cls(
            pressed=frozenset(Key(n) for n in pressed),
            released=frozenset(Key(n) for n in released),
            held=frozenset(Key(n) for n in held),
        )


EMPTY_FRAME = FrameInput()


class IntentResolver:
    """Turns raw key transitions into entity direction changes."""

    def __init__(self, item_enabled: bool = True) -> None:
        self.item_enabled = item_enabled

    @staticmethod
    def snake_intent(frame: FrameInput, snake: Snake) -> Direction | None:
        """Return the first legal snake direction pressed this frame."""
        for key, direction in SNAKE_KEYS:
            if key not in frame.pressed:
                continue
            if direction == snake.last_direction.opposite and not snake.hit_wall:
                continue
            return direction
        return None

    @staticmethod
    def food_intent(frame: FrameInput, current: Direction) -> Direction:
        """Return the food direction after this frame's transitions.

        A newly pressed key latches its direction. Releasing the latched
        key falls back to the first direction still held, else stops.
        """
        for key, direction in FOOD_KEYS:
            if key in frame.pressed:
                return direction

        latched_key = _FOOD_KEY_FOR.get(current)
        if latched_key is None or latched_key not in frame.released:
            return current

        for key, direction in FOOD_KEYS:
            if key in frame.held and key not in frame.released:
                return direction
        return Direction.NONE

    def apply(
        self,
        frame: FrameInput,
        snake: Snake,
        food: Food,
        item: Item,
        now: int,
    ) -> None:
        """Resolve *frame* and write the results into the entities."""
        proposed = self.snake_intent(frame, snake)
        if proposed is not None:
            snake.set_direction(proposed)

        food.direction = self.food_intent(frame, food.direction)

        if self.item_enabled and Key.ITEM in frame.pressed and item.use():
            food.grant_immunity(now, item.effect_duration)
            logger.info("Item used; food immune until %d.", food.immune_until)
