"""Game session state machine composing all entities and passes."""

from __future__ import annotations

import enum
import logging

import numpy as np

from reversnake.collision import CollisionEngine
from reversnake.config import VARIANT_A, VariantConfig
from reversnake.food import Food, GoldenFood, Item
from reversnake.grid import Grid
from reversnake.intent import FrameInput, IntentResolver, Key
from reversnake.outcome import Outcome
from reversnake.scheduler import TickScheduler
from reversnake.snake import Direction, Snake

logger = logging.getLogger(__name__)

START_PROMPT = "Press SPACE to start"

_SNAKE_START = (11, 2)
_SNAKE_LENGTH = 10
_FOOD_START = (24, 13)


class SessionState(str, enum.Enum):
    """Lifecycle states for a session."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    ENDED = "ended"


class SessionStateError(RuntimeError):
    """Raised when a lifecycle call is made from the wrong state."""


class Session:
    """Single-player session owning every entity of one game.

    Each call to :meth:`step` handles one external frame: it resolves
    input, lets the scheduler decide which entities move, runs the
    collision passes and returns the updated state dictionary. All time
    comparisons within a frame use the single ``now`` passed in.
    """

    def __init__(
        self,
        config: VariantConfig = VARIANT_A,
        seed: int | None = None,
    ) -> None:
        self.config = config
        self.rng = np.random.default_rng(seed)
        self.grid = Grid()
        self.resolver = IntentResolver(item_enabled=config.item_enabled)
        self.engine = CollisionEngine(
            self.grid,
            food_wall_mode=config.food_wall_mode,
            starvation_enabled=config.starvation_enabled,
            golden_food_enabled=config.golden_food_enabled,
        )
        self.scheduler = TickScheduler(config.movement_threshold)

        self.state = SessionState.NOT_STARTED
        self.title = START_PROMPT
        self.outcome: Outcome | None = None
        self.start_timestamp = 0
        self.end_timestamp = 0
        self.frame = 0
        self._last_now = 0
        self._reset(0)

    @property
    def running(self) -> bool:
        return self.state == SessionState.RUNNING

    def _reset(self, now: int) -> None:
        cfg = self.config
        self.snake = Snake(
            *_SNAKE_START,
            direction=Direction.RIGHT,
            length=_SNAKE_LENGTH,
            starve_interval_ms=cfg.initial_starve_interval_ms,
            starve_increment_ms=cfg.starve_increment_ms,
            now=now,
        )
        self.food = Food(*_FOOD_START)
        self.golden_food = GoldenFood.spawn(self.rng, effect_ms=cfg.golden_effect_ms)
        if not cfg.golden_food_enabled:
            self.golden_food.visible = False
        self.item = Item(effect_ms=cfg.item_effect_ms)
        self.scheduler.reset()
        self.frame = 0

    def start(self, now: int) -> None:
        """Begin a fresh game, reinitialising every entity."""
        if self.running:
            raise SessionStateError("Session is already running.")
        self._reset(now)
        self.state = SessionState.RUNNING
        self.title = ""
        self.outcome = None
        self.start_timestamp = now
        self.end_timestamp = now
        self._last_now = now
        logger.info("Session started (variant %s).", self.config.name)

    def finish(self, outcome: Outcome, now: int) -> bool:
        """End the running game. Later calls are no-ops returning False."""
        if not self.running:
            return False
        self.state = SessionState.ENDED
        self.outcome = outcome
        self.title = outcome.value
        self.end_timestamp = now
        logger.info(
            "Session ended after %d ms: %s.",
            self.end_timestamp - self.start_timestamp, outcome.value,
        )
        return True

    def step(self, frame: FrameInput, now: int) -> dict:
        """Advance the session by one external frame.

        Returns the full session state as a serializable dict.
        """
        self._last_now = now
        if not self.running:
            if Key.START not in frame.pressed:
                return self.get_state(now)
            self.start(now)
        else:
            self.resolver.apply(frame, self.snake, self.food, self.item, now)

        self.frame += 1
        plan = self.scheduler.tick(self.food.direction != Direction.NONE)

        if plan.snake:
            outcome = self.engine.snake_pass(self.snake, self.food, now)
            if outcome is not None:
                self.finish(outcome, now)

        if plan.food and self.running:
            outcome = self.engine.food_pass(
                self.snake, self.food, self.golden_food, now,
            )
            if outcome is not None:
                self.finish(outcome, now)

        return self.get_state(now)

    def elapsed_ms(self, now: int) -> int:
        if self.state == SessionState.NOT_STARTED:
            return 0
        if self.state == SessionState.ENDED:
            return self.end_timestamp - self.start_timestamp
        return now - self.start_timestamp

    def get_state(self, now: int | None = None) -> dict:
        """Return a read-only, serializable snapshot for the host."""
        if now is None:
            now = self._last_now
        # Timers freeze outside a running game.
        reference = {
            SessionState.NOT_STARTED: self.start_timestamp,
            SessionState.ENDED: self.end_timestamp,
        }.get(self.state, now)
        golden = self.golden_food if self.golden_food.visible else None
        self.grid.paint(
            self.snake.body,
            food=self.food.position,
            golden_food=golden.position if golden else None,
        )
        return {
            "state": self.state.value,
            "title": self.title,
            "variant": self.config.name,
            "frame": self.frame,
            "elapsed_ms": self.elapsed_ms(now),
            "starvation": {
                "hungry_ms": self.snake.hungry_ms(reference),
                "interval_ms": self.snake.starve_interval,
            },
            "snake": self.snake.to_dict(),
            "food": self.food.to_dict(reference),
            "golden_food": self.golden_food.to_dict(),
            "item": self.item.to_dict(),
            "grid": self.grid.to_dict(),
        }
