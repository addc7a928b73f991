"""Terminal outcomes of a session."""

from __future__ import annotations

import enum


class Outcome(str, enum.Enum):
    """Why a running session ended. The value is the human-readable title."""

    CONSUMED_BY_FOOD = "consumed by food"
    STARVED = "starved"
    EATEN_BY_SNAKE = "eaten by snake"
