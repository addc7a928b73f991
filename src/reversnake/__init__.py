"""Reversnake — reversed snake simulation core."""

from reversnake.config import VARIANT_A, VARIANT_B, VariantConfig
from reversnake.food import Food, GoldenFood, Item
from reversnake.grid import Grid, WallMode
from reversnake.intent import FrameInput, IntentResolver, Key
from reversnake.outcome import Outcome
from reversnake.session import Session, SessionState, SessionStateError
from reversnake.snake import Direction, Snake

__all__ = [
    "VARIANT_A",
    "VARIANT_B",
    "Direction",
    "Food",
    "FrameInput",
    "GoldenFood",
    "Grid",
    "IntentResolver",
    "Item",
    "Key",
    "Outcome",
    "Session",
    "SessionState",
    "SessionStateError",
    "Snake",
    "VariantConfig",
    "WallMode",
]
