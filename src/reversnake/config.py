"""Game variant configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from reversnake.grid import WallMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantConfig:
    """Rules that differ between the two game variants.

    Supports JSON serialization so custom rule sets can be stored.
    """

    name: str = "a"

    # Scheduler
    movement_threshold: int = 4

    # Food movement
    food_wall_mode: WallMode = WallMode.STOP

    # Feature switches
    starvation_enabled: bool = True
    golden_food_enabled: bool = True
    item_enabled: bool = True

    # Timings (milliseconds)
    initial_starve_interval_ms: int = 5000
    starve_increment_ms: int = 1000
    golden_effect_ms: int = 5000
    item_effect_ms: int = 3000

    def __post_init__(self) -> None:
        if self.movement_threshold < 1:
            raise ValueError("movement_threshold must be at least 1.")
        durations = (
            self.initial_starve_interval_ms,
            self.starve_increment_ms,
            self.golden_effect_ms,
            self.item_effect_ms,
        )
        if any(d < 0 for d in durations):
            raise ValueError("Durations must be non-negative.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict (enums become their values)."""
        d = asdict(self)
        d["food_wall_mode"] = self.food_wall_mode.value
        return d

    @classmethod
    def from_dict(cls, raw: dict) -> VariantConfig:
        data = dict(raw)
        if "food_wall_mode" in data:
            data["food_wall_mode"] = WallMode(data["food_wall_mode"])
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> VariantConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))

    @classmethod
    def named(cls, name: str) -> VariantConfig:
        """Return one of the built-in presets by name."""
        try:
            return VARIANTS[name.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown variant {name!r}; choose from {sorted(VARIANTS)}."
            ) from None


VARIANT_A = VariantConfig()

VARIANT_B = VariantConfig(
    name="b",
    movement_threshold=6,
    food_wall_mode=WallMode.WRAP,
    golden_food_enabled=False,
    item_enabled=False,
)

VARIANTS: dict[str, VariantConfig] = {
    VARIANT_A.name: VARIANT_A,
    VARIANT_B.name: VARIANT_B,
}
