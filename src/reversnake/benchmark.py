"""Performance benchmarking for headless sessions."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from reversnake.config import VARIANT_A, VariantConfig
from reversnake.intent import FrameInput, Key
from reversnake.session import Session

logger = logging.getLogger(__name__)

_DIRECTION_KEYS = [k for k in Key if k not in (Key.START, Key.ITEM)]


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    variant: str
    total_games: int
    total_frames: int
    wall_time_seconds: float
    games_per_second: float
    frames_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: variant {self.variant}, "
            f"{self.total_games} games, {self.total_frames} frames in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.games_per_second:.1f} games/s, "
            f"{self.frames_per_second:.1f} frames/s"
        )


def random_frame(rng: np.random.Generator, press_prob: float = 0.1) -> FrameInput:
    """Draw a frame where each direction key is pressed with *press_prob*."""
    mask = rng.random(len(_DIRECTION_KEYS)) < press_prob
    pressed = frozenset(k for k, hit in zip(_DIRECTION_KEYS, mask, strict=True) if hit)
    return FrameInput(pressed=pressed, held=pressed)


def benchmark_throughput(
    *,
    config: VariantConfig = VARIANT_A,
    num_games: int = 10,
    max_frames: int = 2_000,
    frame_ms: int = 16,
    seed: int = 42,
) -> BenchmarkResult:
    """Measure raw simulation throughput.

    Runs *num_games* sessions driven by random input on a synthetic
    clock and reports games/second and frames/second.
    """
    rng = np.random.default_rng(seed)
    start_frame = FrameInput(pressed=frozenset({Key.START}))

    total_frames = 0
    start = time.perf_counter()

    for _ in range(num_games):
        session = Session(config, seed=int(rng.integers(2**31)))
        now = 0
        session.step(start_frame, now)
        frames = 1
        while session.running and frames < max_frames:
            now += frame_ms
            session.step(random_frame(rng), now)
            frames += 1
        total_frames += frames

    elapsed = time.perf_counter() - start
    result = BenchmarkResult(
        variant=config.name,
        total_games=num_games,
        total_frames=total_frames,
        wall_time_seconds=elapsed,
        games_per_second=num_games / max(elapsed, 1e-9),
        frames_per_second=total_frames / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
