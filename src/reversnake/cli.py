"""Command-line tools for running headless Reversnake sessions."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reversnake",
        description="Reversnake headless simulation and benchmarking tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Replay a scripted list of input frames.",
    )
    sim_p.add_argument(
        "script", help="JSON file holding a list of frame objects.",
    )
    sim_p.add_argument("--variant", type=str, default="a", choices=["a", "b"])
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON variant config (overrides --variant).",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--frame-ms", type=int, default=16)
    sim_p.add_argument(
        "--json", action="store_true",
        help="Print the final snapshot as JSON.",
    )

    # --- benchmark ---
    bench_p = sub.add_parser(
        "benchmark", help="Measure simulation throughput.",
    )
    bench_p.add_argument("--variant", type=str, default="a", choices=["a", "b"])
    bench_p.add_argument("--num-games", type=int, default=10)
    bench_p.add_argument("--max-frames", type=int, default=2_000)
    bench_p.add_argument("--frame-ms", type=int, default=16)
    bench_p.add_argument("--seed", type=int, default=42)

    return parser


def _load_config(args: argparse.Namespace):
    from reversnake.config import VariantConfig

    if getattr(args, "config", None):
        return VariantConfig.load(args.config)
    return VariantConfig.named(args.variant)


def _run_simulate(args: argparse.Namespace) -> int:
    from reversnake.intent import FrameInput, Key
    from reversnake.session import Session

    try:
        frames = json.loads(Path(args.script).read_text())
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Could not read script %s: %s", args.script, exc)
        return 2
    if not isinstance(frames, list):
        logger.error("Script must contain a JSON list of frames.")
        return 2

    session = Session(_load_config(args), seed=args.seed)
    now = 0
    state = session.step(FrameInput(pressed=frozenset({Key.START})), now)
    for i, raw in enumerate(frames):
        try:
            frame = FrameInput.from_names(
                raw.get("pressed", ()),
                raw.get("released", ()),
                raw.get("held", ()),
            )
        except (AttributeError, ValueError) as exc:
            logger.error("Invalid frame %d: %s", i, exc)
            return 2
        now += args.frame_ms
        state = session.step(frame, now)

    if args.json:
        state.pop("grid", None)
        print(json.dumps(state, indent=2))  # noqa: T201
    else:
        print(  # noqa: T201
            f"{state['state']}: {state['title'] or '-'} | "
            f"{state['elapsed_ms'] / 1000:.1f}s, "
            f"snake length {len(state['snake']['body'])}"
        )
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from reversnake.benchmark import benchmark_throughput

    result = benchmark_throughput(
        config=_load_config(args),
        num_games=args.num_games,
        max_frames=args.max_frames,
        frame_ms=args.frame_ms,
        seed=args.seed,
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``reversnake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "benchmark": _run_benchmark,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
