"""Millisecond timestamps for the frame loop."""

from __future__ import annotations

import time


def monotonic_ms() -> int:
    """Return the monotonic clock in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000
