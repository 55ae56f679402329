"""Monotonic clock seam used to time and cut off scheduler runs."""

from __future__ import annotations

import time
from typing import Callable


Clock = Callable[[], float]
"""Zero-argument callable returning monotonic seconds."""


def monotonic_clock() -> float:
    return time.perf_counter()


def elapsed_ms(clock: Clock, started_at: float) -> float:
    return (clock() - started_at) * 1000.0
