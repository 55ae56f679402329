from __future__ import annotations

import pytest


class TickingClock:
    """Deterministic clock: each reading advances time by ``step`` seconds."""

    def __init__(self, start: float = 0.0, step: float = 0.0) -> None:
        self.now = start
        self.step = step
        self.readings = 0

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        self.readings += 1
        return current


@pytest.fixture
def ticking_clock():
    def _factory(step_ms: float = 1.0) -> TickingClock:
        return TickingClock(step=step_ms / 1000.0)

    return _factory


@pytest.fixture
def frozen_clock() -> TickingClock:
    return TickingClock(step=0.0)
