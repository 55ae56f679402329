"""Validation, normalization and timed orchestration of the hall schedulers."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from backend.domain.constraints import (
    RandomInstanceConfig,
    SchedulingValidationError,
    require_valid_events,
    validate_events,
    validate_time_budget,
)
from backend.domain.models import AllocationResult, Event, ValidationResult
from backend.services.backtracking_scheduler import search_backtracking
from backend.services.greedy_scheduler import schedule_greedy
from backend.services.instance_generator import (
    default_random_instance_config,
    generate_random_events,
)
from backend.services.utilization_service import compute_utilization
from backend.utils.clock import Clock, elapsed_ms, monotonic_clock
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

GREEDY = "greedy"
BACKTRACKING = "backtracking"

ALGORITHM_COMPLEXITY: dict[str, dict[str, str]] = {
    GREEDY: {
        "time": "O(n log n) due to sorting; assignment O(n*H)",
        "space": "O(n + H)",
    },
    BACKTRACKING: {
        "time": "Exponential in the worst case (roughly O((H+1)^n)); bounded by pruning and the time budget",
        "space": "O(n + H) for the frame stack and hall assignment tracking",
    },
}


@dataclass(frozen=True)
class ComparisonDelta:
    scheduled_change: int
    unscheduled_change: int
    elapsed_ms_change: float


@dataclass(frozen=True)
class ComparisonResult:
    greedy: AllocationResult
    backtracking: AllocationResult
    delta: ComparisonDelta


def normalize_events(events: Sequence[Event]) -> list[Event]:
    """Floor bounds to integers, drop unusable events, sort by (start, end)."""
    normalized: list[Event] = []
    for event in events:
        if not event.event_id:
            continue
        if not (math.isfinite(event.start) and math.isfinite(event.end)):
            continue
        start = math.floor(event.start)
        end = math.floor(event.end)
        if start < 0 or end <= start:
            continue
        normalized.append(Event(event_id=event.event_id, start=start, end=end))
    normalized.sort(key=lambda event: (event.start, event.end))
    return normalized


def schedule_greedy_timed(
    events: Sequence[Event],
    hall_count: int,
    clock: Clock = monotonic_clock,
) -> AllocationResult:
    started_at = clock()
    core = schedule_greedy(events, hall_count)
    return AllocationResult(
        algorithm=GREEDY,
        scheduled=core.scheduled,
        unscheduled=core.unscheduled,
        scheduled_count=core.scheduled_count,
        elapsed_ms=elapsed_ms(clock, started_at),
    )


def schedule_backtracking_timed(
    events: Sequence[Event],
    hall_count: int,
    time_budget_ms: float,
    clock: Clock = monotonic_clock,
) -> AllocationResult:
    started_at = clock()
    core, state = search_backtracking(events, hall_count, time_budget_ms, clock=clock)
    return AllocationResult(
        algorithm=BACKTRACKING,
        scheduled=core.scheduled,
        unscheduled=core.unscheduled,
        scheduled_count=core.scheduled_count,
        elapsed_ms=elapsed_ms(clock, started_at),
        timed_out=state.timed_out,
    )


def _with_utilization(result: AllocationResult, events: Sequence[Event]) -> AllocationResult:
    return AllocationResult(
        algorithm=result.algorithm,
        scheduled=result.scheduled,
        unscheduled=result.unscheduled,
        scheduled_count=result.scheduled_count,
        elapsed_ms=result.elapsed_ms,
        timed_out=result.timed_out,
        utilization=compute_utilization(result, events),
    )


class SchedulingService:
    """Entry point for callers: validate, optionally normalize, schedule, measure."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock or monotonic_clock

    def validate(self, events: Any, hall_count: Any) -> ValidationResult:
        return validate_events(events, hall_count)

    def normalize(self, events: Sequence[Event]) -> list[Event]:
        return normalize_events(events)

    def _prepare(self, events: Sequence[Event], hall_count: int, normalize: bool) -> list[Event]:
        require_valid_events(events, hall_count)
        if normalize:
            return normalize_events(events)
        return list(events)

    def _resolve_budget(self, time_budget_ms: Optional[float]) -> float:
        budget = (
            time_budget_ms
            if time_budget_ms is not None
            else self._settings.backtracking_time_budget_ms
        )
        validate_time_budget(budget)
        return budget

    def run_greedy(
        self,
        events: Sequence[Event],
        hall_count: int,
        *,
        normalize: bool = False,
    ) -> AllocationResult:
        prepared = self._prepare(events, hall_count, normalize)
        result = _with_utilization(
            schedule_greedy_timed(prepared, hall_count, clock=self._clock),
            prepared,
        )
        logger.info(
            (
                "Greedy schedule completed | halls=%s | events=%s | scheduled=%s | "
                "unscheduled=%s | elapsed_ms=%.3f"
            ),
            hall_count,
            len(prepared),
            result.scheduled_count,
            result.unscheduled_count,
            result.elapsed_ms,
        )
        return result

    def run_backtracking(
        self,
        events: Sequence[Event],
        hall_count: int,
        *,
        time_budget_ms: Optional[float] = None,
        normalize: bool = False,
    ) -> AllocationResult:
        budget = self._resolve_budget(time_budget_ms)
        prepared = self._prepare(events, hall_count, normalize)
        result = _with_utilization(
            schedule_backtracking_timed(prepared, hall_count, budget, clock=self._clock),
            prepared,
        )
        if result.timed_out:
            logger.warning(
                "Backtracking budget exhausted | budget_ms=%s | scheduled=%s",
                budget,
                result.scheduled_count,
            )
        logger.info(
            (
                "Backtracking schedule completed | halls=%s | events=%s | scheduled=%s | "
                "unscheduled=%s | elapsed_ms=%.3f"
            ),
            hall_count,
            len(prepared),
            result.scheduled_count,
            result.unscheduled_count,
            result.elapsed_ms,
        )
        return result

    def compare(
        self,
        events: Sequence[Event],
        hall_count: int,
        *,
        time_budget_ms: Optional[float] = None,
        normalize: bool = False,
    ) -> ComparisonResult:
        greedy = self.run_greedy(events, hall_count, normalize=normalize)
        backtracking = self.run_backtracking(
            events,
            hall_count,
            time_budget_ms=time_budget_ms,
            normalize=normalize,
        )
        delta = ComparisonDelta(
            scheduled_change=backtracking.scheduled_count - greedy.scheduled_count,
            unscheduled_change=backtracking.unscheduled_count - greedy.unscheduled_count,
            elapsed_ms_change=backtracking.elapsed_ms - greedy.elapsed_ms,
        )
        return ComparisonResult(greedy=greedy, backtracking=backtracking, delta=delta)

    def generate_events(
        self,
        config: Optional[RandomInstanceConfig] = None,
        seed: Optional[int] = None,
        overrides: Optional[dict[str, int]] = None,
    ) -> list[Event]:
        """Generate events from ``config`` (or the settings defaults) with ``overrides`` applied."""
        resolved_config = config or default_random_instance_config(self._settings)
        if overrides:
            resolved_config = replace(resolved_config, **overrides)
        resolved_seed = seed if seed is not None else self._settings.random_seed
        try:
            return generate_random_events(resolved_config, random.Random(resolved_seed))
        except ValueError as exc:
            raise SchedulingValidationError(str(exc)) from exc
