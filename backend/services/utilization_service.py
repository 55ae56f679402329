"""Per-hall busy-time utilization for completed allocations."""

from __future__ import annotations

from typing import Sequence

from backend.domain.models import AllocationCore, AllocationResult, Event, HallUtilization


def compute_utilization(
    result: AllocationCore | AllocationResult,
    all_events: Sequence[Event],
) -> list[HallUtilization]:
    """Busy percentage per hall over the span of the full input set.

    The span is taken from every input event, scheduled or not, so results of
    different schedulers on the same input share a denominator.
    """
    if not result.scheduled:
        return []

    if all_events:
        min_start = min(event.start for event in all_events)
        max_end = max(event.end for event in all_events)
        span = max(1.0, max_end - min_start)
    else:
        span = 1.0

    utilization: list[HallUtilization] = []
    for hall in result.scheduled:
        busy = sum(event.duration for event in hall.events)
        percent = min(100.0, max(0.0, busy / span * 100.0))
        utilization.append(HallUtilization(hall_index=hall.hall_index, percent=percent))
    return utilization
