"""Earliest-finish-time greedy hall scheduler."""

from __future__ import annotations

from typing import Sequence

from backend.domain.constraints import fits_in_hall
from backend.domain.models import AllocationCore, Event, HallSchedule, ScheduledEvent
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def earliest_finish_order(events: Sequence[Event]) -> list[Event]:
    """Return a copy sorted by (end, start); ties keep input order."""
    return sorted(events, key=lambda event: (event.end, event.start))


def build_hall_schedules(halls: Sequence[Sequence[ScheduledEvent]]) -> list[HallSchedule]:
    return [
        HallSchedule(
            hall_index=hall_index,
            events=sorted(hall_events, key=lambda event: event.start),
        )
        for hall_index, hall_events in enumerate(halls)
    ]


def schedule_greedy(events: Sequence[Event], hall_count: int) -> AllocationCore:
    """Place each event in the first hall that can take it.

    Optimal for a single hall. With several halls the fixed hall order can
    pack worse than the best possible assignment.
    """
    halls: list[list[ScheduledEvent]] = [[] for _ in range(hall_count)]
    unscheduled: list[Event] = []

    for event in earliest_finish_order(events):
        for hall_index, hall_events in enumerate(halls):
            if fits_in_hall(hall_events, event):
                hall_events.append(ScheduledEvent.from_event(event, hall_index))
                break
        else:
            unscheduled.append(event)

    scheduled = build_hall_schedules(halls)
    scheduled_count = sum(len(hall.events) for hall in scheduled)
    logger.debug(
        "Greedy placement finished | halls=%s | scheduled=%s | unscheduled=%s",
        hall_count,
        scheduled_count,
        len(unscheduled),
    )
    return AllocationCore(
        scheduled=scheduled,
        unscheduled=unscheduled,
        scheduled_count=scheduled_count,
    )
