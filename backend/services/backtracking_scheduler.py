"""Time-budgeted branch-and-bound backtracking hall scheduler.

The search walks a decision tree with one level per event. At each level the
event is tried in every hall it fits (in hall order) and finally left
unscheduled. Three rules are evaluated on entering a node, in this order:

1. time cutoff: once the budget is spent the search stops and the incumbent
   is returned as-is;
2. leaf: a complete assignment that places more events than the incumbent
   replaces it (as a value copy);
3. bound: a subtree that could not beat the incumbent even if every
   undecided event were placed is skipped.

The bound only counts events and ignores hall conflicts among the undecided
ones. Tightening it changes which incumbent is reached under a budget.

The tree is walked with an explicit frame stack instead of recursion so that
long event lists cannot hit the interpreter recursion limit; the child order
is identical to the recursive formulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from backend.domain.constraints import fits_in_hall
from backend.domain.models import AllocationCore, Event, ScheduledEvent
from backend.services.greedy_scheduler import build_hall_schedules, earliest_finish_order
from backend.utils.clock import Clock, elapsed_ms, monotonic_clock
from backend.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass
class SearchState:
    """Incumbent and budget tracking owned by a single search invocation."""

    clock: Clock
    started_at: float
    time_budget_ms: float
    best_halls: tuple[tuple[ScheduledEvent, ...], ...]
    best_count: int = 0
    timed_out: bool = False
    nodes_visited: int = 0

    def budget_exceeded(self) -> bool:
        return elapsed_ms(self.clock, self.started_at) > self.time_budget_ms

    def offer(self, halls: Sequence[Sequence[ScheduledEvent]], placed_count: int) -> None:
        if placed_count <= self.best_count:
            return
        # Live hall lists keep mutating after this point; store a copy.
        self.best_halls = tuple(tuple(hall) for hall in halls)
        self.best_count = placed_count


@dataclass
class _Frame:
    index: int
    next_hall: int = 0
    placed_hall: Optional[int] = None
    skipped: bool = False


def _search(
    events: Sequence[Event],
    halls: list[list[ScheduledEvent]],
    state: SearchState,
) -> None:
    total = len(events)
    hall_count = len(halls)
    stack: list[_Frame] = []
    placed = 0
    next_index: Optional[int] = 0

    while True:
        if next_index is not None:
            state.nodes_visited += 1
            if state.budget_exceeded():
                state.timed_out = True
                return
            if next_index >= total:
                state.offer(halls, placed)
            elif placed + (total - next_index) > state.best_count:
                stack.append(_Frame(index=next_index))
            next_index = None

        if not stack:
            return

        frame = stack[-1]
        if frame.placed_hall is not None:
            halls[frame.placed_hall].pop()
            placed -= 1
            frame.placed_hall = None

        event = events[frame.index]
        while frame.next_hall < hall_count:
            hall_index = frame.next_hall
            frame.next_hall += 1
            if fits_in_hall(halls[hall_index], event):
                halls[hall_index].append(ScheduledEvent.from_event(event, hall_index))
                placed += 1
                frame.placed_hall = hall_index
                next_index = frame.index + 1
                break

        if next_index is None:
            if frame.skipped:
                stack.pop()
            else:
                frame.skipped = True
                next_index = frame.index + 1


def search_backtracking(
    events: Sequence[Event],
    hall_count: int,
    time_budget_ms: float,
    clock: Clock = monotonic_clock,
) -> tuple[AllocationCore, SearchState]:
    """Run the search and return the allocation with its final search state."""
    ordered = earliest_finish_order(events)
    halls: list[list[ScheduledEvent]] = [[] for _ in range(hall_count)]
    state = SearchState(
        clock=clock,
        started_at=clock(),
        time_budget_ms=time_budget_ms,
        best_halls=tuple(() for _ in range(hall_count)),
    )

    _search(ordered, halls, state)

    scheduled = build_hall_schedules(state.best_halls)
    scheduled_ids = {event.event_id for hall in scheduled for event in hall.events}
    unscheduled = [event for event in ordered if event.event_id not in scheduled_ids]
    scheduled_count = sum(len(hall.events) for hall in scheduled)

    logger.debug(
        (
            "Backtracking search finished | halls=%s | events=%s | scheduled=%s | "
            "nodes=%s | timed_out=%s"
        ),
        hall_count,
        len(ordered),
        scheduled_count,
        state.nodes_visited,
        state.timed_out,
    )
    core = AllocationCore(
        scheduled=scheduled,
        unscheduled=unscheduled,
        scheduled_count=scheduled_count,
    )
    return core, state


def schedule_backtracking(
    events: Sequence[Event],
    hall_count: int,
    time_budget_ms: float,
    clock: Clock = monotonic_clock,
) -> AllocationCore:
    """Best allocation found within ``time_budget_ms``; exhaustive if the budget allows."""
    core, _ = search_backtracking(events, hall_count, time_budget_ms, clock=clock)
    return core
