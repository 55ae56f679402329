"""Invariants that must hold for both schedulers on arbitrary valid input."""

from __future__ import annotations

from itertools import combinations
import random

import pytest

from backend.domain.constraints import RandomInstanceConfig, conflicts
from backend.domain.models import AllocationCore, Event
from backend.services.backtracking_scheduler import search_backtracking
from backend.services.greedy_scheduler import schedule_greedy
from backend.services.instance_generator import generate_random_events


GENEROUS_BUDGET_MS = 60_000
SEEDS = range(12)


def _instance(seed: int, count: int = 8) -> list[Event]:
    config = RandomInstanceConfig(
        count=count,
        range_start=0,
        range_end=12,
        min_length=1,
        max_length=5,
    )
    return generate_random_events(config, random.Random(seed))


def _exhaustive(events: list[Event], hall_count: int) -> AllocationCore:
    core, state = search_backtracking(events, hall_count, GENEROUS_BUDGET_MS)
    assert not state.timed_out
    return core


def _assert_partition(core: AllocationCore, events: list[Event]) -> None:
    scheduled_ids = [event.event_id for hall in core.scheduled for event in hall.events]
    unscheduled_ids = [event.event_id for event in core.unscheduled]
    assert len(scheduled_ids) == len(set(scheduled_ids))
    assert set(scheduled_ids).isdisjoint(unscheduled_ids)
    assert sorted(scheduled_ids + unscheduled_ids) == sorted(event.event_id for event in events)
    assert core.scheduled_count == len(scheduled_ids)


def _assert_no_overlap(core: AllocationCore) -> None:
    for hall in core.scheduled:
        for first, second in combinations(hall.events, 2):
            assert not conflicts(first, second)
        starts = [event.start for event in hall.events]
        assert starts == sorted(starts)


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("hall_count", [1, 2, 3])
def test_greedy_partition_and_no_overlap(seed: int, hall_count: int) -> None:
    events = _instance(seed, count=20)
    core = schedule_greedy(events, hall_count)
    _assert_partition(core, events)
    _assert_no_overlap(core)


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("hall_count", [1, 2, 3])
def test_backtracking_partition_and_no_overlap(seed: int, hall_count: int) -> None:
    events = _instance(seed)
    core = _exhaustive(events, hall_count)
    _assert_partition(core, events)
    _assert_no_overlap(core)


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("hall_count", [1, 2, 3])
def test_backtracking_dominates_greedy(seed: int, hall_count: int) -> None:
    events = _instance(seed)
    greedy = schedule_greedy(events, hall_count)
    assert _exhaustive(events, hall_count).scheduled_count >= greedy.scheduled_count


@pytest.mark.parametrize("seed", SEEDS)
def test_more_halls_never_schedule_fewer_events(seed: int) -> None:
    events = _instance(seed)
    greedy_counts = [schedule_greedy(events, halls).scheduled_count for halls in (1, 2, 3, 4)]
    search_counts = [_exhaustive(events, halls).scheduled_count for halls in (1, 2, 3)]
    assert greedy_counts == sorted(greedy_counts)
    assert search_counts == sorted(search_counts)


def test_partition_holds_when_search_is_cut_off(ticking_clock) -> None:
    events = _instance(5, count=25)
    core, state = search_backtracking(events, 2, 5, clock=ticking_clock(step_ms=0.1))
    assert state.timed_out
    _assert_partition(core, events)
    _assert_no_overlap(core)
