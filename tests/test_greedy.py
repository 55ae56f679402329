from __future__ import annotations

from itertools import combinations
import random

from backend.domain.constraints import RandomInstanceConfig, conflicts
from backend.domain.models import Event
from backend.services.greedy_scheduler import earliest_finish_order, schedule_greedy
from backend.services.instance_generator import generate_random_events


def _ids(events) -> list[str]:
    return [event.event_id for event in events]


def _max_compatible(events: list[Event]) -> int:
    for size in range(len(events), 0, -1):
        for subset in combinations(events, size):
            if all(not conflicts(a, b) for a, b in combinations(subset, 2)):
                return size
    return 0


def test_single_hall_skips_conflicting_event() -> None:
    events = [Event("A", 1, 3), Event("B", 2, 5), Event("C", 4, 7)]

    result = schedule_greedy(events, 1)

    assert result.scheduled_count == 2
    assert _ids(result.scheduled[0].events) == ["A", "C"]
    assert _ids(result.unscheduled) == ["B"]


def test_two_halls_fit_all_five_events() -> None:
    events = [
        Event("A", 1, 3),
        Event("B", 2, 5),
        Event("C", 4, 7),
        Event("D", 6, 9),
        Event("E", 8, 10),
    ]

    result = schedule_greedy(events, 2)

    assert result.scheduled_count == 5
    assert result.unscheduled == []
    assert _ids(result.scheduled[0].events) == ["A", "C", "E"]
    assert _ids(result.scheduled[1].events) == ["B", "D"]
    assert all(
        event.hall_index == hall.hall_index
        for hall in result.scheduled
        for event in hall.events
    )


def test_hall_lists_are_sorted_by_start() -> None:
    events = [Event("late", 10, 11), Event("long", 0, 12), Event("early", 1, 2)]

    result = schedule_greedy(events, 1)

    starts = [event.start for event in result.scheduled[0].events]
    assert starts == sorted(starts)


def test_earliest_finish_order_breaks_ties_by_start_then_input() -> None:
    events = [Event("b", 2, 5), Event("a", 1, 5), Event("c", 1, 5)]
    assert _ids(earliest_finish_order(events)) == ["a", "c", "b"]


def test_input_is_not_mutated() -> None:
    events = [Event("C", 4, 7), Event("A", 1, 3)]
    schedule_greedy(events, 1)
    assert _ids(events) == ["C", "A"]


def test_empty_input_returns_empty_halls() -> None:
    result = schedule_greedy([], 3)
    assert [hall.hall_index for hall in result.scheduled] == [0, 1, 2]
    assert result.scheduled_count == 0
    assert result.unscheduled == []


def test_greedy_is_deterministic() -> None:
    events = generate_random_events(
        RandomInstanceConfig(count=15, range_start=0, range_end=20, min_length=1, max_length=6),
        random.Random(3),
    )
    assert schedule_greedy(events, 2) == schedule_greedy(events, 2)


def test_single_hall_matches_interval_scheduling_optimum() -> None:
    config = RandomInstanceConfig(count=9, range_start=0, range_end=15, min_length=1, max_length=6)
    for seed in range(20):
        events = generate_random_events(config, random.Random(seed))
        assert schedule_greedy(events, 1).scheduled_count == _max_compatible(events)
