"""Domain-level overlap and validation rules for hall scheduling."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable

from backend.domain.models import ValidationResult


class SchedulingValidationError(Exception):
    """Raised when events or hall count are rejected before scheduling."""


@dataclass(frozen=True)
class RandomInstanceConfig:
    count: int
    range_start: int
    range_end: int
    min_length: int
    max_length: int


def conflicts(a: Any, b: Any) -> bool:
    """Half-open interval overlap test; touching endpoints do not conflict."""
    return not (a.end <= b.start or a.start >= b.end)


def fits_in_hall(committed: Iterable[Any], candidate: Any) -> bool:
    return not any(conflicts(candidate, existing) for existing in committed)


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def _is_positive_int(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value >= 1


def validate_events(events: Any, hall_count: Any) -> ValidationResult:
    """Check events and hall count, stopping at the first violation.

    Returned messages are meant to be surfaced to callers verbatim.
    """
    if not isinstance(events, (list, tuple)):
        return ValidationResult(ok=False, message="Events must be a list")
    if not _is_positive_int(hall_count):
        return ValidationResult(ok=False, message="Halls must be a positive integer")

    seen_ids: set[str] = set()
    for event in events:
        event_id = getattr(event, "event_id", None)
        if not event_id or not isinstance(event_id, str):
            return ValidationResult(ok=False, message="Each event must have an ID")
        start = getattr(event, "start", None)
        end = getattr(event, "end", None)
        if not _is_finite_number(start) or not _is_finite_number(end):
            return ValidationResult(
                ok=False,
                message=f"Event {event_id} must have numeric start/end",
            )
        if start < 0:
            return ValidationResult(ok=False, message=f"Event {event_id} has negative start")
        if end <= start:
            return ValidationResult(ok=False, message=f"Event {event_id} has end <= start")
        if event_id in seen_ids:
            return ValidationResult(ok=False, message=f"Event {event_id} has a duplicate ID")
        seen_ids.add(event_id)
    return ValidationResult(ok=True)


def require_valid_events(events: Any, hall_count: Any) -> None:
    result = validate_events(events, hall_count)
    if not result.ok:
        raise SchedulingValidationError(result.message)


def validate_time_budget(time_budget_ms: Any) -> None:
    if not _is_finite_number(time_budget_ms) or time_budget_ms < 0:
        raise SchedulingValidationError("Time budget must be a non-negative number of milliseconds")


def validate_random_instance_config(config: RandomInstanceConfig) -> None:
    if config.count < 0:
        raise ValueError("count must be >= 0")
    if config.range_start < 0:
        raise ValueError("range_start must be >= 0")
    if config.range_end < config.range_start:
        raise ValueError("range_end must be >= range_start")
    if config.min_length < 1:
        raise ValueError("min_length must be >= 1")
    if config.max_length < config.min_length:
        raise ValueError("max_length must be >= min_length")
