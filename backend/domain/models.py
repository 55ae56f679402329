"""Domain models for hall allocation of time-interval events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Event:
    """Caller-supplied interval; start is inclusive and end exclusive."""

    event_id: str
    start: float
    end: float


@dataclass(frozen=True)
class ScheduledEvent:
    event_id: str
    start: float
    end: float
    hall_index: int

    @classmethod
    def from_event(cls, event: Event, hall_index: int) -> ScheduledEvent:
        return cls(
            event_id=event.event_id,
            start=event.start,
            end=event.end,
            hall_index=hall_index,
        )

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class HallSchedule:
    hall_index: int
    events: list[ScheduledEvent]


@dataclass(frozen=True)
class AllocationCore:
    scheduled: list[HallSchedule]
    unscheduled: list[Event]
    scheduled_count: int


@dataclass(frozen=True)
class HallUtilization:
    hall_index: int
    percent: float


@dataclass(frozen=True)
class AllocationResult:
    algorithm: str
    scheduled: list[HallSchedule]
    unscheduled: list[Event]
    scheduled_count: int
    elapsed_ms: float
    timed_out: bool = False
    utilization: Optional[list[HallUtilization]] = field(default=None)

    @property
    def unscheduled_count(self) -> int:
        return len(self.unscheduled)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: Optional[str] = None

