"""HTTP controller layer for hall scheduling."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from backend.controllers.dependencies import get_scheduling_service
from backend.domain.constraints import SchedulingValidationError
from backend.domain.models import AllocationResult, Event
from backend.services.scheduling_service import ALGORITHM_COMPLEXITY, SchedulingService
from backend.utils.config import get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(tags=["scheduling"])


class EventPayload(BaseModel):
    """Raw event; semantic checks are left to the domain validator."""

    id: str
    start: float
    end: float

    def to_domain(self) -> Event:
        return Event(event_id=self.id, start=self.start, end=self.end)

    @classmethod
    def from_domain(cls, event: Event) -> EventPayload:
        return cls(id=event.event_id, start=event.start, end=event.end)


class ValidateRequest(BaseModel):
    events: list[EventPayload] = Field(max_length=settings.max_events_per_request)
    halls: int = Field(le=settings.max_halls_per_request)


class ValidateResponse(BaseModel):
    ok: bool
    message: str | None = None


class NormalizeRequest(BaseModel):
    events: list[EventPayload] = Field(max_length=settings.max_events_per_request)


class EventsResponse(BaseModel):
    events: list[EventPayload]


class GreedyScheduleRequest(BaseModel):
    events: list[EventPayload] = Field(max_length=settings.max_events_per_request)
    halls: int = Field(le=settings.max_halls_per_request)
    normalize: bool = False


class BacktrackingScheduleRequest(GreedyScheduleRequest):
    time_budget_ms: float | None = None


class ScheduledEventResponse(BaseModel):
    id: str
    start: float
    end: float
    hall_index: int = Field(ge=0)


class HallScheduleResponse(BaseModel):
    hall_index: int = Field(ge=0)
    events: list[ScheduledEventResponse]


class HallUtilizationResponse(BaseModel):
    hall_index: int = Field(ge=0)
    percent: float = Field(ge=0.0, le=100.0)


class AllocationResponse(BaseModel):
    algorithm: str
    scheduled: list[HallScheduleResponse]
    unscheduled: list[EventPayload]
    scheduled_count: int = Field(ge=0)
    unscheduled_count: int = Field(ge=0)
    elapsed_ms: float = Field(ge=0.0)
    timed_out: bool
    utilization: list[HallUtilizationResponse]

    @classmethod
    def from_result(cls, result: AllocationResult) -> AllocationResponse:
        return cls(
            algorithm=result.algorithm,
            scheduled=[
                HallScheduleResponse(
                    hall_index=hall.hall_index,
                    events=[
                        ScheduledEventResponse(
                            id=event.event_id,
                            start=event.start,
                            end=event.end,
                            hall_index=event.hall_index,
                        )
                        for event in hall.events
                    ],
                )
                for hall in result.scheduled
            ],
            unscheduled=[EventPayload.from_domain(event) for event in result.unscheduled],
            scheduled_count=result.scheduled_count,
            unscheduled_count=result.unscheduled_count,
            elapsed_ms=result.elapsed_ms,
            timed_out=result.timed_out,
            utilization=[
                HallUtilizationResponse(hall_index=item.hall_index, percent=item.percent)
                for item in result.utilization or []
            ],
        )


class ComparisonDeltaResponse(BaseModel):
    scheduled_change: int
    unscheduled_change: int
    elapsed_ms_change: float


class CompareResponse(BaseModel):
    greedy: AllocationResponse
    backtracking: AllocationResponse
    delta: ComparisonDeltaResponse


class RandomEventsRequest(BaseModel):
    count: int | None = Field(default=None, le=settings.max_events_per_request)
    range_start: int | None = None
    range_end: int | None = None
    min_length: int | None = None
    max_length: int | None = None
    seed: int | None = None


class AlgorithmComplexityResponse(BaseModel):
    time: str
    space: str


def _to_domain_events(payload: list[EventPayload]) -> list[Event]:
    return [item.to_domain() for item in payload]


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(exc),
    )


@router.post(
    "/validate",
    response_model=ValidateResponse,
    status_code=status.HTTP_200_OK,
)
async def validate(
    payload: ValidateRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ValidateResponse:
    """Report the first validation failure without scheduling anything."""
    result = service.validate(_to_domain_events(payload.events), payload.halls)
    return ValidateResponse(ok=result.ok, message=result.message)


@router.post(
    "/normalize",
    response_model=EventsResponse,
    status_code=status.HTTP_200_OK,
)
async def normalize(
    payload: NormalizeRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> EventsResponse:
    normalized = service.normalize(_to_domain_events(payload.events))
    return EventsResponse(events=[EventPayload.from_domain(event) for event in normalized])


@router.post(
    "/schedule/greedy",
    response_model=AllocationResponse,
    status_code=status.HTTP_200_OK,
)
def schedule_greedy(
    payload: GreedyScheduleRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> AllocationResponse:
    try:
        result = service.run_greedy(
            _to_domain_events(payload.events),
            payload.halls,
            normalize=payload.normalize,
        )
        return AllocationResponse.from_result(result)
    except SchedulingValidationError as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected greedy scheduling failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to schedule events",
        ) from exc


@router.post(
    "/schedule/backtracking",
    response_model=AllocationResponse,
    status_code=status.HTTP_200_OK,
)
def schedule_backtracking(
    payload: BacktrackingScheduleRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> AllocationResponse:
    """Run the time-budgeted search; a spent budget still returns 200."""
    try:
        result = service.run_backtracking(
            _to_domain_events(payload.events),
            payload.halls,
            time_budget_ms=payload.time_budget_ms,
            normalize=payload.normalize,
        )
        return AllocationResponse.from_result(result)
    except SchedulingValidationError as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected backtracking scheduling failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to schedule events",
        ) from exc


@router.post(
    "/schedule/compare",
    response_model=CompareResponse,
    status_code=status.HTTP_200_OK,
)
def compare(
    payload: BacktrackingScheduleRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> CompareResponse:
    """Run both schedulers on the same input side by side."""
    try:
        result = service.compare(
            _to_domain_events(payload.events),
            payload.halls,
            time_budget_ms=payload.time_budget_ms,
            normalize=payload.normalize,
        )
        return CompareResponse(
            greedy=AllocationResponse.from_result(result.greedy),
            backtracking=AllocationResponse.from_result(result.backtracking),
            delta=ComparisonDeltaResponse(
                scheduled_change=result.delta.scheduled_change,
                unscheduled_change=result.delta.unscheduled_change,
                elapsed_ms_change=result.delta.elapsed_ms_change,
            ),
        )
    except SchedulingValidationError as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected scheduler comparison failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compare schedulers",
        ) from exc


@router.post(
    "/events/random",
    response_model=EventsResponse,
    status_code=status.HTTP_200_OK,
)
async def generate_random_events(
    payload: RandomEventsRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> EventsResponse:
    overrides = payload.model_dump(exclude_none=True, exclude={"seed"})
    try:
        events = service.generate_events(seed=payload.seed, overrides=overrides)
    except SchedulingValidationError as exc:
        raise _bad_request(exc) from exc
    return EventsResponse(events=[EventPayload.from_domain(event) for event in events])


@router.get(
    "/algorithms",
    response_model=dict[str, AlgorithmComplexityResponse],
    status_code=status.HTTP_200_OK,
)
async def list_algorithms() -> dict[str, AlgorithmComplexityResponse]:
    return {
        name: AlgorithmComplexityResponse(**notes)
        for name, notes in ALGORITHM_COMPLEXITY.items()
    }
