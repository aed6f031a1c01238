"""API Pydantic models."""

from .requests import (
    EventCreate,
    EventMove,
    EventResize,
    EventUpdate,
    RecurrenceInput,
    ScheduleStatusUpdate,
    TaskCreate,
    TaskLink,
)
from .responses import (
    ErrorCodes,
    ErrorResponse,
    EventListResponse,
    HealthResponse,
    RelationResponse,
    TaskListResponse,
    TaskWithEventsResponse,
    WeekResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "EventListResponse",
    "WeekResponse",
    "TaskWithEventsResponse",
    "TaskListResponse",
    "RelationResponse",
    "EventCreate",
    "EventUpdate",
    "EventMove",
    "EventResize",
    "RecurrenceInput",
    "TaskCreate",
    "TaskLink",
    "ScheduleStatusUpdate",
]
