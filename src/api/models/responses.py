"""Pydantic response models for API endpoints."""

from pydantic import BaseModel

from models.events import CalendarEvent, DayLayout, Task, TaskEventRelation


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class EventListResponse(BaseModel):
    events: list[CalendarEvent]


class WeekResponse(BaseModel):
    days: list[DayLayout]


class TaskWithEventsResponse(BaseModel):
    task: Task
    events: list[CalendarEvent]


class TaskListResponse(BaseModel):
    tasks: list[Task]


class RelationResponse(BaseModel):
    relation: TaskEventRelation


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
