"""Pydantic request bodies for API endpoints.

Enumerated fields are plain strings here; the service layer validates them so
every rejection comes back in the standard error format.
"""

from datetime import date, datetime

from pydantic import BaseModel


class RecurrenceInput(BaseModel):
    frequency: str
    interval: int | None = 1
    end_date: datetime | None = None
    exception_dates: list[date | datetime] = []


class EventCreate(BaseModel):
    title: str = ""
    description: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    category: str | None = None
    recurrence: RecurrenceInput | None = None
    assigned_to: str | None = None
    assigned_to_type: str | None = None
    department: str | None = None


class EventUpdate(BaseModel):
    """Any subset of event fields; only fields sent are changed."""

    title: str | None = None
    description: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    category: str | None = None
    recurrence: RecurrenceInput | None = None
    assigned_to: str | None = None
    assigned_to_type: str | None = None
    department: str | None = None


class EventMove(BaseModel):
    start: datetime


class EventResize(BaseModel):
    edge: str  # "start" or "end"
    minutes_delta: int


class TaskCreate(BaseModel):
    title: str = ""
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: datetime | None = None
    assigned_to: str | None = None
    assigned_to_type: str | None = None
    department: str | None = None


class TaskLink(BaseModel):
    event_id: str
    relation_type: str | None = None


class ScheduleStatusUpdate(BaseModel):
    schedule_status: str
