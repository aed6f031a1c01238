"""
Data models for calendar events, tasks and derived layout records.

Events are a tagged union on ``kind``: a persisted ``MasterEvent`` (which may
carry a recurrence rule) or an ``Occurrence`` materialised from a recurring
master. Layout records wrap an event instead of extending it so the engine
never has to copy or mutate the caller's events.
"""

from datetime import date, datetime, timedelta
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config import DEFAULT_CATEGORY, DEFAULT_RELATION_TYPE
from core.validation import localize

Frequency = Literal["daily", "weekly", "monthly", "yearly"]
AssignmentType = Literal["user", "team"]
TaskStatus = Literal["todo", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]
ScheduleStatus = Literal["scheduled", "unscheduled", "partially_scheduled"]


def as_date(value) -> date:
    """Coerce a date, datetime or ISO string to a date in the calendar timezone."""
    if isinstance(value, datetime):
        return localize(value).date()
    if isinstance(value, date):
        return value
    return localize(datetime.fromisoformat(str(value).replace("Z", "+00:00"))).date()


class Recurrence(BaseModel):
    """Recurrence rule attached to a master event."""

    model_config = ConfigDict(frozen=True)

    frequency: Frequency
    interval: int = Field(default=1, ge=1)
    end_date: datetime | None = None
    exception_dates: list[date] = []

    @field_validator("exception_dates", mode="before")
    @classmethod
    def _coerce_exception_dates(cls, value):
        return [as_date(v) for v in value or []]


class EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str | None = None
    start: datetime
    end: datetime
    category: str = DEFAULT_CATEGORY
    recurrence: Recurrence | None = None
    assigned_to: str | None = None
    assigned_to_type: AssignmentType | None = None
    department: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class MasterEvent(EventBase):
    """A stored event."""

    kind: Literal["master"] = "master"


class Occurrence(EventBase):
    """One concrete instance of a recurring master event."""

    kind: Literal["occurrence"] = "occurrence"
    master_id: str
    occurrence_index: int


CalendarEvent = Annotated[Union[MasterEvent, Occurrence], Field(discriminator="kind")]


# =============================================================================
# DERIVED LAYOUT RECORDS (never persisted)
# =============================================================================


class LaidOutEvent(BaseModel):
    """Time-grid placement of one event within its overlap cluster."""

    event: CalendarEvent
    column: int
    total_columns: int
    width: int = 1


class MonthEntry(BaseModel):
    """Month-grid placement of an event on one day.

    ``span`` is nonzero only on the first visible day of the event.
    """

    event: CalendarEvent
    position: int
    span: int


class EventGeometry(BaseModel):
    """Percentages of the day column: horizontal from layout, vertical from time."""

    left: float
    width: float
    top: float
    height: float


class TimeGridEvent(BaseModel):
    layout: LaidOutEvent
    geometry: EventGeometry
    color: str


class DayLayout(BaseModel):
    day: date
    events: list[TimeGridEvent]


class MonthLayout(BaseModel):
    month: str  # YYYY-MM
    days: list[date]
    entries: dict[str, list[MonthEntry]]


# =============================================================================
# TASKS
# =============================================================================


class Task(BaseModel):
    id: str
    title: str
    description: str | None = None
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    due_date: datetime | None = None
    assigned_to: str | None = None
    assigned_to_type: AssignmentType | None = None
    department: str | None = None
    schedule_status: ScheduleStatus = "unscheduled"
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskEventRelation(BaseModel):
    task_id: str
    event_id: str
    relation_type: str = DEFAULT_RELATION_TYPE
    created_at: datetime | None = None
