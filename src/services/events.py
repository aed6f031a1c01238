"""
Calendar event create/edit/delete, plus the drag and resize edits made
directly on the grid (which change only start and end).
"""

import sqlite3
import uuid
from datetime import date, datetime, time, timedelta

from core import database
from core.config import DEFAULT_CATEGORY, DEFAULT_EVENT_TITLE, MIN_EVENT_DURATION_MINUTES
from core.errors import EventValidationError, NotFoundError
from core.validation import localize, validate_event
from models.events import MasterEvent, Recurrence
from services.recurrence import occurrence_start

RESIZE_EDGES = {"start", "end"}
DELETE_OPTIONS = {"single", "future", "all"}


def _build_recurrence(raw: dict | Recurrence | None) -> Recurrence | None:
    if not raw:
        return None
    if isinstance(raw, Recurrence):
        raw = raw.model_dump()
    recurrence = Recurrence.model_validate(
        {**raw, "interval": raw.get("interval") or 1}
    )
    if recurrence.end_date is not None:
        recurrence = recurrence.model_copy(update={"end_date": localize(recurrence.end_date)})
    return recurrence


def _build_event(event_id: str, user_id: str, data: dict) -> MasterEvent:
    """Validate merged fields and turn them into a storable event."""
    errors = validate_event(data)
    if errors:
        raise EventValidationError(errors)

    return MasterEvent(
        id=event_id,
        user_id=user_id,
        title=(data.get("title") or "").strip() or DEFAULT_EVENT_TITLE,
        description=data.get("description"),
        start=localize(data["start"]),
        end=localize(data["end"]),
        category=data.get("category") or DEFAULT_CATEGORY,
        recurrence=_build_recurrence(data.get("recurrence")),
        assigned_to=data.get("assigned_to"),
        assigned_to_type=data.get("assigned_to_type"),
        department=data.get("department"),
    )


def create_event(conn: sqlite3.Connection, user_id: str, data: dict) -> MasterEvent:
    """Create an event owned by ``user_id``. Title and time range come from the form."""
    event = _build_event(str(uuid.uuid4()), user_id, data)
    return database.insert_event(conn, event)


def get_event(conn: sqlite3.Connection, user_id: str, event_id: str) -> MasterEvent:
    event = database.fetch_event(conn, user_id, event_id)
    if event is None:
        raise NotFoundError(f"Event '{event_id}' not found")
    return event


def update_event(
    conn: sqlite3.Connection, user_id: str, event_id: str, changes: dict
) -> MasterEvent:
    """Apply a partial edit; the merged event is validated as a whole."""
    existing = get_event(conn, user_id, event_id)
    merged = existing.model_dump(exclude={"id", "user_id", "kind", "created_at", "updated_at"})
    merged.update(changes)
    event = _build_event(existing.id, user_id, merged)
    return database.update_event(conn, event)


def move_event(
    conn: sqlite3.Connection, user_id: str, event_id: str, new_start: datetime
) -> MasterEvent:
    """Drop an event at a new start, keeping its duration."""
    existing = get_event(conn, user_id, event_id)
    new_start = localize(new_start)
    return update_event(
        conn,
        user_id,
        event_id,
        {"start": new_start, "end": new_start + existing.duration},
    )


def resize_event(
    conn: sqlite3.Connection,
    user_id: str,
    event_id: str,
    edge: str,
    minutes_delta: int,
) -> MasterEvent:
    """
    Drag one edge of an event by ``minutes_delta`` minutes.

    The resized event must stay at least MIN_EVENT_DURATION_MINUTES long.
    """
    if edge not in RESIZE_EDGES:
        raise EventValidationError([f"Invalid resize edge '{edge}'"])

    existing = get_event(conn, user_id, event_id)
    delta = timedelta(minutes=minutes_delta)
    start, end = existing.start, existing.end
    if edge == "start":
        start = start + delta
    else:
        end = end + delta

    if end - start < timedelta(minutes=MIN_EVENT_DURATION_MINUTES):
        raise EventValidationError(
            [f"Events must be at least {MIN_EVENT_DURATION_MINUTES} minutes long"]
        )

    return update_event(conn, user_id, event_id, {"start": start, "end": end})


def _find_series(
    conn: sqlite3.Connection, user_id: str, event_id: str
) -> tuple[MasterEvent, int | None]:
    """Resolve a master id, or an occurrence id ``<master id>-<index>``, to its master."""
    event = database.fetch_event(conn, user_id, event_id)
    if event is not None:
        return event, None

    master_id, _, suffix = event_id.rpartition("-")
    if master_id and suffix.isdigit():
        master = database.fetch_event(conn, user_id, master_id)
        if master is not None and master.recurrence is not None:
            return master, int(suffix)
    raise NotFoundError(f"Event '{event_id}' not found")


def _delete_series(conn: sqlite3.Connection, user_id: str, event: MasterEvent) -> None:
    linked_tasks = database.fetch_tasks_for_event(conn, event.id)
    database.delete_event(conn, user_id, event.id)

    for task in linked_tasks:
        if not database.fetch_events_for_task(conn, task.id):
            database.update_task_schedule_status(conn, task.id, "unscheduled")


def delete_event(
    conn: sqlite3.Connection,
    user_id: str,
    event_id: str,
    option: str = "all",
    instance_date: date | None = None,
) -> MasterEvent | None:
    """
    Delete an event, or part of a recurring series.

    Options for recurring events:
        all: delete the master and every occurrence
        single: add ``instance_date`` to the rule's exception dates
        future: end the series before ``instance_date``

    ``event_id`` may be an occurrence id, in which case the occurrence's own
    date is used when ``instance_date`` is not given. Returns the trimmed
    master, or None when the event was deleted outright. Tasks left without
    any linked event become unscheduled.
    """
    if option not in DELETE_OPTIONS:
        raise EventValidationError([f"Invalid delete option '{option}'"])

    event, index = _find_series(conn, user_id, event_id)
    if event.recurrence is None or option == "all":
        _delete_series(conn, user_id, event)
        return None

    if instance_date is None and index is not None:
        instance_date = occurrence_start(event, index).date()
    if instance_date is None:
        raise EventValidationError(
            ["An instance date is required to delete part of a recurring event"]
        )

    rule = event.recurrence
    if option == "single":
        exception_dates = list(rule.exception_dates)
        if instance_date not in exception_dates:
            exception_dates.append(instance_date)
        rule = rule.model_copy(update={"exception_dates": exception_dates})
    else:
        if instance_date <= event.start.date():
            _delete_series(conn, user_id, event)
            return None
        # Last second of the day before the instance
        end_date = localize(datetime.combine(instance_date, time.min)) - timedelta(seconds=1)
        if rule.end_date is not None:
            end_date = min(end_date, rule.end_date)
        rule = rule.model_copy(update={"end_date": end_date})

    return database.update_event(conn, event.model_copy(update={"recurrence": rule}))
