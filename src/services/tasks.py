"""
Tasks and their links to calendar events (working sessions).
"""

import sqlite3
import uuid

from core import database
from core.config import DEFAULT_RELATION_TYPE, DEFAULT_TASK_EVENT_CATEGORY
from core.errors import EventValidationError, NotFoundError
from core.validation import localize, validate_schedule_status, validate_task
from models.events import MasterEvent, Task, TaskEventRelation
from services import events as event_service


def create_task(conn: sqlite3.Connection, user_id: str, data: dict) -> Task:
    errors = validate_task(data)
    if errors:
        raise EventValidationError(errors)

    task = Task(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=data["title"].strip(),
        description=data.get("description"),
        status=data.get("status") or "todo",
        priority=data.get("priority") or "medium",
        due_date=localize(data.get("due_date")),
        assigned_to=data.get("assigned_to"),
        assigned_to_type=data.get("assigned_to_type"),
        department=data.get("department"),
    )
    return database.insert_task(conn, task)


def get_task(conn: sqlite3.Connection, user_id: str, task_id: str) -> Task:
    task = database.fetch_task(conn, user_id, task_id)
    if task is None:
        raise NotFoundError(f"Task '{task_id}' not found")
    return task


def get_task_with_events(
    conn: sqlite3.Connection, user_id: str, task_id: str
) -> tuple[Task, list[MasterEvent]]:
    task = get_task(conn, user_id, task_id)
    return task, database.fetch_events_for_task(conn, task_id)


def get_tasks_for_event(conn: sqlite3.Connection, user_id: str, event_id: str) -> list[Task]:
    event_service.get_event(conn, user_id, event_id)
    return database.fetch_tasks_for_event(conn, event_id)


def _refresh_schedule_status(conn: sqlite3.Connection, task: Task) -> None:
    """A task with linked events is scheduled; one without is unscheduled.

    A manually set partially_scheduled status survives while links remain.
    """
    linked = database.fetch_events_for_task(conn, task.id)
    if not linked:
        status = "unscheduled"
    elif task.schedule_status == "partially_scheduled":
        return
    else:
        status = "scheduled"
    if status != task.schedule_status:
        database.update_task_schedule_status(conn, task.id, status)


def create_event_for_task(
    conn: sqlite3.Connection, user_id: str, task_id: str, data: dict
) -> MasterEvent:
    """Create an event and link it to the task as a working session."""
    task = get_task(conn, user_id, task_id)
    event = event_service.create_event(
        conn, user_id, {"category": DEFAULT_TASK_EVENT_CATEGORY, **data}
    )
    database.insert_relation(conn, task.id, event.id, DEFAULT_RELATION_TYPE)
    _refresh_schedule_status(conn, task)
    return event


def update_event_for_task(
    conn: sqlite3.Connection, user_id: str, task_id: str, event_id: str, changes: dict
) -> MasterEvent:
    """Edit an event, refusing if it is not linked to the task."""
    get_task(conn, user_id, task_id)
    if database.fetch_relation(conn, task_id, event_id) is None:
        raise NotFoundError("Event is not linked to this task")
    return event_service.update_event(conn, user_id, event_id, changes)


def link_event(
    conn: sqlite3.Connection,
    user_id: str,
    task_id: str,
    event_id: str,
    relation_type: str = DEFAULT_RELATION_TYPE,
) -> TaskEventRelation:
    task = get_task(conn, user_id, task_id)
    event_service.get_event(conn, user_id, event_id)
    try:
        relation = database.insert_relation(conn, task_id, event_id, relation_type)
    except sqlite3.IntegrityError:
        raise EventValidationError(["Event is already linked to this task"])
    _refresh_schedule_status(conn, task)
    return relation


def unlink_event(conn: sqlite3.Connection, user_id: str, task_id: str, event_id: str) -> None:
    task = get_task(conn, user_id, task_id)
    if not database.delete_relation(conn, task_id, event_id):
        raise NotFoundError("Event is not linked to this task")
    _refresh_schedule_status(conn, task)


def set_schedule_status(
    conn: sqlite3.Connection, user_id: str, task_id: str, status: str
) -> Task:
    errors = validate_schedule_status(status)
    if errors:
        raise EventValidationError(errors)
    get_task(conn, user_id, task_id)
    database.update_task_schedule_status(conn, task_id, status)
    return get_task(conn, user_id, task_id)
