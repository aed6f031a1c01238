"""
Event and task validation for the create/edit boundary.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from core.config import (
    ASSIGNMENT_TYPES,
    CALENDAR_TIMEZONE,
    DEPARTMENTS,
    SCHEDULE_STATUSES,
    TASK_PRIORITIES,
    TASK_STATUSES,
)

RECURRENCE_FREQUENCIES = {"daily", "weekly", "monthly", "yearly"}


def localize(dt: datetime | None) -> datetime | None:
    """Interpret naive timestamps in the calendar timezone; convert aware ones to it."""
    if dt is None:
        return None
    tz = ZoneInfo(CALENDAR_TIMEZONE)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def validate_assignment(assigned_to: str | None, assigned_to_type: str | None) -> list[str]:
    """Assignee and assignee type must be set together, with a known type."""
    errors = []
    if assigned_to and not assigned_to_type:
        errors.append("Assignment type is required when assigned_to is set")
    if assigned_to_type and not assigned_to:
        errors.append("assigned_to is required when an assignment type is set")
    if assigned_to_type and assigned_to_type not in ASSIGNMENT_TYPES:
        errors.append(f"Invalid assignment type '{assigned_to_type}'")
    return errors


def validate_department(department: str | None) -> list[str]:
    if department and department not in DEPARTMENTS:
        return [f"Invalid department '{department}'"]
    return []


def validate_recurrence(recurrence: dict | None, start: datetime | None) -> list[str]:
    """Check a raw recurrence dict before it becomes a Recurrence model."""
    if not recurrence:
        return []

    errors = []
    frequency = recurrence.get("frequency")
    if frequency not in RECURRENCE_FREQUENCIES:
        errors.append(f"Invalid recurrence frequency '{frequency}'")

    interval = recurrence.get("interval")
    if interval is None:
        interval = 1
    if not isinstance(interval, int) or interval < 1:
        errors.append("Recurrence interval must be a positive whole number")

    end_date = recurrence.get("end_date")
    if isinstance(end_date, datetime) and start is not None:
        if localize(end_date) < localize(start):
            errors.append("Recurrence end date must not be before the event start")

    return errors


def validate_event(data: dict) -> list[str]:
    """
    Validate merged event fields (create payload, or stored event plus edits).

    Checks:
    1. Start and end are present
    2. End is after start
    3. Assignment fields are consistent
    4. Department is known
    5. Recurrence rule is well formed
    """
    errors = []
    start = data.get("start")
    end = data.get("end")

    if start is None or end is None:
        errors.append("Please select both start and end times")
    elif localize(end) <= localize(start):
        errors.append("End time must be after start time")

    errors.extend(validate_assignment(data.get("assigned_to"), data.get("assigned_to_type")))
    errors.extend(validate_department(data.get("department")))
    errors.extend(validate_recurrence(data.get("recurrence"), start))
    return errors


def validate_task(data: dict) -> list[str]:
    errors = []
    if not (data.get("title") or "").strip():
        errors.append("Task title is required")
    if data.get("status") and data["status"] not in TASK_STATUSES:
        errors.append(f"Invalid task status '{data['status']}'")
    if data.get("priority") and data["priority"] not in TASK_PRIORITIES:
        errors.append(f"Invalid task priority '{data['priority']}'")
    errors.extend(validate_assignment(data.get("assigned_to"), data.get("assigned_to_type")))
    errors.extend(validate_department(data.get("department")))
    return errors


def validate_schedule_status(status: str) -> list[str]:
    if status not in SCHEDULE_STATUSES:
        return [f"Invalid schedule status '{status}'"]
    return []
