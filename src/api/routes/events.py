"""Calendar event endpoints."""

import sqlite3
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies import current_user_id, get_db, verify_api_key
from api.errors import invalid_request, parse_date_param, parse_datetime_param, service_errors
from api.logging import logged_request
from api.models.requests import EventCreate, EventMove, EventResize, EventUpdate
from api.models.responses import EventListResponse, TaskListResponse
from core.validation import localize
from models.events import MasterEvent
from services import calendar as calendar_service
from services import events as event_service
from services import tasks as task_service

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


def build_filters(
    category: Annotated[list[str] | None, Query()] = None,
    department: Annotated[list[str] | None, Query()] = None,
    assigned_to: Annotated[list[str] | None, Query()] = None,
    q: str = "",
) -> calendar_service.EventFilters:
    """Sidebar filters from repeated query parameters."""
    return calendar_service.EventFilters(
        categories=set(category or []),
        departments=set(department or []),
        assigned_to=set(assigned_to or []),
        query=q,
    )


@router.get("/events", response_model=EventListResponse)
async def list_events(
    request: Request,
    start: str | None = None,
    end: str | None = None,
    filters: calendar_service.EventFilters = Depends(build_filters),
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """
    Events in a date range, with recurring events expanded into occurrences.
    """
    with logged_request(request, user_id) as request_log:
        window_start = localize(parse_datetime_param(start, "start"))
        window_end = localize(parse_datetime_param(end, "end"))
        if window_start is None or window_end is None:
            raise invalid_request("Date range (start and end) is required")
        if window_end < window_start:
            raise invalid_request("Range end must not be before range start")

        events = calendar_service.fetch_window(conn, user_id, window_start, window_end, filters)
        request_log.events_returned = len(events)
        return EventListResponse(events=events)


@router.post("/events", response_model=MasterEvent, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    body: EventCreate,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    with logged_request(request, user_id) as request_log, service_errors("Event"):
        event = event_service.create_event(conn, user_id, body.model_dump())
        request_log.status_code = status.HTTP_201_CREATED
        request_log.events_returned = 1
        return event


@router.get("/events/{event_id}", response_model=MasterEvent)
async def get_event(
    request: Request,
    event_id: str,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    with logged_request(request, user_id) as request_log, service_errors("Event"):
        event = event_service.get_event(conn, user_id, event_id)
        request_log.events_returned = 1
        return event


@router.put("/events/{event_id}", response_model=MasterEvent)
async def update_event(
    request: Request,
    event_id: str,
    body: EventUpdate,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Edit any subset of an event's fields."""
    with logged_request(request, user_id) as request_log, service_errors("Event"):
        event = event_service.update_event(
            conn, user_id, event_id, body.model_dump(exclude_unset=True)
        )
        request_log.events_returned = 1
        return event


@router.patch("/events/{event_id}/move", response_model=MasterEvent)
async def move_event(
    request: Request,
    event_id: str,
    body: EventMove,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Drag an event to a new start time; duration is kept."""
    with logged_request(request, user_id) as request_log, service_errors("Event move"):
        event = event_service.move_event(conn, user_id, event_id, body.start)
        request_log.events_returned = 1
        return event


@router.patch("/events/{event_id}/resize", response_model=MasterEvent)
async def resize_event(
    request: Request,
    event_id: str,
    body: EventResize,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Drag the start or end edge of an event."""
    with logged_request(request, user_id) as request_log, service_errors("Event resize"):
        event = event_service.resize_event(
            conn, user_id, event_id, body.edge, body.minutes_delta
        )
        request_log.events_returned = 1
        return event


@router.delete("/events/{event_id}")
async def delete_event(
    request: Request,
    event_id: str,
    option: str = "all",
    instance_date: str | None = None,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """
    Delete an event, or one occurrence (``option=single``) or the rest of a
    recurring series (``option=future``) from ``instance_date`` on.
    """
    with logged_request(request, user_id), service_errors("Event delete"):
        event = event_service.delete_event(
            conn,
            user_id,
            event_id,
            option,
            parse_date_param(instance_date, "instance_date"),
        )
        return {"success": True, "event": event.model_dump(mode="json") if event else None}


@router.get("/events/{event_id}/tasks", response_model=TaskListResponse)
async def list_event_tasks(
    request: Request,
    event_id: str,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    with logged_request(request, user_id), service_errors("Event"):
        return TaskListResponse(tasks=task_service.get_tasks_for_event(conn, user_id, event_id))
