"""Task endpoints and task <-> calendar event linking."""

import sqlite3

from fastapi import APIRouter, Depends, Request, status

from api.dependencies import current_user_id, get_db, verify_api_key
from api.errors import service_errors
from api.logging import logged_request
from api.models.requests import EventCreate, EventUpdate, ScheduleStatusUpdate, TaskCreate, TaskLink
from api.models.responses import RelationResponse, TaskWithEventsResponse
from core.config import DEFAULT_RELATION_TYPE
from models.events import MasterEvent, Task
from services import tasks as task_service

router = APIRouter(prefix="/v1/tasks", dependencies=[Depends(verify_api_key)])


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: Request,
    body: TaskCreate,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    with logged_request(request, user_id) as request_log, service_errors("Task"):
        task = task_service.create_task(conn, user_id, body.model_dump())
        request_log.status_code = status.HTTP_201_CREATED
        return task


@router.get("/{task_id}", response_model=TaskWithEventsResponse)
async def get_task(
    request: Request,
    task_id: str,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Task together with every calendar event linked to it."""
    with logged_request(request, user_id) as request_log, service_errors("Task"):
        task, events = task_service.get_task_with_events(conn, user_id, task_id)
        request_log.events_returned = len(events)
        return TaskWithEventsResponse(task=task, events=events)


@router.post(
    "/{task_id}/events", response_model=MasterEvent, status_code=status.HTTP_201_CREATED
)
async def create_task_event(
    request: Request,
    task_id: str,
    body: EventCreate,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Schedule a working session for the task."""
    with logged_request(request, user_id) as request_log, service_errors("Event"):
        data = body.model_dump(exclude_none=True)
        event = task_service.create_event_for_task(conn, user_id, task_id, data)
        request_log.status_code = status.HTTP_201_CREATED
        request_log.events_returned = 1
        return event


@router.put("/{task_id}/events/{event_id}", response_model=MasterEvent)
async def update_task_event(
    request: Request,
    task_id: str,
    event_id: str,
    body: EventUpdate,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    with logged_request(request, user_id) as request_log, service_errors("Event"):
        event = task_service.update_event_for_task(
            conn, user_id, task_id, event_id, body.model_dump(exclude_unset=True)
        )
        request_log.events_returned = 1
        return event


@router.post(
    "/{task_id}/links", response_model=RelationResponse, status_code=status.HTTP_201_CREATED
)
async def link_event(
    request: Request,
    task_id: str,
    body: TaskLink,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Link an existing event to the task."""
    with logged_request(request, user_id) as request_log, service_errors("Link"):
        relation = task_service.link_event(
            conn,
            user_id,
            task_id,
            body.event_id,
            body.relation_type or DEFAULT_RELATION_TYPE,
        )
        request_log.status_code = status.HTTP_201_CREATED
        return RelationResponse(relation=relation)


@router.delete("/{task_id}/events/{event_id}")
async def unlink_event(
    request: Request,
    task_id: str,
    event_id: str,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Remove the link; the event itself is kept."""
    with logged_request(request, user_id), service_errors("Link"):
        task_service.unlink_event(conn, user_id, task_id, event_id)
        return {"success": True}


@router.patch("/{task_id}/schedule-status", response_model=Task)
async def update_schedule_status(
    request: Request,
    task_id: str,
    body: ScheduleStatusUpdate,
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    with logged_request(request, user_id), service_errors("Task"):
        return task_service.set_schedule_status(conn, user_id, task_id, body.schedule_status)
