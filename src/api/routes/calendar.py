"""Day, week and month calendar view endpoints."""

import sqlite3
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import current_user_id, get_db, verify_api_key
from api.errors import parse_date_param
from api.logging import logged_request
from api.models.responses import WeekResponse
from api.routes.events import build_filters
from core.config import CALENDAR_TIMEZONE
from models.events import DayLayout, MonthLayout
from services import calendar as calendar_service

router = APIRouter(prefix="/v1/calendar", dependencies=[Depends(verify_api_key)])


def _anchor(value: str | None) -> date:
    """Requested day, defaulting to today in the calendar timezone."""
    return parse_date_param(value, "date") or datetime.now(ZoneInfo(CALENDAR_TIMEZONE)).date()


@router.get("/day", response_model=DayLayout)
async def day_view(
    request: Request,
    day: str | None = Query(None, alias="date"),
    filters: calendar_service.EventFilters = Depends(build_filters),
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Time-grid layout for one day: columns plus percentage geometry."""
    with logged_request(request, user_id) as request_log:
        view = calendar_service.build_day_view(conn, user_id, _anchor(day), filters)
        request_log.events_returned = len(view.events)
        return view


@router.get("/week", response_model=WeekResponse)
async def week_view(
    request: Request,
    day: str | None = Query(None, alias="date"),
    filters: calendar_service.EventFilters = Depends(build_filters),
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    with logged_request(request, user_id) as request_log:
        days = calendar_service.build_week_view(conn, user_id, _anchor(day), filters)
        request_log.events_returned = sum(len(layout.events) for layout in days)
        return WeekResponse(days=days)


@router.get("/month", response_model=MonthLayout)
async def month_view(
    request: Request,
    day: str | None = Query(None, alias="date"),
    filters: calendar_service.EventFilters = Depends(build_filters),
    user_id: str = Depends(current_user_id),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Month grid: visible days and per-day lane entries for multi-day packing."""
    with logged_request(request, user_id) as request_log:
        view = calendar_service.build_month_view(conn, user_id, _anchor(day), filters)
        request_log.events_returned = sum(
            1 for entries in view.entries.values() for entry in entries if entry.span > 0
        )
        return view
