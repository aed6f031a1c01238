"""
Calendar views: fetch a user's events for a window, expand recurrences,
apply the view filters and lay the result out for day, week or month grids.
"""

import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from core import database
from core.config import CALENDAR_TIMEZONE, DEFAULT_CATEGORY, EVENT_CATEGORIES, WEEK_STARTS_ON
from models.events import DayLayout, EventBase, MonthLayout, TimeGridEvent
from services.layout import event_geometry, layout_events
from services.month import month_grid_days, pack_month_events
from services.recurrence import expand_events, intersects_window


@dataclass
class EventFilters:
    """Sidebar filters. Empty collections mean "no filtering"."""

    categories: set[str] = field(default_factory=set)
    departments: set[str] = field(default_factory=set)
    assigned_to: set[str] = field(default_factory=set)
    query: str = ""


def category_style(category: str | None) -> dict:
    """Palette entry for a category, falling back to the default style."""
    return EVENT_CATEGORIES.get(category or DEFAULT_CATEGORY, EVENT_CATEGORIES[DEFAULT_CATEGORY])


def filter_events(events: list[EventBase], filters: EventFilters | None) -> list[EventBase]:
    if filters is None:
        return list(events)

    query = filters.query.strip().lower()
    return [
        event
        for event in events
        if (not filters.categories or event.category in filters.categories)
        and (not filters.departments or event.department in filters.departments)
        and (not filters.assigned_to or event.assigned_to in filters.assigned_to)
        and (not query or query in event.title.lower())
    ]


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=ZoneInfo(CALENDAR_TIMEZONE))


def week_days(anchor: date, week_starts_on: int = WEEK_STARTS_ON) -> list[date]:
    first = anchor - timedelta(days=(anchor.weekday() - week_starts_on) % 7)
    return [first + timedelta(days=i) for i in range(7)]


def fetch_window(
    conn: sqlite3.Connection,
    user_id: str,
    window_start: datetime,
    window_end: datetime,
    filters: EventFilters | None = None,
) -> list[EventBase]:
    """Concrete events (occurrences included) a user sees in the window."""
    stored = database.fetch_events_in_range(conn, user_id, window_start, window_end)
    expanded = expand_events(stored, window_start, window_end)
    return filter_events(expanded, filters)


def layout_day(events: list[EventBase], day: date) -> DayLayout:
    """Time-grid layout of the events touching ``day``."""
    start = day_start(day)
    end = start + timedelta(days=1)
    todays = [event for event in events if intersects_window(event, start, end)]

    return DayLayout(
        day=day,
        events=[
            TimeGridEvent(
                layout=laid_out,
                geometry=event_geometry(laid_out, start),
                color=category_style(laid_out.event.category)["color"],
            )
            for laid_out in layout_events(todays)
        ],
    )


def build_day_view(
    conn: sqlite3.Connection, user_id: str, day: date, filters: EventFilters | None = None
) -> DayLayout:
    start = day_start(day)
    events = fetch_window(conn, user_id, start, start + timedelta(days=1), filters)
    return layout_day(events, day)


def build_week_view(
    conn: sqlite3.Connection, user_id: str, anchor: date, filters: EventFilters | None = None
) -> list[DayLayout]:
    days = week_days(anchor)
    events = fetch_window(
        conn, user_id, day_start(days[0]), day_start(days[-1] + timedelta(days=1)), filters
    )
    return [layout_day(events, day) for day in days]


def build_month_view(
    conn: sqlite3.Connection, user_id: str, anchor: date, filters: EventFilters | None = None
) -> MonthLayout:
    days = month_grid_days(anchor)
    events = fetch_window(
        conn, user_id, day_start(days[0]), day_start(days[-1] + timedelta(days=1)), filters
    )
    return MonthLayout(
        month=anchor.strftime("%Y-%m"),
        days=days,
        entries=pack_month_events(events, days),
    )
