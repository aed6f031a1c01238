"""
Month-grid packing for events that may span several days.
"""

from collections import defaultdict
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from core.config import WEEK_STARTS_ON
from models.events import EventBase, MonthEntry
from services.layout import lowest_free_lane, sweep_order


def day_key(day: date) -> str:
    """Grid key for a day (YYYY-MM-DD)."""
    return day.isoformat()


def month_grid_days(anchor: date, week_starts_on: int = WEEK_STARTS_ON) -> list[date]:
    """
    Days shown in a month grid: whole weeks covering the month containing ``anchor``.

    ``week_starts_on`` uses ``date.weekday()`` numbering (0=Monday, 6=Sunday).
    """
    first = anchor.replace(day=1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    grid_start = first - timedelta(days=(first.weekday() - week_starts_on) % 7)
    grid_end = last + timedelta(days=(week_starts_on - 1 - last.weekday()) % 7)
    return [grid_start + timedelta(days=i) for i in range((grid_end - grid_start).days + 1)]


def event_days(event: EventBase) -> list[date]:
    """Calendar days an event touches, inclusive of the day it ends on."""
    first = event.start.date()
    span = max((event.end.date() - first).days + 1, 1)
    return [first + timedelta(days=i) for i in range(span)]


def pack_month_events(
    events: list[EventBase], visible_days: list[date]
) -> dict[str, list[MonthEntry]]:
    """
    Give each event one lane (``position``) that is free on every day it spans.

    Returns day key -> entries for every visible day. The first visible day of
    an event carries its span; later days carry ``span=0``. Callers drop events
    that miss the grid entirely.
    """
    visible = [day_key(d) for d in visible_days]
    visible_set = set(visible)
    packed: dict[str, list[MonthEntry]] = {key: [] for key in visible}
    used: dict[str, set[int]] = defaultdict(set)

    for event in sorted(events, key=sweep_order):
        keys = [day_key(d) for d in event_days(event)]
        position = lowest_free_lane(used[key] for key in keys)

        for key in keys:
            used[key].add(position)

        shown = [key for key in keys if key in visible_set]
        for i, key in enumerate(shown):
            packed[key].append(
                MonthEntry(event=event, position=position, span=len(shown) if i == 0 else 0)
            )

    return packed
