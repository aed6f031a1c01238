"""
Time-grid layout for one day of events.

Overlapping events render side by side. A start-ordered sweep gives each event
the lowest column not held by an event it overlaps; every event in an overlap
cluster then shares the cluster's column count so their widths line up.
"""

from datetime import datetime, timedelta
from typing import Iterable

from core.config import TIME_GRID_GUTTER_PERCENT
from models.events import EventBase, EventGeometry, LaidOutEvent

DAY = timedelta(days=1)


def sweep_order(event: EventBase):
    """Sort key shared by both packers: start ascending, longer events first on ties."""
    return (event.start, -event.duration)


def events_overlap(a: EventBase, b: EventBase) -> bool:
    """
    Half-open interval overlap.

    Events starting at the same instant always collide, which keeps identical
    and zero-duration events in separate columns.
    """
    if a.start == b.start:
        return True
    return a.start < b.end and b.start < a.end


def lowest_free_lane(occupied: Iterable[Iterable[int]]) -> int:
    """Smallest non-negative lane missing from every set in ``occupied``."""
    taken: set[int] = set()
    for lanes in occupied:
        taken.update(lanes)
    lane = 0
    while lane in taken:
        lane += 1
    return lane


def layout_events(events: list[EventBase]) -> list[LaidOutEvent]:
    """
    Assign column, total_columns and width to events already filtered to one day.

    Returns new records in sweep order; the input list is left untouched.
    """
    if not events:
        return []

    ordered = sorted(events, key=sweep_order)
    columns: list[int] = []
    clusters: list[int] = []
    active: list[int] = []
    cluster = -1

    for idx, event in enumerate(ordered):
        # Sorted by start, so anything not overlapping now never overlaps again
        active = [i for i in active if events_overlap(ordered[i], event)]
        if not active:
            cluster += 1
        columns.append(lowest_free_lane([{columns[i] for i in active}]))
        clusters.append(cluster)
        active.append(idx)

    cluster_columns: dict[int, int] = {}
    for cluster_id, column in zip(clusters, columns):
        cluster_columns[cluster_id] = max(cluster_columns.get(cluster_id, 0), column + 1)

    return [
        LaidOutEvent(
            event=event,
            column=column,
            total_columns=cluster_columns[cluster_id],
            width=1,
        )
        for event, column, cluster_id in zip(ordered, columns, clusters)
    ]


def event_geometry(
    laid_out: LaidOutEvent,
    day_start: datetime,
    gutter: float = TIME_GRID_GUTTER_PERCENT,
) -> EventGeometry:
    """Convert a layout record to left/width/top/height percentages of a day column."""
    share = 100 / laid_out.total_columns
    event = laid_out.event
    day_end = day_start + DAY

    # Clip multi-day events to the rendered day
    top_at = min(max(event.start, day_start), day_end)
    bottom_at = min(max(event.end, day_start), day_end)

    return EventGeometry(
        left=laid_out.column * share,
        width=max(share * laid_out.width - gutter, 0.0),
        top=(top_at - day_start) / DAY * 100,
        height=(bottom_at - top_at) / DAY * 100,
    )
