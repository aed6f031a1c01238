"""
Recurrence expansion.

Materialises the occurrences of a recurring master event inside a visible
window. Each candidate is computed from the master's start (not from the
previous candidate), so month and year steps that clamp to a short month do
not drift.
"""

from datetime import datetime, timedelta
from typing import Iterator

from dateutil.relativedelta import relativedelta

from core.config import MAX_OCCURRENCES
from models.events import EventBase, Occurrence

_STEP_FIELD = {
    "daily": "days",
    "weekly": "weeks",
    "monthly": "months",
    "yearly": "years",
}

# Fields that describe the master itself rather than the occurrence
_MASTER_ONLY = {"id", "start", "end", "kind", "master_id", "occurrence_index"}


def _align(value: datetime, reference: datetime) -> datetime:
    """Match ``value``'s awareness to ``reference`` so the two compare."""
    if reference.tzinfo is not None and value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


def occurrence_start(master: EventBase, index: int) -> datetime:
    """Start of candidate ``index``, stepped from the master's own start."""
    rule = master.recurrence
    return master.start + relativedelta(**{_STEP_FIELD[rule.frequency]: index * rule.interval})


def _first_index(master: EventBase, window_start: datetime) -> int:
    """
    An index whose candidate starts no later than ``window_start``.

    Lets long-running series jump past their history instead of stepping
    through it; the caller walks forward from here.
    """
    rule = master.recurrence
    if window_start <= master.start:
        return 0
    if master.start.tzinfo is not None:
        window_start = window_start.astimezone(master.start.tzinfo)

    if rule.frequency in ("daily", "weekly"):
        step = timedelta(**{_STEP_FIELD[rule.frequency]: rule.interval})
        index = (window_start - master.start) // step
    else:
        months = (window_start.year - master.start.year) * 12 + (
            window_start.month - master.start.month
        )
        if rule.frequency == "yearly":
            months //= 12
        index = months // rule.interval
    # One step back covers DST shifts and month-end clamping
    return max(index - 1, 0)


def iter_occurrences(
    master: EventBase,
    window_start: datetime,
    window_end: datetime,
    max_occurrences: int = MAX_OCCURRENCES,
) -> Iterator[Occurrence]:
    """
    Yield occurrences of ``master`` whose start lies in [window_start, window_end].

    Iteration stops at the earlier of the rule's end date and ``window_end``.
    Candidates before the window and on exception dates are skipped but still
    consume an index, so ids stay stable across windows. ``max_occurrences``
    bounds the candidates inspected inside the window.
    """
    rule = master.recurrence
    if rule is None:
        return

    window_start = _align(window_start, master.start)
    limit = _align(window_end, master.start)
    if rule.end_date is not None:
        limit = min(limit, _align(rule.end_date, master.start))

    skipped_days = set(rule.exception_dates)
    duration = master.duration
    shared = master.model_dump(exclude=_MASTER_ONLY)

    index = _first_index(master, window_start)
    in_window = 0
    while in_window < max_occurrences:
        start = occurrence_start(master, index)
        if start > limit:
            break
        if start >= window_start:
            in_window += 1
            if start.date() not in skipped_days:
                yield Occurrence(
                    **shared,
                    id=f"{master.id}-{index}",
                    start=start,
                    end=start + duration,
                    master_id=master.id,
                    occurrence_index=index,
                )
        index += 1


def expand_recurrence(
    master: EventBase,
    window_start: datetime,
    window_end: datetime,
    max_occurrences: int = MAX_OCCURRENCES,
) -> list[Occurrence]:
    """Occurrences of a recurring master inside the window, as a list."""
    return list(iter_occurrences(master, window_start, window_end, max_occurrences))


def intersects_window(event: EventBase, window_start: datetime, window_end: datetime) -> bool:
    """True if the event touches [window_start, window_end)."""
    window_start = _align(window_start, event.start)
    window_end = _align(window_end, event.start)
    if event.start >= window_end:
        return False
    return event.end > window_start or event.start >= window_start


def expand_events(
    events: list[EventBase], window_start: datetime, window_end: datetime
) -> list[EventBase]:
    """
    Turn stored events into the concrete list a view renders.

    Recurring masters are replaced by their occurrences in the window; plain
    events are kept when they intersect it.
    """
    expanded: list[EventBase] = []
    for event in events:
        if event.recurrence is None:
            if intersects_window(event, window_start, window_end):
                expanded.append(event)
        else:
            expanded.extend(expand_recurrence(event, window_start, window_end))
    return expanded
