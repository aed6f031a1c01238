"""Tests for recurrence expansion."""

from datetime import date, datetime, timedelta, timezone

import pytest
from conftest import make_event

from models.events import MasterEvent, Occurrence, Recurrence
from services.recurrence import expand_events, expand_recurrence, intersects_window


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def recurring(frequency, start, interval=1, **rule):
    return make_event(
        "series",
        start,
        start + timedelta(hours=1),
        recurrence=Recurrence(frequency=frequency, interval=interval, **rule),
    )


def starts(occurrences):
    return [occ.start.date() for occ in occurrences]


class TestExpandRecurrence:
    def test_biweekly(self):
        master = recurring("weekly", datetime(2024, 1, 1, 9), interval=2)
        result = expand_recurrence(master, utc(2024, 1, 1), utc(2024, 2, 1))
        assert starts(result) == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]

    def test_occurrence_shape(self):
        master = recurring("daily", datetime(2024, 1, 1, 9))
        first, second = expand_recurrence(master, utc(2024, 1, 1), utc(2024, 1, 2, 12))

        assert isinstance(first, Occurrence)
        assert first.kind == "occurrence"
        assert (first.id, first.master_id, first.occurrence_index) == ("series-0", "series", 0)
        assert second.id == "series-1"
        assert second.duration == master.duration
        assert second.title == master.title

    def test_window_start_skips_but_keeps_index(self):
        master = recurring("daily", datetime(2024, 1, 1, 9))
        result = expand_recurrence(master, utc(2024, 1, 5), utc(2024, 1, 6, 23))
        assert [occ.occurrence_index for occ in result] == [4, 5]
        assert starts(result) == [date(2024, 1, 5), date(2024, 1, 6)]

    def test_exception_dates_skipped(self):
        master = recurring(
            "daily", datetime(2024, 1, 1, 9), exception_dates=[date(2024, 1, 2)]
        )
        result = expand_recurrence(master, utc(2024, 1, 1), utc(2024, 1, 3, 23))
        assert starts(result) == [date(2024, 1, 1), date(2024, 1, 3)]
        assert [occ.id for occ in result] == ["series-0", "series-2"]

    def test_end_date_bounds_series(self):
        master = recurring("weekly", datetime(2024, 1, 1, 9), end_date=utc(2024, 1, 15, 9))
        result = expand_recurrence(master, utc(2024, 1, 1), utc(2024, 12, 31))
        assert starts(result) == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15)]

    def test_monthly_does_not_drift_after_short_month(self):
        master = recurring("monthly", datetime(2024, 1, 31, 9))
        result = expand_recurrence(master, utc(2024, 1, 1), utc(2024, 4, 30, 23))
        assert starts(result) == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_yearly_leap_day(self):
        master = recurring("yearly", datetime(2024, 2, 29, 9))
        result = expand_recurrence(master, utc(2024, 1, 1), utc(2028, 12, 31))
        assert starts(result)[1] == date(2025, 2, 28)
        assert starts(result)[-1] == date(2028, 2, 29)

    def test_cap_limits_expansion(self):
        master = recurring("daily", datetime(2024, 1, 1, 9))
        result = expand_recurrence(master, utc(2024, 1, 1), utc(2030, 1, 1), max_occurrences=10)
        assert len(result) == 10

    def test_cap_only_counts_candidates_in_window(self):
        master = recurring("daily", datetime(2022, 1, 3, 9))
        result = expand_recurrence(master, utc(2025, 11, 3), utc(2025, 11, 10), max_occurrences=10)
        assert starts(result) == [date(2025, 11, 3) + timedelta(days=i) for i in range(7)]
        assert result[0].id == "series-1400"

    @pytest.mark.parametrize(
        "frequency, interval, expected",
        [
            ("daily", 3, [date(2025, 11, 4), date(2025, 11, 7)]),
            ("weekly", 1, [date(2025, 11, 3)]),
            ("monthly", 1, [date(2025, 11, 3)]),
            ("monthly", 5, []),
        ],
    )
    def test_long_running_series_reaches_window(self, frequency, interval, expected):
        master = recurring(frequency, datetime(2022, 1, 3, 9), interval=interval)
        result = expand_recurrence(master, utc(2025, 11, 3), utc(2025, 11, 9, 23))
        assert starts(result) == expected
        for occ in result:
            assert occ.id == f"series-{occ.occurrence_index}"

    def test_long_running_series_keeps_month_end_clamping(self):
        master = recurring("monthly", datetime(2020, 1, 31, 9))
        result = expand_recurrence(master, utc(2025, 2, 1), utc(2025, 3, 31, 23))
        assert starts(result) == [date(2025, 2, 28), date(2025, 3, 31)]
        assert [occ.occurrence_index for occ in result] == [61, 62]

    def test_yearly_series_from_long_ago(self):
        master = recurring("yearly", datetime(1990, 6, 15, 9))
        result = expand_recurrence(master, utc(2025, 1, 1), utc(2025, 12, 31))
        assert starts(result) == [date(2025, 6, 15)]
        assert result[0].occurrence_index == 35

    def test_non_recurring_event_expands_to_nothing(self, sample_event):
        assert expand_recurrence(sample_event, utc(2025, 1, 1), utc(2026, 1, 1)) == []

    def test_restartable(self, recurring_event):
        window = (utc(2025, 11, 1), utc(2025, 12, 31))
        assert expand_recurrence(recurring_event, *window) == expand_recurrence(
            recurring_event, *window
        )

    @pytest.mark.parametrize("frequency", ["daily", "weekly", "monthly", "yearly"])
    def test_occurrences_stay_inside_window(self, frequency):
        master = recurring(
            frequency,
            datetime(2024, 1, 10, 9),
            exception_dates=[date(2024, 3, 10), date(2025, 1, 10)],
        )
        window_start, window_end = utc(2024, 2, 1), utc(2026, 2, 1)
        result = expand_recurrence(master, window_start, window_end)
        assert result
        for occ in result:
            assert window_start <= occ.start <= window_end
            assert occ.start.date() not in master.recurrence.exception_dates


class TestExpandEvents:
    def test_mixes_plain_and_recurring(self, sample_event, recurring_event):
        outside = make_event("old", datetime(2025, 1, 1, 9), datetime(2025, 1, 1, 10))
        result = expand_events(
            [sample_event, recurring_event, outside], utc(2025, 11, 1), utc(2025, 11, 15)
        )
        ids = [event.id for event in result]
        assert ids == ["evt-1", "standup-0", "standup-1"]
        assert isinstance(result[0], MasterEvent)

    def test_intersects_window_excludes_event_ending_at_window_start(self, sample_event):
        assert not intersects_window(sample_event, utc(2025, 11, 3, 10), utc(2025, 11, 4))
        assert intersects_window(sample_event, utc(2025, 11, 3, 9, 30), utc(2025, 11, 4))
