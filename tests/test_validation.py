"""Tests for event and task validation."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from core.validation import (
    localize,
    validate_assignment,
    validate_event,
    validate_recurrence,
    validate_schedule_status,
    validate_task,
)
from models.events import MasterEvent, Recurrence, as_date
from services.recurrence import expand_recurrence


class TestLocalize:
    def test_naive_is_read_in_calendar_timezone(self):
        result = localize(datetime(2025, 11, 3, 9, 0))
        assert result.utcoffset().total_seconds() == 0
        assert result.hour == 9

    def test_none(self):
        assert localize(None) is None


class TestValidateEvent:
    def test_valid(self, sample_event_data):
        assert validate_event(sample_event_data) == []

    def test_missing_times(self):
        errors = validate_event({"title": "No times", "start": datetime(2025, 11, 3, 9)})
        assert errors == ["Please select both start and end times"]

    def test_end_before_start(self, sample_event_data):
        data = {**sample_event_data, "end": sample_event_data["start"]}
        assert validate_event(data) == ["End time must be after start time"]

    def test_mixed_naive_and_aware(self):
        data = {
            "start": datetime(2025, 11, 3, 9),
            "end": datetime(2025, 11, 3, 10, tzinfo=timezone.utc),
        }
        assert validate_event(data) == []

    def test_unknown_department(self, sample_event_data):
        errors = validate_event({**sample_event_data, "department": "marketing"})
        assert errors == ["Invalid department 'marketing'"]


class TestValidateAssignment:
    def test_both_or_neither(self):
        assert validate_assignment(None, None) == []
        assert validate_assignment("u-2", "user") == []
        assert len(validate_assignment("u-2", None)) == 1
        assert len(validate_assignment(None, "team")) == 1

    def test_unknown_type(self):
        assert validate_assignment("u-2", "group") == ["Invalid assignment type 'group'"]


class TestValidateRecurrence:
    def test_none(self):
        assert validate_recurrence(None, None) == []

    def test_bad_frequency_and_interval(self):
        errors = validate_recurrence({"frequency": "hourly", "interval": 0}, None)
        assert len(errors) == 2

    def test_end_before_start(self):
        errors = validate_recurrence(
            {"frequency": "daily", "end_date": datetime(2025, 1, 1)},
            datetime(2025, 2, 1),
        )
        assert errors == ["Recurrence end date must not be before the event start"]


class TestValidateTask:
    def test_title_required(self):
        assert validate_task({"title": "   "}) == ["Task title is required"]

    def test_bad_status_and_priority(self):
        errors = validate_task({"title": "Follow up", "status": "done", "priority": "urgent"})
        assert len(errors) == 2

    def test_schedule_status(self):
        assert validate_schedule_status("scheduled") == []
        assert validate_schedule_status("sometimes") == ["Invalid schedule status 'sometimes'"]


class TestAsDate:
    def test_aware_datetime_uses_calendar_timezone(self, monkeypatch):
        monkeypatch.setattr("core.validation.CALENDAR_TIMEZONE", "America/New_York")
        assert as_date(datetime(2024, 1, 8, 2, 0, tzinfo=timezone.utc)) == date(2024, 1, 7)
        assert as_date("2024-01-08T02:00:00Z") == date(2024, 1, 7)

    def test_plain_dates_unchanged(self, monkeypatch):
        monkeypatch.setattr("core.validation.CALENDAR_TIMEZONE", "America/New_York")
        assert as_date(date(2024, 1, 8)) == date(2024, 1, 8)
        assert as_date("2024-01-08") == date(2024, 1, 8)

    def test_exception_date_skips_local_occurrence(self, monkeypatch):
        monkeypatch.setattr("core.validation.CALENDAR_TIMEZONE", "America/New_York")
        local = ZoneInfo("America/New_York")
        master = MasterEvent(
            id="late-call",
            title="Late call",
            start=datetime(2024, 1, 6, 21, 0, tzinfo=local),
            end=datetime(2024, 1, 6, 22, 0, tzinfo=local),
            recurrence=Recurrence(frequency="daily", exception_dates=["2024-01-08T02:00:00Z"]),
        )
        result = expand_recurrence(
            master,
            datetime(2024, 1, 6, tzinfo=local),
            datetime(2024, 1, 8, 23, tzinfo=local),
        )
        assert [occ.start.date() for occ in result] == [date(2024, 1, 6), date(2024, 1, 8)]
