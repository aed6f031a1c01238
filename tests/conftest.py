"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.events import MasterEvent, Recurrence  # noqa: E402

TEST_API_KEY = "test-api-key"
TEST_USER = "user-1"


def make_event(event_id, start, end, **fields):
    """Build a master event from naive UTC datetimes."""
    return MasterEvent(
        id=event_id,
        title=fields.pop("title", f"Event {event_id}"),
        start=start.replace(tzinfo=timezone.utc),
        end=end.replace(tzinfo=timezone.utc),
        **fields,
    )


@pytest.fixture
def sample_event():
    """One-hour meeting on 2025-11-03."""
    return make_event(
        "evt-1",
        datetime(2025, 11, 3, 9, 0),
        datetime(2025, 11, 3, 10, 0),
        title="Client meeting",
        category="meeting",
    )


@pytest.fixture
def recurring_event():
    """Weekly 30 minute standup starting Monday 2025-11-03."""
    return make_event(
        "standup",
        datetime(2025, 11, 3, 9, 0),
        datetime(2025, 11, 3, 9, 30),
        title="Weekly standup",
        recurrence=Recurrence(frequency="weekly"),
    )


@pytest.fixture
def sample_event_data():
    """Create-form payload as the API passes it to the event service."""
    return {
        "title": "Client meeting",
        "description": "Quarterly review",
        "start": datetime(2025, 11, 3, 9, 0, tzinfo=timezone.utc),
        "end": datetime(2025, 11, 3, 10, 0, tzinfo=timezone.utc),
        "category": "meeting",
    }


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point every DB_PATH user at a throwaway database."""
    path = tmp_path / "crm-calendar.db"
    monkeypatch.setattr("core.database.DB_PATH", path)
    monkeypatch.setattr("api.logging.DB_PATH", path)
    return path


@pytest.fixture
def db_conn(db_path):
    from core.database import create_schema, get_connection

    conn = get_connection(db_path)
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def client(db_path, monkeypatch):
    """API test client with a configured key and a fresh database."""
    from fastapi.testclient import TestClient

    from api.main import app

    monkeypatch.setattr("api.dependencies.CRM_API_KEY", TEST_API_KEY)
    monkeypatch.setattr("api.main.DB_PATH", db_path)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"X-API-Key": TEST_API_KEY, "X-User-Id": TEST_USER}
