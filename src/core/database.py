"""
SQLite database operations for calendar events, tasks and their links.

Timestamps are stored as UTC ISO 8601 text and returned in the calendar
timezone. Recurrence rules are stored as JSON.
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from core.config import DB_PATH
from core.validation import localize
from models.events import MasterEvent, Recurrence, Task, TaskEventRelation

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS calendar_events (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        start_time TEXT NOT NULL,
        end_time TEXT NOT NULL,
        category TEXT NOT NULL DEFAULT 'default',
        recurrence TEXT,
        assigned_to TEXT,
        assigned_to_type TEXT CHECK(assigned_to_type IN ('user', 'team')),
        department TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        status TEXT NOT NULL DEFAULT 'todo' CHECK(status IN ('todo', 'in-progress', 'completed')),
        priority TEXT NOT NULL DEFAULT 'medium' CHECK(priority IN ('low', 'medium', 'high')),
        due_date TEXT,
        assigned_to TEXT,
        assigned_to_type TEXT CHECK(assigned_to_type IN ('user', 'team')),
        department TEXT,
        schedule_status TEXT NOT NULL DEFAULT 'unscheduled'
            CHECK(schedule_status IN ('scheduled', 'unscheduled', 'partially_scheduled')),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS task_calendar_relations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        task_id TEXT NOT NULL,
        event_id TEXT NOT NULL,
        relation_type TEXT NOT NULL DEFAULT 'working_session',
        created_at TEXT NOT NULL,
        UNIQUE(task_id, event_id),
        FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE,
        FOREIGN KEY (event_id) REFERENCES calendar_events(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        user_id TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        events_returned INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_events_user_start ON calendar_events(user_id, start_time)",
    "CREATE INDEX IF NOT EXISTS idx_relations_event ON task_calendar_relations(event_id)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)",
    "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)",
]


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get a database connection with row access by name and foreign keys enforced."""
    # FastAPI may resolve the dependency and run the endpoint on different threads
    conn = sqlite3.connect(db_path or DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they don't exist."""
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


def to_db_timestamp(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return localize(dt).astimezone(timezone.utc).isoformat(timespec="seconds")


def from_db_timestamp(value: str | None) -> datetime | None:
    if value is None:
        return None
    return localize(datetime.fromisoformat(value))


def now_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


# =============================================================================
# CALENDAR EVENTS
# =============================================================================


def _row_to_event(row: sqlite3.Row) -> MasterEvent:
    recurrence = None
    if row["recurrence"]:
        recurrence = Recurrence.model_validate_json(row["recurrence"])
        if recurrence.end_date is not None:
            recurrence = recurrence.model_copy(
                update={"end_date": localize(recurrence.end_date)}
            )
    return MasterEvent(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row["description"],
        start=from_db_timestamp(row["start_time"]),
        end=from_db_timestamp(row["end_time"]),
        category=row["category"],
        recurrence=recurrence,
        assigned_to=row["assigned_to"],
        assigned_to_type=row["assigned_to_type"],
        department=row["department"],
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


def _event_values(event: MasterEvent) -> tuple:
    return (
        event.user_id,
        event.title,
        event.description,
        to_db_timestamp(event.start),
        to_db_timestamp(event.end),
        event.category,
        event.recurrence.model_dump_json() if event.recurrence else None,
        event.assigned_to,
        event.assigned_to_type,
        event.department,
    )


def insert_event(conn: sqlite3.Connection, event: MasterEvent) -> MasterEvent:
    """Insert a new event row and return it as stored."""
    timestamp = now_timestamp()
    conn.execute(
        """
        INSERT INTO calendar_events (
            user_id, title, description, start_time, end_time, category,
            recurrence, assigned_to, assigned_to_type, department,
            id, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        _event_values(event) + (event.id, timestamp, timestamp),
    )
    conn.commit()
    return fetch_event(conn, event.user_id, event.id)


def update_event(conn: sqlite3.Connection, event: MasterEvent) -> MasterEvent:
    """Overwrite every mutable column of an existing event."""
    conn.execute(
        """
        UPDATE calendar_events SET
            user_id = ?, title = ?, description = ?, start_time = ?, end_time = ?,
            category = ?, recurrence = ?, assigned_to = ?, assigned_to_type = ?,
            department = ?, updated_at = ?
        WHERE id = ?
        """,
        _event_values(event) + (now_timestamp(), event.id),
    )
    conn.commit()
    return fetch_event(conn, event.user_id, event.id)


def fetch_event(conn: sqlite3.Connection, user_id: str, event_id: str) -> MasterEvent | None:
    row = conn.execute(
        "SELECT * FROM calendar_events WHERE id = ? AND user_id = ?",
        (event_id, user_id),
    ).fetchone()
    return _row_to_event(row) if row else None


def fetch_events_in_range(
    conn: sqlite3.Connection, user_id: str, start: datetime, end: datetime
) -> list[MasterEvent]:
    """
    Events owned by ``user_id`` that may appear in [start, end].

    Recurring masters that begin before the window are included; the
    recurrence expander decides which occurrences land inside it.
    """
    start_ts = to_db_timestamp(start)
    end_ts = to_db_timestamp(end)
    rows = conn.execute(
        """
        SELECT * FROM calendar_events
        WHERE user_id = ?
          AND (
            (start_time <= ? AND end_time >= ?)
            OR (recurrence IS NOT NULL AND start_time <= ?)
          )
        ORDER BY start_time
        """,
        (user_id, end_ts, start_ts, end_ts),
    ).fetchall()
    return [_row_to_event(row) for row in rows]


def delete_event(conn: sqlite3.Connection, user_id: str, event_id: str) -> bool:
    """Delete an owned event (its task links cascade). Returns False if nothing matched."""
    cursor = conn.execute(
        "DELETE FROM calendar_events WHERE id = ? AND user_id = ?",
        (event_id, user_id),
    )
    conn.commit()
    return cursor.rowcount > 0


# =============================================================================
# TASKS
# =============================================================================


def _row_to_task(row: sqlite3.Row) -> Task:
    return Task(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row["description"],
        status=row["status"],
        priority=row["priority"],
        due_date=from_db_timestamp(row["due_date"]),
        assigned_to=row["assigned_to"],
        assigned_to_type=row["assigned_to_type"],
        department=row["department"],
        schedule_status=row["schedule_status"],
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


def insert_task(conn: sqlite3.Connection, task: Task) -> Task:
    timestamp = now_timestamp()
    conn.execute(
        """
        INSERT INTO tasks (
            id, user_id, title, description, status, priority, due_date,
            assigned_to, assigned_to_type, department, schedule_status,
            created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            task.id,
            task.user_id,
            task.title,
            task.description,
            task.status,
            task.priority,
            to_db_timestamp(task.due_date),
            task.assigned_to,
            task.assigned_to_type,
            task.department,
            task.schedule_status,
            timestamp,
            timestamp,
        ),
    )
    conn.commit()
    return fetch_task(conn, task.user_id, task.id)


def fetch_task(conn: sqlite3.Connection, user_id: str, task_id: str) -> Task | None:
    row = conn.execute(
        "SELECT * FROM tasks WHERE id = ? AND user_id = ?",
        (task_id, user_id),
    ).fetchone()
    return _row_to_task(row) if row else None


def update_task_schedule_status(conn: sqlite3.Connection, task_id: str, status: str) -> None:
    conn.execute(
        "UPDATE tasks SET schedule_status = ?, updated_at = ? WHERE id = ?",
        (status, now_timestamp(), task_id),
    )
    conn.commit()


# =============================================================================
# TASK <-> EVENT RELATIONS
# =============================================================================


def _row_to_relation(row: sqlite3.Row) -> TaskEventRelation:
    return TaskEventRelation(
        task_id=row["task_id"],
        event_id=row["event_id"],
        relation_type=row["relation_type"],
        created_at=from_db_timestamp(row["created_at"]),
    )


def insert_relation(
    conn: sqlite3.Connection, task_id: str, event_id: str, relation_type: str
) -> TaskEventRelation:
    """Link a task to an event. Raises sqlite3.IntegrityError if already linked."""
    conn.execute(
        """
        INSERT INTO task_calendar_relations (task_id, event_id, relation_type, created_at)
        VALUES (?, ?, ?, ?)
        """,
        (task_id, event_id, relation_type, now_timestamp()),
    )
    conn.commit()
    return fetch_relation(conn, task_id, event_id)


def fetch_relation(
    conn: sqlite3.Connection, task_id: str, event_id: str
) -> TaskEventRelation | None:
    row = conn.execute(
        "SELECT * FROM task_calendar_relations WHERE task_id = ? AND event_id = ?",
        (task_id, event_id),
    ).fetchone()
    return _row_to_relation(row) if row else None


def delete_relation(conn: sqlite3.Connection, task_id: str, event_id: str) -> bool:
    cursor = conn.execute(
        "DELETE FROM task_calendar_relations WHERE task_id = ? AND event_id = ?",
        (task_id, event_id),
    )
    conn.commit()
    return cursor.rowcount > 0


def fetch_events_for_task(conn: sqlite3.Connection, task_id: str) -> list[MasterEvent]:
    rows = conn.execute(
        """
        SELECT e.* FROM calendar_events e
        JOIN task_calendar_relations r ON r.event_id = e.id
        WHERE r.task_id = ?
        ORDER BY e.start_time
        """,
        (task_id,),
    ).fetchall()
    return [_row_to_event(row) for row in rows]


def fetch_tasks_for_event(conn: sqlite3.Connection, event_id: str) -> list[Task]:
    rows = conn.execute(
        """
        SELECT t.* FROM tasks t
        JOIN task_calendar_relations r ON r.task_id = t.id
        WHERE r.event_id = ?
        ORDER BY t.created_at
        """,
        (event_id,),
    ).fetchall()
    return [_row_to_task(row) for row in rows]
