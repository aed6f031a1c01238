"""SQLite request logging for API."""

import sqlite3
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator

from fastapi import HTTPException, Request

from api.models.responses import ErrorCodes
from core.config import DB_PATH


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    user_id: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    events_returned: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def log_request(log: RequestLog) -> None:
    """Write request log to SQLite database."""
    conn = sqlite3.connect(DB_PATH)
    try:
        cursor = conn.cursor()

        # Insert main request record
        cursor.execute(
            """
            INSERT INTO api_requests (
                request_id, timestamp, endpoint, method, client_ip, user_id,
                status_code, error_code, error_message, processing_time_ms,
                events_returned
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.method,
                log.client_ip,
                log.user_id,
                log.status_code,
                log.error_code,
                log.error_message,
                log.processing_time_ms,
                log.events_returned,
            ),
        )

        # Insert detail records
        for detail_type, message in log.details:
            cursor.execute(
                """
                INSERT INTO api_request_details (request_id, detail_type, message)
                VALUES (?, ?, ?)
            """,
                (log.request_id, detail_type, message),
            )

        conn.commit()
    finally:
        conn.close()


@contextmanager
def logged_request(request: Request, user_id: str | None = None) -> Iterator[RequestLog]:
    """
    Record one request in api_requests, whatever its outcome.

    The handler fills in ``events_returned`` on the yielded log; HTTP errors
    raised inside the block are captured with their code and details.
    """
    start_time = time.time()
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        user_id=user_id,
    )

    try:
        yield request_log
        request_log.status_code = request_log.status_code or 200

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("code")
            request_log.error_message = e.detail.get("error")
            for detail in e.detail.get("details", []):
                request_log.details.append(("validation_error", detail))
        else:
            request_log.error_message = str(e.detail)
        raise

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        try:
            log_request(request_log)
        except sqlite3.Error:
            # Don't fail the request if logging fails
            pass


def log_rejected_request(
    request: Request,
    status_code: int,
    error_code: str,
    error_message: str,
    details: list[str],
) -> None:
    """Record a request that was rejected before reaching an endpoint."""
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        user_id=request.headers.get("X-User-Id"),
        status_code=status_code,
        error_code=error_code,
        error_message=error_message,
        details=[("validation_error", detail) for detail in details],
    )
    try:
        log_request(request_log)
    except sqlite3.Error:
        # Don't fail the request if logging fails
        pass
