"""Translation of service-layer errors into HTTP errors."""

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator

from fastapi import HTTPException, status

from api.models.responses import ErrorCodes
from core.errors import EventValidationError, NotFoundError


def invalid_request(error: str, details: list[str] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": error,
            "code": ErrorCodes.INVALID_REQUEST,
            "details": details or [],
        },
    )


@contextmanager
def service_errors(action: str) -> Iterator[None]:
    """Map NotFoundError to 404 and EventValidationError to 422."""
    try:
        yield
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": str(e),
                "code": ErrorCodes.NOT_FOUND,
                "details": [],
            },
        )
    except EventValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": f"{action} failed validation",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": e.errors,
            },
        )


def parse_date_param(value: str | None, name: str) -> date | None:
    """Parse a YYYY-MM-DD query parameter."""
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise invalid_request(f"Invalid {name} format", ["Expected format: YYYY-MM-DD"])


def parse_datetime_param(value: str | None, name: str) -> datetime | None:
    """Parse an ISO 8601 date or datetime query parameter."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise invalid_request(f"Invalid {name} format", ["Expected ISO 8601 date or datetime"])
