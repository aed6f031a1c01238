"""FastAPI dependencies for authentication and shared resources."""

import secrets
import sqlite3
from typing import Iterator

from fastapi import Header, HTTPException, status

from core.config import CRM_API_KEY
from core.database import get_connection


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    if not CRM_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": "INTERNAL_ERROR",
                "details": [],
            },
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(x_api_key, CRM_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": "UNAUTHORIZED",
                "details": [],
            },
        )

    return x_api_key


async def current_user_id(x_user_id: str = Header(..., alias="X-User-Id")) -> str:
    """
    User id of the signed-in user, forwarded by the front end's session layer.

    Every event and task query is scoped to this id.
    """
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Missing user id",
                "code": "UNAUTHORIZED",
                "details": [],
            },
        )
    return user_id


def get_db() -> Iterator[sqlite3.Connection]:
    """One connection per request, closed when the response is sent."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()
