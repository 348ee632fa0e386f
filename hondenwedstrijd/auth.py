"""Shared-secret guard for the endpoints that change state.

Refresh control and preference updates sit behind ``X-API-Key``; reading
the calendar is always public.
"""

from __future__ import annotations

import secrets

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from hondenwedstrijd.config import settings

API_KEY_HEADER = "X-API-Key"

_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def require_api_key(key: str | None = Security(_header)) -> None:
    """Reject the request unless it carries the configured key.

    With no API_KEY configured every caller is let through, which is how
    the app runs on a single-user device.
    """
    expected = settings.api_key
    if not expected:
        return
    if key is None or not secrets.compare_digest(key.encode(), expected.encode()):
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": API_KEY_HEADER},
        )
