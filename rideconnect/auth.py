"""Authentication dependency for admin API endpoints.

The admin key is sent in the ``X-Admin-Key`` header, or as the
``adminKey`` query parameter for links opened from the dashboard.

Behavior matrix:
  ADMIN_API_KEY set + valid key     → allow
  ADMIN_API_KEY set + wrong/missing → 401 Unauthorized
  ADMIN_API_KEY empty + DEBUG=true  → allow (local dev convenience)
  ADMIN_API_KEY empty + DEBUG=false → 403 Forbidden (locked in production)
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, APIKeyQuery

from rideconnect.config import settings

log = logging.getLogger("rideconnect.auth")

_header_scheme = APIKeyHeader(name="X-Admin-Key", auto_error=False)
_query_scheme = APIKeyQuery(name="adminKey", auto_error=False)


def is_valid_admin_key(candidate: str | None) -> bool:
    key = settings.admin_api_key
    if not key or not candidate:
        return False
    return secrets.compare_digest(candidate.encode(), key.encode())


async def require_admin_key(
    header_key: str | None = Depends(_header_scheme),
    query_key: str | None = Depends(_query_scheme),
) -> None:
    """FastAPI dependency: protect admin endpoints with the shared key."""
    if not settings.admin_api_key:
        if settings.debug:
            return  # Local dev, allow without auth
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin API key not configured. Set ADMIN_API_KEY in .env.",
        )

    if not is_valid_admin_key(header_key or query_key):
        log.warning("Rejected admin request with invalid or missing key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin access required.",
        )
