"""
Shared API dependencies.

Session handling and identity live outside this service; the
only check done here is an optional shared key so the engine is
never exposed by accident.
"""

import secrets

from fastapi import Header, HTTPException

from garment_pool.config import get_settings


def require_authorized(x_api_key: str | None = Header(default=None)) -> None:
    """Reject the call unless it carries the configured API key."""
    expected = get_settings().API_KEY
    if not expected:
        return
    if x_api_key is None or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=401, detail="Not authorized")
