from __future__ import annotations

import re

from fastapi import Header, HTTPException, status

from skillsnap.core.config import settings

_USER_ID_RE = re.compile(r"^[A-Za-z0-9_.:@\-]{1,128}$")


def check_api_key(x_api_key: str | None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please provide a valid API key.",
        )


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    check_api_key(x_api_key)


def current_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    """Resolve the caller from the identity header set by the authenticating gateway."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No user identity provided. Authorization denied.",
        )
    if not _USER_ID_RE.match(user_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity.",
        )
    return user_id
