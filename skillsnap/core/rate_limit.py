from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from skillsnap.core.config import settings


def _user_or_address(request: Request) -> str:
    # per user when the gateway identifies one, else per client address
    user_id = (request.headers.get("x-user-id") or "").strip()
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=_user_or_address)


def analysis_rate_limit():
    """Decorator limiting the LLM-backed endpoints; a no-op when rate limiting is disabled."""
    if settings.rate_limit_enabled:
        return limiter.limit(settings.rate_limit)

    def decorator(func):
        return func

    return decorator
