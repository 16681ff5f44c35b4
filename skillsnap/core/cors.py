from __future__ import annotations

import logging
from typing import Any

from skillsnap.core.config import settings

logger = logging.getLogger(__name__)


def cors_middleware_options() -> dict[str, Any]:
    """Keyword arguments for ``CORSMiddleware`` built from settings."""
    origins = list(settings.cors_allowed_origins)
    regex = (settings.cors_allow_origin_regex or "").strip() or None
    allow_credentials = settings.cors_allow_credentials
    if allow_credentials and "*" in origins:
        # browsers reject credentialed responses for a wildcard origin
        logger.warning("cors_wildcard_with_credentials credentials_disabled=true")
        allow_credentials = False
    return {
        "allow_origins": origins,
        "allow_origin_regex": regex,
        "allow_credentials": allow_credentials,
        "allow_methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        "allow_headers": ["Content-Type", "X-User-Id", "X-API-Key"],
    }
