from __future__ import annotations

from fastapi import HTTPException, Request

from skillsnap.ai.errors import LLMError
from skillsnap.ai.types import AIClient
from skillsnap.services.errors import AnalysisError
from skillsnap.storage import AnalysisStore, ProgressStore


def get_analysis_store(request: Request) -> AnalysisStore:
    return request.app.state.analysis_store


def get_progress_store(request: Request) -> ProgressStore:
    return request.app.state.progress_store


def get_ai_client(request: Request) -> AIClient | None:
    # None when no provider is configured
    return getattr(request.app.state, "ai_client", None)


def raise_http_error(exc: Exception) -> None:
    if isinstance(exc, AnalysisError):
        raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc
    if isinstance(exc, LLMError):
        raise HTTPException(
            status_code=exc.status_code,
            detail={"code": exc.code, "category": exc.category, "message": str(exc)},
        ) from exc
    raise exc
