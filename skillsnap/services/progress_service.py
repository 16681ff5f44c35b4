from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from skillsnap.schemas.progress import (
    LatestProgressResponse,
    ProgressEvent,
    ProgressEventCreate,
    ProgressHistoryResponse,
    ProgressLogResponse,
)
from skillsnap.services.analysis_service import get_analysis
from skillsnap.services.roadmap import normalize_resource_type
from skillsnap.storage.analysis_store import AnalysisStore
from skillsnap.storage.progress_store import ProgressStore

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


def log_progress_event(
    progress_store: ProgressStore,
    store: AnalysisStore,
    user_id: str,
    payload: ProgressEventCreate,
) -> ProgressLogResponse:
    get_analysis(store, user_id, payload.analysis_id)

    event = ProgressEvent(
        progress_id=uuid.uuid4().hex,
        analysis_id=payload.analysis_id,
        step_id=payload.step_id,
        resource_index=payload.resource_index,
        skill=payload.skill.strip(),
        step_title=payload.step_title.strip(),
        step_number=payload.step_number,
        resource_title=payload.resource_title.strip(),
        resource_url=payload.resource_url.strip(),
        resource_type=normalize_resource_type(payload.resource_type),
        resource_provider=payload.resource_provider,
        clicked_at=datetime.now(timezone.utc),
    )
    progress_store.add(user_id, event)
    logger.info(
        "progress_logged progress_id=%s analysis_id=%s step_id=%s resource_type=%s",
        event.progress_id,
        event.analysis_id,
        event.step_id,
        event.resource_type,
    )
    return ProgressLogResponse(progress_id=event.progress_id)


def latest_progress_event(progress_store: ProgressStore, user_id: str) -> LatestProgressResponse:
    return LatestProgressResponse(progress=progress_store.latest_for_user(user_id))


def progress_history(progress_store: ProgressStore, user_id: str, limit: int = 10) -> ProgressHistoryResponse:
    limit = max(1, min(int(limit), MAX_HISTORY))
    return ProgressHistoryResponse(events=progress_store.history_for_user(user_id, limit=limit))


def progress_for_analysis(
    progress_store: ProgressStore,
    store: AnalysisStore,
    user_id: str,
    analysis_id: str,
) -> ProgressHistoryResponse:
    get_analysis(store, user_id, analysis_id)
    return ProgressHistoryResponse(events=progress_store.for_analysis(user_id, analysis_id))
