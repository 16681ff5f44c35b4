from fastapi import APIRouter, Depends, Query, status

from skillsnap.api.deps import get_analysis_store, get_progress_store, raise_http_error
from skillsnap.core.security import current_user_id
from skillsnap.schemas.progress import (
    LatestProgressResponse,
    ProgressEventCreate,
    ProgressHistoryResponse,
    ProgressLogResponse,
)
from skillsnap.services.errors import AnalysisError
from skillsnap.services.progress_service import (
    MAX_HISTORY,
    latest_progress_event,
    log_progress_event,
    progress_for_analysis,
    progress_history,
)
from skillsnap.storage import AnalysisStore, ProgressStore

router = APIRouter()


@router.post("/progress", response_model=ProgressLogResponse, status_code=status.HTTP_201_CREATED)
def log_progress(
    payload: ProgressEventCreate,
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
    progress_store: ProgressStore = Depends(get_progress_store),
):
    try:
        return log_progress_event(progress_store, store, user_id, payload)
    except AnalysisError as exc:
        raise_http_error(exc)


@router.get("/progress/latest", response_model=LatestProgressResponse)
def latest(
    user_id: str = Depends(current_user_id),
    progress_store: ProgressStore = Depends(get_progress_store),
):
    return latest_progress_event(progress_store, user_id)


@router.get("/progress/history", response_model=ProgressHistoryResponse)
def history(
    limit: int = Query(default=10, ge=1, le=MAX_HISTORY),
    user_id: str = Depends(current_user_id),
    progress_store: ProgressStore = Depends(get_progress_store),
):
    return progress_history(progress_store, user_id, limit=limit)


@router.get("/progress/analysis/{analysis_id}", response_model=ProgressHistoryResponse)
def analysis_progress(
    analysis_id: str,
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
    progress_store: ProgressStore = Depends(get_progress_store),
):
    try:
        return progress_for_analysis(progress_store, store, user_id, analysis_id)
    except AnalysisError as exc:
        raise_http_error(exc)
