from fastapi import APIRouter, Depends

from skillsnap.api.deps import get_analysis_store, raise_http_error
from skillsnap.core.security import current_user_id
from skillsnap.schemas.roadmap import (
    BulkProgressResponse,
    BulkStepUpdate,
    RoadmapResponse,
    StepProgressResponse,
    StepUpdate,
)
from skillsnap.services.analysis_service import bulk_update_progress, get_roadmap, update_step_progress
from skillsnap.services.errors import AnalysisError
from skillsnap.storage import AnalysisStore

router = APIRouter()


@router.get("/roadmap/{analysis_id}", response_model=RoadmapResponse)
def roadmap(
    analysis_id: str,
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
):
    try:
        return get_roadmap(store, user_id, analysis_id)
    except AnalysisError as exc:
        raise_http_error(exc)


@router.patch("/roadmap/progress/{analysis_id}", response_model=StepProgressResponse)
def update_progress(
    analysis_id: str,
    payload: StepUpdate,
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
):
    try:
        return update_step_progress(store, user_id, analysis_id, payload)
    except AnalysisError as exc:
        raise_http_error(exc)


@router.patch("/roadmap/progress/{analysis_id}/bulk", response_model=BulkProgressResponse)
def update_progress_bulk(
    analysis_id: str,
    payload: BulkStepUpdate,
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
):
    try:
        return bulk_update_progress(store, user_id, analysis_id, payload.updates)
    except AnalysisError as exc:
        raise_http_error(exc)
