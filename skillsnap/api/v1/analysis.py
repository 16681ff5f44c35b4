from fastapi import APIRouter, Depends, Query, Request, status

from skillsnap.ai.errors import LLMError
from skillsnap.ai.types import AIClient
from skillsnap.api.deps import get_ai_client, get_analysis_store, get_progress_store, raise_http_error
from skillsnap.core.rate_limit import analysis_rate_limit
from skillsnap.core.security import current_user_id
from skillsnap.schemas.analysis import (
    AnalysisListResponse,
    AnalysisResponse,
    AnalysisSortField,
    AnalyzeRequest,
    DeleteResponse,
)
from skillsnap.services.analysis_service import delete_analysis, get_analysis, list_analyses, run_resume_analysis
from skillsnap.services.errors import AnalysisError
from skillsnap.storage import AnalysisStore, ProgressStore

router = APIRouter()


@router.post("/resume/analyze", response_model=AnalysisResponse, status_code=status.HTTP_201_CREATED)
@analysis_rate_limit()
def analyze_resume(
    request: Request,
    payload: AnalyzeRequest,
    user_id: str = Depends(current_user_id),
    client: AIClient | None = Depends(get_ai_client),
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    try:
        record = run_resume_analysis(client, store, user_id, payload)
    except (AnalysisError, LLMError) as exc:
        raise_http_error(exc)
    return AnalysisResponse.from_record(record)


@router.get("/resume-analysis", response_model=AnalysisListResponse)
def list_resume_analyses(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    all_items: bool = Query(default=False, alias="all"),
    job_role: str | None = Query(default=None, max_length=200),
    sort_by: AnalysisSortField = Query(default="created_at"),
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
):
    return list_analyses(
        store,
        user_id,
        page=page,
        limit=limit,
        job_role=job_role,
        sort_by=sort_by,
        all_items=all_items,
    )


@router.get("/resume-analysis/{analysis_id}", response_model=AnalysisResponse)
def get_resume_analysis(
    analysis_id: str,
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
):
    try:
        record = get_analysis(store, user_id, analysis_id)
    except AnalysisError as exc:
        raise_http_error(exc)
    return AnalysisResponse.from_record(record)


@router.delete("/resume-analysis/{analysis_id}", response_model=DeleteResponse)
def delete_resume_analysis(
    analysis_id: str,
    user_id: str = Depends(current_user_id),
    store: AnalysisStore = Depends(get_analysis_store),
    progress_store: ProgressStore = Depends(get_progress_store),
):
    try:
        delete_analysis(store, progress_store, user_id, analysis_id)
    except AnalysisError as exc:
        raise_http_error(exc)
    return DeleteResponse(deleted=True)
