from __future__ import annotations

import logging
import math
import re
import uuid
from datetime import datetime, timezone

from skillsnap.ai.errors import LLMUnavailableError
from skillsnap.ai.types import AIClient
from skillsnap.core.config import settings
from skillsnap.schemas.analysis import (
    AnalysisListItem,
    AnalysisListResponse,
    AnalysisRecord,
    AnalyzeRequest,
    Pagination,
)
from skillsnap.schemas.roadmap import (
    BulkProgressResponse,
    Roadmap,
    RoadmapMetadata,
    RoadmapResponse,
    StepProgressResponse,
    StepUpdate,
    StepView,
)
from skillsnap.services.analysis_llm import generate_analysis
from skillsnap.services.errors import AnalysisNotFoundError, InputValidationError
from skillsnap.services.roadmap import apply_step_update, bulk_apply, compute_summary, convert_phased_roadmap
from skillsnap.storage.analysis_store import AnalysisStore
from skillsnap.storage.progress_store import ProgressStore

logger = logging.getLogger(__name__)

_ANALYSIS_ID_RE = re.compile(r"^[0-9a-f]{32}$")
_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_PHONE_RE = re.compile(r"\+?\d{10,}")
_SECTION_RE = re.compile(r"experience|education|skills|projects", re.IGNORECASE)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_document_text(text: str | None, label: str) -> str:
    trimmed = (text or "").strip()
    if not trimmed:
        raise InputValidationError(f"{label} text is empty. Please ensure the file was parsed correctly.")
    if len(trimmed) < settings.min_document_chars:
        raise InputValidationError(
            f"{label} text is too short (minimum {settings.min_document_chars} characters). "
            "Please ensure the file contains actual content."
        )
    if len(trimmed) > settings.max_document_chars:
        raise InputValidationError(
            f"{label} text is too long (maximum {settings.max_document_chars:,} characters). "
            "Please use a shorter document."
        )
    if not (_EMAIL_RE.search(trimmed) or _PHONE_RE.search(trimmed) or _SECTION_RE.search(trimmed)):
        logger.warning("document_missing_sections label=%s chars=%s", label, len(trimmed))
    return trimmed


def ensure_analysis_id(analysis_id: str) -> None:
    if not _ANALYSIS_ID_RE.match(analysis_id or ""):
        raise InputValidationError("Invalid analysis ID")


def run_resume_analysis(
    client: AIClient | None,
    store: AnalysisStore,
    user_id: str,
    payload: AnalyzeRequest,
) -> AnalysisRecord:
    resume_text = validate_document_text(payload.resume_text, "Resume")
    jd_text = validate_document_text(payload.jd_text, "Job description")
    if client is None:
        raise LLMUnavailableError(
            "AI service is not configured. Please try again later.", code="llm_not_configured"
        )
    logger.info(
        "resume_analysis_started user_id=%s resume_file=%s jd_file=%s resume_chars=%s jd_chars=%s",
        user_id,
        payload.resume_file_name,
        payload.jd_file_name,
        len(resume_text),
        len(jd_text),
    )

    result = generate_analysis(client, resume_text, jd_text)
    converted = convert_phased_roadmap(result.phased_roadmap)

    now = _utc_now()
    record = AnalysisRecord(
        analysis_id=uuid.uuid4().hex,
        user_id=user_id,
        file_name=payload.resume_file_name,
        job_description_file_name=payload.jd_file_name,
        resume_file_size=payload.resume_file_size,
        jd_file_size=payload.jd_file_size,
        job_role=result.extracted_job_title,
        experience_level=payload.experience_level,
        job_description=jd_text[: settings.job_description_store_chars],
        analysis=result,
        roadmap=Roadmap(
            generated_at=now,
            total_estimated_duration=converted.total_estimated_duration,
            steps=converted.steps,
        ),
        overall_progress=compute_summary(converted.steps),
        created_at=now,
        updated_at=now,
    )
    store.create(record)
    logger.info(
        "resume_analysis_saved analysis_id=%s user_id=%s steps=%s",
        record.analysis_id,
        user_id,
        len(converted.steps),
    )
    return record


def get_analysis(store: AnalysisStore, user_id: str, analysis_id: str) -> AnalysisRecord:
    ensure_analysis_id(analysis_id)
    record = store.get(user_id, analysis_id)
    if record is None:
        raise AnalysisNotFoundError(analysis_id)
    return record


def list_analyses(
    store: AnalysisStore,
    user_id: str,
    *,
    page: int = 1,
    limit: int = 10,
    job_role: str | None = None,
    sort_by: str = "created_at",
    all_items: bool = False,
) -> AnalysisListResponse:
    job_role = (job_role or "").strip() or None
    if all_items:
        records = store.list_for_user(user_id, job_role=job_role, sort_by=sort_by)
        return AnalysisListResponse(
            analyses=[AnalysisListItem.from_record(record) for record in records],
            total=len(records),
        )

    total = store.count_for_user(user_id, job_role=job_role)
    records = store.list_for_user(
        user_id,
        job_role=job_role,
        sort_by=sort_by,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return AnalysisListResponse(
        analyses=[AnalysisListItem.from_record(record) for record in records],
        total=total,
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            total_items=total,
            items_per_page=limit,
        ),
    )


def delete_analysis(
    store: AnalysisStore,
    progress_store: ProgressStore,
    user_id: str,
    analysis_id: str,
) -> None:
    ensure_analysis_id(analysis_id)
    if not store.delete(user_id, analysis_id):
        raise AnalysisNotFoundError(analysis_id)
    removed = progress_store.delete_for_analysis(user_id, analysis_id)
    logger.info("analysis_deleted analysis_id=%s user_id=%s progress_events=%s", analysis_id, user_id, removed)


def get_roadmap(store: AnalysisStore, user_id: str, analysis_id: str) -> RoadmapResponse:
    record = get_analysis(store, user_id, analysis_id)
    return RoadmapResponse(
        roadmap=record.roadmap,
        overall_progress=record.overall_progress,
        metadata=RoadmapMetadata(job_role=record.job_role, experience_level=record.experience_level),
    )


def _refresh_progress(record: AnalysisRecord, now: datetime) -> None:
    record.overall_progress = compute_summary(record.roadmap.steps)
    record.last_progress_update = now
    record.updated_at = now


def update_step_progress(
    store: AnalysisStore,
    user_id: str,
    analysis_id: str,
    update: StepUpdate,
) -> StepProgressResponse:
    record = get_analysis(store, user_id, analysis_id)
    now = _utc_now()
    step = apply_step_update(record.roadmap.steps, update, now=now)
    _refresh_progress(record, now)
    store.save(record)
    logger.info(
        "roadmap_step_updated analysis_id=%s step_id=%s status=%s percent_complete=%s",
        analysis_id,
        step.step_id,
        step.status,
        record.overall_progress.percent_complete,
    )
    return StepProgressResponse(step=StepView.from_step(step), overall_progress=record.overall_progress)


def bulk_update_progress(
    store: AnalysisStore,
    user_id: str,
    analysis_id: str,
    updates: list[StepUpdate],
) -> BulkProgressResponse:
    record = get_analysis(store, user_id, analysis_id)
    now = _utc_now()
    result = bulk_apply(record.roadmap.steps, updates, now=now)
    _refresh_progress(record, now)
    store.save(record)
    logger.info(
        "roadmap_bulk_updated analysis_id=%s requested=%s applied=%s",
        analysis_id,
        len(updates),
        len(result.updated_steps),
    )
    return BulkProgressResponse(
        updated_steps=[StepView.from_step(step) for step in result.updated_steps],
        overall_progress=result.summary,
    )
