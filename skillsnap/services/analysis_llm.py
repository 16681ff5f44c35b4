from __future__ import annotations

import logging
import time
import uuid

from skillsnap.ai.errors import LLMError
from skillsnap.ai.types import AIClient
from skillsnap.analytics.db import log_ai_analysis_run
from skillsnap.schemas.analysis import AnalysisResult
from skillsnap.services.analysis_prompt import SYSTEM_PROMPT, build_analysis_prompt
from skillsnap.services.errors import AnalysisError
from skillsnap.services.response_normalizer import normalize_analysis_response

logger = logging.getLogger(__name__)


def _log_ai_run(
    *,
    run_id: str,
    model: str,
    schema_valid: bool,
    status: str,
    started: float,
    error_code: str | None = None,
    response_chars: int | None = None,
) -> None:
    try:
        log_ai_analysis_run(
            run_id=run_id,
            model=model or "unknown",
            schema_valid=schema_valid,
            status=status,
            error_code=error_code,
            latency_ms=int((time.perf_counter() - started) * 1000),
            response_chars=response_chars,
        )
    except Exception:  # pragma: no cover - analytics must not break analyses
        logger.debug("ai_run_logging_failed", exc_info=True)


def generate_analysis(client: AIClient, resume_text: str, jd_text: str) -> AnalysisResult:
    """Ask the provider for an analysis and normalize it; provider and shape errors propagate."""
    run_id = uuid.uuid4().hex
    model = getattr(client, "model", "unknown")
    started = time.perf_counter()
    logger.info(
        "analysis_llm_request run_id=%s model=%s resume_chars=%s jd_chars=%s",
        run_id,
        model,
        len(resume_text),
        len(jd_text),
    )

    try:
        raw = client.complete_json(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_analysis_prompt(resume_text, jd_text),
        )
    except LLMError as exc:
        logger.warning("analysis_llm_failed run_id=%s code=%s: %s", run_id, exc.code, exc)
        _log_ai_run(run_id=run_id, model=model, schema_valid=False, status="error", started=started, error_code=exc.code)
        raise

    try:
        result = normalize_analysis_response(raw)
    except AnalysisError as exc:
        _log_ai_run(
            run_id=run_id,
            model=model,
            schema_valid=False,
            status="invalid_schema",
            started=started,
            error_code=exc.code,
            response_chars=len(raw),
        )
        raise

    _log_ai_run(
        run_id=run_id,
        model=model,
        schema_valid=True,
        status="success",
        started=started,
        response_chars=len(raw),
    )
    logger.info(
        "analysis_llm_success run_id=%s job_title=%r missing_skills=%s roadmap_entries=%s",
        run_id,
        result.extracted_job_title,
        len(result.missing_skills),
        len(result.phased_roadmap),
    )
    return result
