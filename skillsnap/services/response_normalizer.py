"""Turn raw LLM analysis text into a validated :class:`AnalysisResult`.

The provider is asked for JSON, but answers still arrive wrapped in markdown
fences or cut off at the output-token limit. Parsing is attempted as-is
first, then once more after a bracket-balancing repair. Anything that still
fails, or that lacks required fields, is an error for the caller: no field is
ever filled with invented content.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, get_args

from skillsnap.schemas.analysis import AnalysisResult, Suggestion, SuggestionCategory, SuggestionPriority
from skillsnap.services.errors import (
    IncompleteResponseError,
    InvalidResponseShapeError,
    TruncatedResponseError,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "extractedJobTitle",
    "similarityPercentage",
    "matchPercent",
    "atsScore",
    "atsScoreExplanation",
    "skillsFound",
    "missingSkills",
    "suggestions",
    "phasedRoadmap",
)

_FENCE_JSON_RE = re.compile(r"```json[ \t]*\n?", re.IGNORECASE)
_FENCE_RE = re.compile(r"```\n?")
# Last closing brace/bracket, quote or digit with nothing of that kind after it.
_LAST_TERMINATOR_RE = re.compile(r'[}\]"\d][^}\]"\d]*$')

_SUGGESTION_CATEGORIES = set(get_args(SuggestionCategory))
_SUGGESTION_PRIORITIES = set(get_args(SuggestionPriority))
_SUGGESTION_SECTIONS = (
    ("resumeImprovements", "keywords"),
    ("alternativeBulletPoints", "content"),
)


def strip_code_fences(text: str) -> str:
    cleaned = _FENCE_JSON_RE.sub("", text or "")
    cleaned = _FENCE_RE.sub("", cleaned)
    return cleaned.strip()


def repair_truncated_json(text: str) -> str:
    """Trim trailing garbage and close every unbalanced array, then object.

    Counting ignores string context, so a brace inside a string value skews
    the result; such input simply fails the follow-up parse.
    """
    repaired = text.strip()
    match = _LAST_TERMINATOR_RE.search(repaired)
    if match and match.start() > 0:
        repaired = repaired[: match.start() + 1]

    missing_brackets = repaired.count("[") - repaired.count("]")
    missing_braces = repaired.count("{") - repaired.count("}")
    logger.info("llm_json_repair missing_brackets=%s missing_braces=%s", missing_brackets, missing_braces)
    return repaired + "]" * max(0, missing_brackets) + "}" * max(0, missing_braces)


def parse_llm_json(raw_text: str) -> Any:
    cleaned = strip_code_fences(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("llm_json_parse_failed error=%s length=%s", exc.msg, len(cleaned))

    try:
        parsed = json.loads(repair_truncated_json(cleaned))
    except json.JSONDecodeError as exc:
        logger.error("llm_json_repair_failed error=%s tail=%r", exc.msg, cleaned[-200:])
        raise TruncatedResponseError() from exc
    logger.info("llm_json_repaired length=%s", len(cleaned))
    return parsed


def _coerce_score(field: str, value: Any) -> float:
    if isinstance(value, bool):
        number = math.nan
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%").strip())
        except ValueError:
            number = math.nan
    else:
        number = math.nan

    if not math.isfinite(number):
        raise InvalidResponseShapeError(f"AI returned a non-numeric value for {field}. Please try again.")
    return min(100.0, max(0.0, number))


def _string_list(values: list[Any]) -> list[str]:
    items: list[str] = []
    for value in values:
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            items.append(text)
    return items


def _optional_string_list(value: Any) -> list[str]:
    return _string_list(value) if isinstance(value, list) else []


def _suggestion_from_item(item: Any, default_category: str = "general") -> Suggestion | None:
    if isinstance(item, str):
        text = item.strip()
        return Suggestion(category=default_category, title=text) if text else None
    if not isinstance(item, dict):
        return None

    title = str(item.get("title") or item.get("text") or "").strip()
    description = str(item.get("description") or "").strip()
    if not title and not description:
        return None
    category = str(item.get("category") or "").strip().lower()
    priority = str(item.get("priority") or "").strip().lower()
    return Suggestion(
        category=category if category in _SUGGESTION_CATEGORIES else default_category,
        priority=priority if priority in _SUGGESTION_PRIORITIES else None,
        title=title or description,
        description=description if title else "",
    )


def normalize_suggestions(value: Any) -> list[Suggestion]:
    """Accept either a list of suggestions or the sectioned object the prompt asks for."""
    suggestions: list[Suggestion] = []
    if isinstance(value, list):
        for item in value:
            suggestion = _suggestion_from_item(item)
            if suggestion:
                suggestions.append(suggestion)
        return suggestions

    if isinstance(value, dict):
        for key, category in _SUGGESTION_SECTIONS:
            items = value.get(key)
            if not isinstance(items, list):
                continue
            for item in items:
                suggestion = _suggestion_from_item(item, default_category=category)
                if suggestion:
                    suggestions.append(suggestion)
        summary = value.get("atsOptimizedSummary")
        if isinstance(summary, str) and summary.strip():
            suggestions.append(
                Suggestion(category="structure", title="ATS-optimized summary", description=summary.strip())
            )
    return suggestions


def validate_analysis_payload(payload: Any) -> AnalysisResult:
    if not isinstance(payload, dict):
        raise InvalidResponseShapeError("AI returned an unexpected response format. Please try again.")

    missing = [field for field in REQUIRED_FIELDS if field not in payload]
    if missing:
        logger.error("llm_response_incomplete missing=%s", missing)
        raise IncompleteResponseError(missing)

    job_title = payload["extractedJobTitle"]
    if not isinstance(job_title, str) or not job_title.strip():
        raise InvalidResponseShapeError("AI did not extract a valid job title. Please try again.")

    explanation = payload["atsScoreExplanation"]
    if not isinstance(explanation, str):
        raise InvalidResponseShapeError("AI returned an invalid ATS score explanation. Please try again.")

    skills_found = payload["skillsFound"]
    missing_skills = payload["missingSkills"]
    if not isinstance(skills_found, list) or not isinstance(missing_skills, list):
        raise InvalidResponseShapeError("AI returned invalid skills data. Please try again.")

    phased_roadmap = payload["phasedRoadmap"]
    return AnalysisResult(
        extracted_job_title=job_title.strip(),
        similarity_percentage=_coerce_score("similarityPercentage", payload["similarityPercentage"]),
        match_percent=_coerce_score("matchPercent", payload["matchPercent"]),
        ats_score=_coerce_score("atsScore", payload["atsScore"]),
        ats_score_explanation=explanation.strip(),
        skills_found=_string_list(skills_found),
        missing_skills=_string_list(missing_skills),
        suggestions=normalize_suggestions(payload["suggestions"]),
        strength_areas=_optional_string_list(payload.get("strengthAreas")),
        improvement_areas=_optional_string_list(payload.get("improvementAreas")),
        phased_roadmap=phased_roadmap if isinstance(phased_roadmap, list) else [],
    )


def normalize_analysis_response(raw_text: str) -> AnalysisResult:
    return validate_analysis_payload(parse_llm_json(raw_text))
