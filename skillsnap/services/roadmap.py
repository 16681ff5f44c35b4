from __future__ import annotations

import logging
import math
import re
import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

from skillsnap.schemas.roadmap import Resource, ResourceType, RoadmapStep, RoadmapSummary, StepUpdate
from skillsnap.services.errors import EmptyRoadmapError, StepNotFoundError

logger = logging.getLogger(__name__)

UNKNOWN_SKILL = "Unknown Skill"
DEFAULT_STEP_DURATION = "1-2 weeks"
WEEKS_PER_STEP = 2

_SKILL_SEPARATOR_RE = re.compile(r"[,/&+]+|\band\b", re.IGNORECASE)

_RESOURCE_TYPE_SYNONYMS: dict[str, ResourceType] = {
    "doc": "documentation",
    "docs": "documentation",
    "documentation": "documentation",
    "article": "documentation",
    "youtube": "video",
    "video": "video",
    "course": "course",
    "class": "course",
    "tutorial": "course",
    "project": "project",
    "exercise": "project",
    "book": "book",
}

# learningResources category -> type implied when an item carries none
_RESOURCE_CATEGORIES: tuple[tuple[str, ResourceType], ...] = (
    ("courses", "course"),
    ("youtube", "video"),
    ("documentation", "documentation"),
    ("projects", "project"),
)


@dataclass
class ConvertedRoadmap:
    steps: list[RoadmapStep]
    total_estimated_duration: str


@dataclass
class BulkApplyResult:
    updated_steps: list[RoadmapStep]
    summary: RoadmapSummary


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def split_skill_label(label: Any) -> list[str]:
    """Split a composite label such as "HTML & CSS" into atomic skill names."""
    if label is None:
        return []
    skills: list[str] = []
    for part in _SKILL_SEPARATOR_RE.split(str(label)):
        name = part.strip()
        if name and name not in skills:
            skills.append(name)
    return skills


def _lookup_resource_type(raw: Any) -> ResourceType | None:
    if raw is None:
        return None
    return _RESOURCE_TYPE_SYNONYMS.get(str(raw).strip().lower())


def normalize_resource_type(raw: Any, suggested: Any = None) -> ResourceType:
    return _lookup_resource_type(raw) or _lookup_resource_type(suggested) or "documentation"


def _resource_from_item(item: Any, suggested: ResourceType) -> Resource | None:
    if item is None:
        return None
    if isinstance(item, dict):
        return Resource(
            type=normalize_resource_type(item.get("type"), suggested),
            title=str(item.get("title") or item.get("name") or ""),
            url=str(item.get("url") or item.get("link") or ""),
            provider=str(item.get("provider") or item.get("channel") or "Unknown"),
        )
    # A bare title cannot be opened, but it is still worth showing.
    return Resource(type=normalize_resource_type(None, suggested), title=str(item), url="", provider="Unknown")


def extract_resources(learning_resources: Any) -> list[Resource]:
    if not isinstance(learning_resources, dict):
        return []
    resources: list[Resource] = []
    for category, suggested in _RESOURCE_CATEGORIES:
        items = learning_resources.get(category)
        if isinstance(items, dict):
            items = [items]
        if not isinstance(items, list):
            continue
        for item in items:
            resource = _resource_from_item(item, suggested)
            if resource is not None:
                resources.append(resource)
    return resources


def _step_from_phase(phase: dict[str, Any], skills: list[str], step_number: int, phase_index: int) -> RoadmapStep:
    phase_name = str(phase.get("phase") or phase.get("name") or f"Phase {phase_index}").strip()
    description = phase.get("goal") or phase.get("description") or f"Complete {phase_name} for {', '.join(skills)}"
    return RoadmapStep(
        step_id=uuid.uuid4().hex,
        step_number=step_number,
        title=f"{' & '.join(skills)}: {phase_name}",
        description=str(description),
        estimated_duration=str(phase.get("duration") or DEFAULT_STEP_DURATION),
        skills=list(skills),
        resources=extract_resources(phase.get("learningResources")),
        status="not_started",
        progress_percent=0,
    )


def estimate_total_duration(step_count: int) -> str:
    """Coarse estimate at two weeks per step, expressed as a month range."""
    months = math.ceil(step_count * WEEKS_PER_STEP / 4)
    return f"{months}-{months + 1} months"


def convert_phased_roadmap(phased_roadmap: Sequence[Any] | None) -> ConvertedRoadmap:
    """Flatten skill -> phases into one ordered list of steps, numbered 1..K across all skills."""
    if not phased_roadmap or not isinstance(phased_roadmap, (list, tuple)):
        raise EmptyRoadmapError()

    steps: list[RoadmapStep] = []
    for entry in phased_roadmap:
        if not isinstance(entry, dict):
            continue
        skills = split_skill_label(entry.get("skill") or entry.get("name")) or [UNKNOWN_SKILL]
        phases = entry.get("phases")
        if not isinstance(phases, list):
            logger.warning("roadmap_entry_without_phases skill=%s", skills)
            continue
        for phase_index, phase in enumerate(phases, start=1):
            if not isinstance(phase, dict):
                continue
            steps.append(_step_from_phase(phase, skills, len(steps) + 1, phase_index))

    if not steps:
        raise EmptyRoadmapError(
            "The AI analysis did not contain any learning phases. Please try analyzing your resume again."
        )

    logger.info("roadmap_converted entries=%s steps=%s", len(phased_roadmap), len(steps))
    return ConvertedRoadmap(steps=steps, total_estimated_duration=estimate_total_duration(len(steps)))


def compute_summary(steps: Iterable[RoadmapStep]) -> RoadmapSummary:
    counts = Counter(step.status for step in steps)
    completed = counts["completed"]
    in_progress = counts["in_progress"]
    not_started = counts["not_started"]
    total = completed + in_progress + not_started
    # round half up
    percent = (200 * completed + total) // (2 * total) if total else 0
    return RoadmapSummary(
        steps_completed=completed,
        steps_in_progress=in_progress,
        steps_not_started=not_started,
        total_steps=total,
        percent_complete=percent,
    )


def _apply_update(step: RoadmapStep, update: StepUpdate, now: datetime) -> None:
    completion_forced = False
    if update.status is not None:
        previous = step.status
        step.status = update.status
        if update.status == "in_progress" and previous == "not_started" and step.started_at is None:
            step.started_at = now
        if update.status == "completed" and previous != "completed":
            if step.completed_at is None:
                step.completed_at = now
            step.progress_percent = 100
            completion_forced = True

    if update.progress_percent is not None and not completion_forced:
        step.progress_percent = update.progress_percent

    if update.notes is not None:
        step.notes = update.notes


def find_step(steps: Sequence[RoadmapStep], step_id: str) -> RoadmapStep | None:
    for step in steps:
        if step.step_id == step_id:
            return step
    return None


def apply_step_update(steps: Sequence[RoadmapStep], update: StepUpdate, now: datetime | None = None) -> RoadmapStep:
    step = find_step(steps, update.step_id)
    if step is None:
        raise StepNotFoundError(update.step_id)
    _apply_update(step, update, now or _utc_now())
    return step


def bulk_apply(
    steps: Sequence[RoadmapStep],
    updates: Iterable[StepUpdate],
    now: datetime | None = None,
) -> BulkApplyResult:
    """Apply every update whose step exists; unknown step ids are skipped, not fatal."""
    now = now or _utc_now()
    by_id = {step.step_id: step for step in steps}
    updated: list[RoadmapStep] = []
    seen: set[str] = set()
    for update in updates:
        step = by_id.get(update.step_id)
        if step is None:
            logger.info("roadmap_bulk_update_skipped step_id=%s", update.step_id)
            continue
        _apply_update(step, update, now)
        if step.step_id not in seen:
            seen.add(step.step_id)
            updated.append(step)
    return BulkApplyResult(updated_steps=updated, summary=compute_summary(steps))
