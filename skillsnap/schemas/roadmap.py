from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ResourceType = Literal["course", "documentation", "project", "tutorial", "book", "video", "article"]
StepStatus = Literal["not_started", "in_progress", "completed"]


class Resource(BaseModel):
    type: ResourceType
    title: str = ""
    url: str = ""
    provider: str = "Unknown"


class RoadmapStep(BaseModel):
    step_id: str
    step_number: int = Field(ge=1)
    title: str
    description: str
    estimated_duration: str
    skills: list[str] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    status: StepStatus = "not_started"
    progress_percent: int = Field(default=0, ge=0, le=100)
    notes: str = ""
    started_at: datetime | None = None
    completed_at: datetime | None = None


class RoadmapSummary(BaseModel):
    steps_completed: int = 0
    steps_in_progress: int = 0
    steps_not_started: int = 0
    total_steps: int = 0
    percent_complete: int = Field(default=0, ge=0, le=100)


class Roadmap(BaseModel):
    generated_at: datetime
    total_estimated_duration: str
    steps: list[RoadmapStep] = Field(default_factory=list)


class StepUpdate(BaseModel):
    step_id: str = Field(min_length=1, max_length=64)
    status: StepStatus | None = None
    progress_percent: int | None = Field(default=None, ge=0, le=100)
    notes: str | None = Field(default=None, max_length=5000)


class BulkStepUpdate(BaseModel):
    updates: list[StepUpdate] = Field(min_length=1, max_length=500)


class StepView(BaseModel):
    step_id: str
    step_number: int
    title: str
    status: StepStatus
    progress_percent: int
    notes: str = ""
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_step(cls, step: RoadmapStep) -> "StepView":
        return cls(
            step_id=step.step_id,
            step_number=step.step_number,
            title=step.title,
            status=step.status,
            progress_percent=step.progress_percent,
            notes=step.notes,
            started_at=step.started_at,
            completed_at=step.completed_at,
        )


class StepProgressResponse(BaseModel):
    step: StepView
    overall_progress: RoadmapSummary


class BulkProgressResponse(BaseModel):
    updated_steps: list[StepView] = Field(default_factory=list)
    overall_progress: RoadmapSummary


class RoadmapMetadata(BaseModel):
    job_role: str
    experience_level: str


class RoadmapResponse(BaseModel):
    roadmap: Roadmap
    overall_progress: RoadmapSummary
    metadata: RoadmapMetadata
