from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .roadmap import ResourceType


class ProgressEventCreate(BaseModel):
    analysis_id: str = Field(min_length=1, max_length=64)
    step_id: str = Field(min_length=1, max_length=64)
    resource_index: int = Field(ge=0)
    skill: str = Field(min_length=1, max_length=200)
    step_title: str = Field(min_length=1, max_length=500)
    step_number: int = Field(ge=1)
    resource_title: str = Field(min_length=1, max_length=500)
    resource_url: str = Field(min_length=1, max_length=2048)
    # Free-form label from the client; normalized to ResourceType before storage.
    resource_type: str = Field(min_length=1, max_length=40)
    resource_provider: str | None = Field(default=None, max_length=200)


class ProgressEvent(BaseModel):
    progress_id: str
    analysis_id: str
    step_id: str
    resource_index: int
    skill: str
    step_title: str
    step_number: int
    resource_title: str
    resource_url: str
    resource_type: ResourceType
    resource_provider: str | None = None
    clicked_at: datetime


class ProgressLogResponse(BaseModel):
    progress_id: str


class LatestProgressResponse(BaseModel):
    progress: ProgressEvent | None = None


class ProgressHistoryResponse(BaseModel):
    events: list[ProgressEvent] = Field(default_factory=list)
