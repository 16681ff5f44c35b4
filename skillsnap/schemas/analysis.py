from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from .roadmap import Roadmap, RoadmapStep, RoadmapSummary

ExperienceLevel = Literal["intern", "entry", "mid", "senior"]
SuggestionCategory = Literal["formatting", "keywords", "content", "structure", "general"]
SuggestionPriority = Literal["high", "medium", "low"]
AnalysisSortField = Literal["created_at", "updated_at", "last_progress_update"]


class Suggestion(BaseModel):
    category: SuggestionCategory = "general"
    priority: SuggestionPriority | None = None
    title: str
    description: str = ""


class AnalysisResult(BaseModel):
    extracted_job_title: str
    similarity_percentage: float = Field(ge=0, le=100)
    match_percent: float = Field(ge=0, le=100)
    ats_score: float = Field(ge=0, le=100)
    ats_score_explanation: str
    skills_found: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    strength_areas: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)
    # Raw LLM roadmap, consumed by the roadmap converter and never persisted.
    phased_roadmap: list[Any] = Field(default_factory=list, exclude=True)


class AnalyzeRequest(BaseModel):
    resume_text: str = ""
    jd_text: str = ""
    resume_file_name: str = Field(min_length=1, max_length=255)
    jd_file_name: str = Field(min_length=1, max_length=255)
    resume_file_size: int | None = Field(default=None, ge=0)
    jd_file_size: int | None = Field(default=None, ge=0)
    experience_level: ExperienceLevel = "mid"


class AnalysisRecord(BaseModel):
    analysis_id: str
    user_id: str
    file_name: str
    job_description_file_name: str
    resume_file_size: int | None = None
    jd_file_size: int | None = None
    job_role: str
    experience_level: ExperienceLevel = "mid"
    job_description: str | None = None
    analysis: AnalysisResult
    roadmap: Roadmap
    overall_progress: RoadmapSummary = Field(default_factory=RoadmapSummary)
    created_at: datetime
    updated_at: datetime
    last_progress_update: datetime | None = None


class RoadmapWithProgress(BaseModel):
    total_estimated_duration: str
    generated_at: datetime
    steps: list[RoadmapStep] = Field(default_factory=list)
    overall_progress: RoadmapSummary


class AnalysisMetadata(BaseModel):
    file_name: str
    job_description_file_name: str
    resume_file_size: int | None = None
    jd_file_size: int | None = None
    job_role: str
    experience_level: ExperienceLevel
    job_description: str | None = None
    created_at: datetime
    updated_at: datetime
    last_progress_update: datetime | None = None


class AnalysisResponse(BaseModel):
    analysis_id: str
    analysis: AnalysisResult
    roadmap: RoadmapWithProgress
    metadata: AnalysisMetadata

    @classmethod
    def from_record(cls, record: AnalysisRecord) -> "AnalysisResponse":
        return cls(
            analysis_id=record.analysis_id,
            analysis=record.analysis,
            roadmap=RoadmapWithProgress(
                total_estimated_duration=record.roadmap.total_estimated_duration,
                generated_at=record.roadmap.generated_at,
                steps=record.roadmap.steps,
                overall_progress=record.overall_progress,
            ),
            metadata=AnalysisMetadata(
                file_name=record.file_name,
                job_description_file_name=record.job_description_file_name,
                resume_file_size=record.resume_file_size,
                jd_file_size=record.jd_file_size,
                job_role=record.job_role,
                experience_level=record.experience_level,
                job_description=record.job_description,
                created_at=record.created_at,
                updated_at=record.updated_at,
                last_progress_update=record.last_progress_update,
            ),
        )


class AnalysisListItem(BaseModel):
    analysis_id: str
    file_name: str
    job_role: str
    experience_level: ExperienceLevel
    match_percent: float
    ats_score: float
    overall_progress: RoadmapSummary
    created_at: datetime
    last_progress_update: datetime | None = None

    @classmethod
    def from_record(cls, record: AnalysisRecord) -> "AnalysisListItem":
        return cls(
            analysis_id=record.analysis_id,
            file_name=record.file_name,
            job_role=record.job_role,
            experience_level=record.experience_level,
            match_percent=record.analysis.match_percent,
            ats_score=record.analysis.ats_score,
            overall_progress=record.overall_progress,
            created_at=record.created_at,
            last_progress_update=record.last_progress_update,
        )


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class AnalysisListResponse(BaseModel):
    analyses: list[AnalysisListItem] = Field(default_factory=list)
    total: int
    pagination: Pagination | None = None


class DeleteResponse(BaseModel):
    deleted: bool
