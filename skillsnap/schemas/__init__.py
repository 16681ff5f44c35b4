from .analysis import AnalysisRecord, AnalysisResult, AnalyzeRequest, Suggestion
from .progress import ProgressEvent, ProgressEventCreate
from .roadmap import (
    BulkStepUpdate,
    Resource,
    ResourceType,
    Roadmap,
    RoadmapStep,
    RoadmapSummary,
    StepStatus,
    StepUpdate,
)

__all__ = [
    "AnalysisRecord",
    "AnalysisResult",
    "AnalyzeRequest",
    "Suggestion",
    "ProgressEvent",
    "ProgressEventCreate",
    "BulkStepUpdate",
    "Resource",
    "ResourceType",
    "Roadmap",
    "RoadmapStep",
    "RoadmapSummary",
    "StepStatus",
    "StepUpdate",
]
