from .analysis_store import AnalysisStore
from .progress_store import ProgressStore

__all__ = ["AnalysisStore", "ProgressStore"]
