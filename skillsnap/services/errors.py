from __future__ import annotations


class AnalysisError(RuntimeError):
    """Base for failures surfaced to the caller; none of these are retried internally."""

    code = "analysis_failed"
    category = "malformed_response"
    status_code = 503

    def __init__(self, message: str):
        super().__init__(message)

    def to_detail(self) -> dict:
        return {"code": self.code, "category": self.category, "message": str(self)}


class TruncatedResponseError(AnalysisError):
    code = "truncated_response"

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "AI response was truncated or invalid. The analysis may be too complex. "
            "Please try with a shorter resume or job description."
        )


class IncompleteResponseError(AnalysisError):
    code = "incomplete_response"

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"AI response incomplete. Missing: {', '.join(self.missing_fields)}. Please try again.")

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["missing_fields"] = self.missing_fields
        return detail


class InvalidResponseShapeError(AnalysisError):
    code = "invalid_response_shape"


class EmptyRoadmapError(AnalysisError):
    code = "empty_roadmap"

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "No learning roadmap was generated from the AI analysis. Please try analyzing your resume again."
        )


class InputValidationError(AnalysisError):
    code = "invalid_input"
    category = "invalid_input"
    status_code = 400


class StepNotFoundError(AnalysisError):
    code = "step_not_found"
    category = "not_found"
    status_code = 404

    def __init__(self, step_id: str):
        self.step_id = step_id
        super().__init__("Roadmap step not found")


class AnalysisNotFoundError(AnalysisError):
    code = "analysis_not_found"
    category = "not_found"
    status_code = 404

    def __init__(self, analysis_id: str):
        self.analysis_id = analysis_id
        super().__init__("Analysis not found")
