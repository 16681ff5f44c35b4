from __future__ import annotations


class LLMError(RuntimeError):
    category = "ai_unavailable"
    status_code = 503

    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


class LLMUnavailableError(LLMError):
    """The provider could not be reached, rejected our credentials or ran out of quota."""


class LLMRefusedError(LLMError):
    """The provider answered but declined to produce content."""

    category = "ai_refused"

    def __init__(self, message: str, *, code: str = "llm_refused"):
        super().__init__(message, code=code)
