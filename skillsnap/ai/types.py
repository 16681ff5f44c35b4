from typing import Protocol


class AIClient(Protocol):
    model: str

    def complete_json(self, *, system_prompt: str, user_prompt: str) -> str:
        """Return the raw text of a single JSON-mode completion."""
        ...
