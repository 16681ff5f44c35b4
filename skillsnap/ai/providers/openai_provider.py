from __future__ import annotations

import logging
import os
from typing import Optional

import openai
from openai import OpenAI

from skillsnap.ai.errors import LLMRefusedError, LLMUnavailableError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 120.0,
        max_retries: int = 2,
        temperature: float = 0.7,
        max_output_tokens: int = 16384,
    ):
        self.model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise LLMUnavailableError(
                "AI service is not available. Please ensure OPENAI_API_KEY is configured.",
                code="llm_auth",
            )

        self._client = OpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=timeout_s,
            max_retries=max_retries,
        )

    def complete_json(self, *, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._temperature,
                response_format={"type": "json_object"},
                max_tokens=self._max_output_tokens,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise LLMUnavailableError(
                "AI service authentication failed. Please contact support.", code="llm_auth"
            ) from exc
        except openai.RateLimitError as exc:
            raise LLMUnavailableError(
                "AI service quota exceeded. Please try again later.", code="llm_quota"
            ) from exc
        except openai.NotFoundError as exc:
            raise LLMUnavailableError(
                f"AI model '{self.model}' is not available. Please try again later.",
                code="llm_model_unavailable",
            ) from exc
        except openai.APIError as exc:
            logger.warning("openai_completion_failed model=%s: %s", self.model, exc)
            raise LLMUnavailableError(f"AI analysis failed: {exc}. Please try again.") from exc

        if not response.choices:
            raise LLMRefusedError("The AI returned no answer. Please try again.")
        choice = response.choices[0]
        if choice.finish_reason == "content_filter" or getattr(choice.message, "refusal", None):
            raise LLMRefusedError("The AI declined to analyze this content.")
        if choice.finish_reason == "length":
            logger.warning("openai_completion_truncated model=%s max_tokens=%s", self.model, self._max_output_tokens)
        content = choice.message.content or ""
        if not content.strip():
            raise LLMRefusedError("The AI returned an empty answer. Please try again.")
        return content
