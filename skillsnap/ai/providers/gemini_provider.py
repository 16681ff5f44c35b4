from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

from skillsnap.ai.errors import LLMRefusedError, LLMUnavailableError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

_BLOCKING_FINISH_REASONS = {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}


class GeminiProvider:
    """Gemini over the Generative Language REST API, in JSON response mode."""

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 120.0,
        temperature: float = 0.7,
        max_output_tokens: int = 16384,
        http_client: Optional[httpx.Client] = None,
    ):
        self.model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._api_key = (api_key or os.getenv("GEMINI_API_KEY") or "").strip()
        if not self._api_key:
            raise LLMUnavailableError(
                "AI service is not available. Please ensure GEMINI_API_KEY is configured.",
                code="llm_auth",
            )
        base = (base_url or os.getenv("GEMINI_BASE_URL") or GEMINI_BASE_URL).rstrip("/")
        self._endpoint = f"{base}/models/{model}:generateContent"
        self._http = http_client or httpx.Client(timeout=timeout_s)

    def _payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "temperature": self._temperature,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self._max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    def complete_json(self, *, system_prompt: str, user_prompt: str) -> str:
        try:
            resp = self._http.post(
                self._endpoint,
                params={"key": self._api_key},
                json=self._payload(system_prompt, user_prompt),
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            if code in {401, 403}:
                raise LLMUnavailableError(
                    "AI service authentication failed. Please contact support.", code="llm_auth"
                ) from exc
            if code == 429:
                raise LLMUnavailableError(
                    "AI service quota exceeded. Please try again later.", code="llm_quota"
                ) from exc
            if code == 404:
                raise LLMUnavailableError(
                    f"AI model '{self.model}' is not available. Please try again later.",
                    code="llm_model_unavailable",
                ) from exc
            logger.warning("gemini_completion_failed model=%s status=%s", self.model, code)
            raise LLMUnavailableError(f"AI service returned HTTP {code}. Please try again.") from exc
        except (httpx.RequestError, ValueError) as exc:
            logger.warning("gemini_completion_failed model=%s: %s", self.model, exc)
            raise LLMUnavailableError("AI service is temporarily unavailable. Please try again.") from exc

        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise LLMRefusedError(f"The AI declined to analyze this content ({block_reason}).")

        candidates = data.get("candidates") or []
        if not candidates:
            raise LLMRefusedError("The AI returned no answer. Please try again.")
        candidate = candidates[0] or {}
        finish_reason = candidate.get("finishReason")
        if finish_reason in _BLOCKING_FINISH_REASONS:
            raise LLMRefusedError(f"The AI declined to analyze this content ({finish_reason}).")
        if finish_reason == "MAX_TOKENS":
            logger.warning("gemini_completion_truncated model=%s max_tokens=%s", self.model, self._max_output_tokens)

        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise LLMRefusedError("The AI returned an empty answer. Please try again.")
        return text
