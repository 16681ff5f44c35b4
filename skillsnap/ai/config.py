import os
from dataclasses import dataclass

_DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.5-flash",
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    temperature: float = 0.7
    max_output_tokens: int = 16384
    timeout_s: float = 120.0
    max_retries: int = 2


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or _DEFAULT_MODELS.get(provider, "")).strip()
    return AIConfig(
        provider=provider,
        model=model,
        temperature=float(os.getenv("AI_TEMPERATURE", "0.7")),
        max_output_tokens=int(os.getenv("AI_MAX_OUTPUT_TOKENS", "16384")),
        timeout_s=float(os.getenv("AI_TIMEOUT_S", "120")),
        max_retries=int(os.getenv("AI_MAX_RETRIES", "2")),
    )
