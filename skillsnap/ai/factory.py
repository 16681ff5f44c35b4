from skillsnap.ai.config import AIConfig, load_ai_config
from skillsnap.ai.types import AIClient

from skillsnap.ai.providers.openai_provider import OpenAIProvider
from skillsnap.ai.providers.gemini_provider import GeminiProvider


def build_ai_client(cfg: AIConfig | None = None) -> AIClient:
    cfg = cfg or load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
            max_output_tokens=cfg.max_output_tokens,
        )

    if cfg.provider == "gemini":
        return GeminiProvider(
            model=cfg.model,
            timeout_s=cfg.timeout_s,
            temperature=cfg.temperature,
            max_output_tokens=cfg.max_output_tokens,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
