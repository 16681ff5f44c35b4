from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from skillsnap.ai.config import load_ai_config  # noqa: E402
from skillsnap.ai.errors import LLMError  # noqa: E402
from skillsnap.ai.factory import build_ai_client  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a tiny JSON prompt to the configured AI provider.")
    parser.add_argument("--provider", help="Override AI_PROVIDER (openai or gemini)")
    parser.add_argument("--model", help="Override AI_MODEL")
    args = parser.parse_args()

    load_dotenv()
    cfg = load_ai_config()
    if args.provider or args.model:
        provider = (args.provider or cfg.provider).strip().lower()
        cfg = type(cfg)(
            provider=provider,
            model=args.model or (cfg.model if provider == cfg.provider else ""),
            temperature=cfg.temperature,
            max_output_tokens=512,
            timeout_s=cfg.timeout_s,
            max_retries=0,
        )
        if not cfg.model:
            parser.error("--model is required when switching provider")

    started = time.perf_counter()
    try:
        client = build_ai_client(cfg)
        raw = client.complete_json(
            system_prompt="Answer with one JSON object only.",
            user_prompt='Return {"status": "ok"}.',
        )
        parsed = json.loads(raw)
    except LLMError as exc:
        print(f"FAILED provider={cfg.provider} model={cfg.model} code={exc.code} category={exc.category}: {exc}")
        return 1
    except ValueError as exc:
        print(f"FAILED provider={cfg.provider} model={cfg.model}: {exc}")
        return 1

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    print(f"OK provider={cfg.provider} model={cfg.model} latency_ms={elapsed_ms} response={parsed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
