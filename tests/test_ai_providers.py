import json
import os
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import httpx
import openai

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillsnap.ai.config import AIConfig, load_ai_config  # noqa: E402
from skillsnap.ai.errors import LLMRefusedError, LLMUnavailableError  # noqa: E402
from skillsnap.ai.factory import build_ai_client  # noqa: E402
from skillsnap.ai.providers.gemini_provider import GeminiProvider  # noqa: E402
from skillsnap.ai.providers.openai_provider import OpenAIProvider  # noqa: E402


def _gemini(handler) -> GeminiProvider:
    return GeminiProvider(
        model="gemini-test",
        api_key="g-key",
        base_url="https://gemini.test/v1beta",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _gemini_answer(text: str, finish_reason: str = "STOP") -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": finish_reason}]}


class GeminiProviderTests(unittest.TestCase):
    def test_posts_json_mode_request_and_joins_parts(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            answer = {"candidates": [{"content": {"parts": [{"text": '{"a": '}, {"text": "1}"}]}}]}
            return httpx.Response(200, json=answer)

        text = _gemini(handler).complete_json(system_prompt="sys", user_prompt="hello")

        self.assertEqual(text, '{"a": 1}')
        self.assertTrue(seen["url"].startswith("https://gemini.test/v1beta/models/gemini-test:generateContent"))
        self.assertIn("key=g-key", seen["url"])
        self.assertEqual(seen["body"]["generationConfig"]["responseMimeType"], "application/json")
        self.assertEqual(seen["body"]["systemInstruction"]["parts"][0]["text"], "sys")
        self.assertEqual(seen["body"]["contents"][0]["parts"][0]["text"], "hello")

    def test_truncated_answer_is_returned_for_repair(self):
        provider = _gemini(lambda request: httpx.Response(200, json=_gemini_answer('{"a": [1', "MAX_TOKENS")))
        self.assertEqual(provider.complete_json(system_prompt="s", user_prompt="u"), '{"a": [1')

    def test_http_errors_are_mapped(self):
        cases = {401: "llm_auth", 403: "llm_auth", 429: "llm_quota", 404: "llm_model_unavailable", 500: "llm_unavailable"}
        for status_code, code in cases.items():
            with self.subTest(status_code=status_code):
                provider = _gemini(lambda request, status_code=status_code: httpx.Response(status_code, json={}))
                with self.assertRaises(LLMUnavailableError) as ctx:
                    provider.complete_json(system_prompt="s", user_prompt="u")
                self.assertEqual(ctx.exception.code, code)
                self.assertEqual(ctx.exception.category, "ai_unavailable")

    def test_network_failure_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        with self.assertRaises(LLMUnavailableError):
            _gemini(handler).complete_json(system_prompt="s", user_prompt="u")

    def test_blocked_and_empty_answers_are_refusals(self):
        answers = [
            {"promptFeedback": {"blockReason": "SAFETY"}},
            _gemini_answer("", "SAFETY"),
            {"candidates": []},
            _gemini_answer("   "),
        ]
        for answer in answers:
            with self.subTest(answer=answer):
                provider = _gemini(lambda request, answer=answer: httpx.Response(200, json=answer))
                with self.assertRaises(LLMRefusedError) as ctx:
                    provider.complete_json(system_prompt="s", user_prompt="u")
                self.assertEqual(ctx.exception.category, "ai_refused")

    def test_missing_key_is_unavailable(self):
        with patch.dict(os.environ, {"GEMINI_API_KEY": ""}):
            with self.assertRaises(LLMUnavailableError) as ctx:
                GeminiProvider(model="gemini-test")
        self.assertEqual(ctx.exception.code, "llm_auth")


class OpenAIProviderTests(unittest.TestCase):
    def _provider(self, create) -> OpenAIProvider:
        provider = OpenAIProvider(model="gpt-test", api_key="sk-test")
        provider._client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
        return provider

    @staticmethod
    def _response(content, finish_reason="stop", refusal=None):
        message = SimpleNamespace(content=content, refusal=refusal)
        return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])

    def test_requests_json_object_mode(self):
        calls = []

        def create(**kwargs):
            calls.append(kwargs)
            return self._response('{"ok": true}')

        text = self._provider(create).complete_json(system_prompt="sys", user_prompt="user")
        self.assertEqual(text, '{"ok": true}')
        self.assertEqual(calls[0]["response_format"], {"type": "json_object"})
        self.assertEqual(calls[0]["model"], "gpt-test")
        self.assertEqual([m["role"] for m in calls[0]["messages"]], ["system", "user"])

    def test_rate_limit_is_quota_error(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

        def create(**kwargs):
            raise openai.RateLimitError("slow down", response=httpx.Response(429, request=request), body=None)

        with self.assertRaises(LLMUnavailableError) as ctx:
            self._provider(create).complete_json(system_prompt="s", user_prompt="u")
        self.assertEqual(ctx.exception.code, "llm_quota")

    def test_content_filter_and_refusal_are_refusals(self):
        for response in (self._response("", "content_filter"), self._response(None, refusal="I can't help")):
            with self.subTest(response=response):
                with self.assertRaises(LLMRefusedError):
                    self._provider(lambda **kwargs: response).complete_json(system_prompt="s", user_prompt="u")

    def test_missing_key_is_unavailable(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": ""}):
            with self.assertRaises(LLMUnavailableError) as ctx:
                OpenAIProvider(model="gpt-test")
        self.assertEqual(ctx.exception.code, "llm_auth")


class FactoryTests(unittest.TestCase):
    def test_defaults_per_provider(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "Gemini", "AI_MODEL": ""}):
            cfg = load_ai_config()
        self.assertEqual((cfg.provider, cfg.model), ("gemini", "gemini-2.5-flash"))

    def test_builds_configured_provider(self):
        with patch.dict(os.environ, {"GEMINI_API_KEY": "g-key"}):
            client = build_ai_client(AIConfig(provider="gemini", model="gemini-test"))
        self.assertIsInstance(client, GeminiProvider)
        self.assertEqual(client.model, "gemini-test")

    def test_unknown_provider_is_rejected(self):
        with self.assertRaises(ValueError):
            build_ai_client(AIConfig(provider="claude", model="x"))


if __name__ == "__main__":
    unittest.main()
