"""
Unit Tests — LLM Client
=======================
Provider request shapes and error mapping. HTTP is mocked at
httpx.AsyncClient.post; no network access.
"""
import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from buglocator.core.errors import ReasoningError
from buglocator.llm.client import LLMClient, ProviderConfig, strip_code_fences


def _response(status: int, payload: dict) -> httpx.Response:
    return httpx.Response(status, json=payload, request=httpx.Request("POST", "https://llm.test"))


def _openai_client() -> LLMClient:
    return LLMClient(ProviderConfig(name="openai", api_key="k", base_url="https://llm.test/v1", model="m"))


def _complete(client: LLMClient, *args):
    async def run():
        try:
            return await client.complete(*args)
        finally:
            await client.close()
    return asyncio.run(run())


class TestOpenAICompatible:

    def test_returns_message_content(self):
        payload = {"choices": [{"message": {"content": "hello"}}]}
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=_response(200, payload))) as mock_post:
            text = _complete(_openai_client(), "user text", "system text")

        assert text == "hello"
        url = mock_post.call_args.args[0]
        body = mock_post.call_args.kwargs["json"]
        assert url == "https://llm.test/v1/chat/completions"
        assert body["model"] == "m"
        assert body["messages"][0] == {"role": "system", "content": "system text"}
        assert body["messages"][1] == {"role": "user", "content": "user text"}
        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer k"

    def test_no_system_prompt(self):
        payload = {"choices": [{"message": {"content": "ok"}}]}
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=_response(200, payload))) as mock_post:
            _complete(_openai_client(), "only user")
        assert [m["role"] for m in mock_post.call_args.kwargs["json"]["messages"]] == ["user"]

    def test_http_error_maps_to_reasoning_error(self):
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=_response(500, {"error": "x"}))):
            with pytest.raises(ReasoningError, match="HTTP 500"):
                _complete(_openai_client(), "prompt")

    def test_timeout_maps_to_reasoning_error(self):
        with patch("httpx.AsyncClient.post", new=AsyncMock(side_effect=httpx.ReadTimeout("slow"))):
            with pytest.raises(ReasoningError, match="timed out"):
                _complete(_openai_client(), "prompt")

    def test_transport_error_maps_to_reasoning_error(self):
        with patch("httpx.AsyncClient.post", new=AsyncMock(side_effect=httpx.ConnectError("refused"))):
            with pytest.raises(ReasoningError, match="request failed"):
                _complete(_openai_client(), "prompt")

    def test_empty_completion_is_an_error(self):
        payload = {"choices": [{"message": {"content": "   "}}]}
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=_response(200, payload))):
            with pytest.raises(ReasoningError, match="empty"):
                _complete(_openai_client(), "prompt")


class TestGemini:

    def test_returns_first_part_text(self):
        client = LLMClient(ProviderConfig(name="gemini", api_key="g", base_url="https://gem.test", model="flash"))
        payload = {"candidates": [{"content": {"parts": [{"text": "gemini says hi"}]}}]}
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=_response(200, payload))) as mock_post:
            text = _complete(client, "prompt", "sys")

        assert text == "gemini says hi"
        assert mock_post.call_args.args[0] == "https://gem.test/models/flash:generateContent?key=g"
        body = mock_post.call_args.kwargs["json"]
        assert body["system_instruction"]["parts"][0]["text"] == "sys"


class TestStripCodeFences:

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'
