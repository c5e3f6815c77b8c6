"""Tests for the API key smoke checks (mocked API calls)."""

import base64
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pantry.smoke import (
    TEST_IMAGE_BASE64,
    check_gemini,
    check_openai,
    check_vision,
    error_hint,
)
from pantry.vision import VisionProvider


class _Provider(VisionProvider):
    def __init__(self, name, text, configured=True):
        self.name = name
        self._text = text
        self._configured = configured

    @property
    def configured(self):
        return self._configured

    async def _request(self, photo_base64):
        return self._text


def test_test_image_is_jpeg():
    assert base64.b64decode(TEST_IMAGE_BASE64).startswith(b"\xff\xd8")


class TestErrorHint:
    def test_invalid_key(self):
        assert error_hint(401) == "invalid API key"
        assert error_hint(403) == "invalid API key"

    def test_rate_limit(self):
        assert "rate limit" in error_hint(429)

    def test_quota(self):
        assert "quota" in error_hint(None, "You exceeded your current quota")

    def test_other(self):
        assert error_hint(500, "server error") == ""


class TestCheckOpenAI:
    @pytest.mark.asyncio
    async def test_missing_key(self):
        result = await check_openai("")
        assert result.ok is False
        assert "not configured" in result.detail

    @pytest.mark.asyncio
    async def test_success(self):
        def handler(request):
            if request.url.path == "/v1/models":
                return httpx.Response(
                    200,
                    json={"data": [{"id": "gpt-4o-mini"}, {"id": "whisper-1"}, {"id": "gpt-4o"}]},
                )
            body = json.loads(request.content)
            assert body["max_tokens"] == 50
            return httpx.Response(
                200,
                json={"choices": [{"message": {"content": "Vision API is working!"}}]},
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        result = await check_openai("sk-test", client=client)

        assert result.ok is True
        assert result.detail == "Vision API is working!"
        assert result.models == ["gpt-4o", "gpt-4o-mini"]

    @pytest.mark.asyncio
    async def test_invalid_key(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(401, json={"error": {"message": "bad key"}})
            )
        )
        result = await check_openai("sk-bad", client=client)
        assert result.ok is False
        assert "401" in result.detail
        assert "invalid API key" in result.detail

    @pytest.mark.asyncio
    async def test_non_json_reply(self):
        def handler(request):
            if request.url.path == "/v1/models":
                return httpx.Response(200, json={"data": []})
            return httpx.Response(200, text="<html>proxy</html>")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        result = await check_openai("sk-test", client=client)

        assert result.ok is False
        assert "unexpected response" in result.detail

    @pytest.mark.asyncio
    async def test_unexpected_models_payload(self):
        def handler(request):
            if request.url.path == "/v1/models":
                return httpx.Response(200, json={"data": [{"name": "gpt-4o"}]})
            return httpx.Response(
                200, json={"choices": [{"message": {"content": "ok"}}]}
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        result = await check_openai("sk-test", client=client)

        assert result.ok is False
        assert "unexpected response" in result.detail


class TestCheckGemini:
    @pytest.mark.asyncio
    async def test_missing_key(self):
        result = await check_gemini("")
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_success(self):
        genai = MagicMock()
        genai.list_models.return_value = [
            SimpleNamespace(name="models/gemini-2.5-flash", supported_generation_methods=["generateContent"]),
            SimpleNamespace(name="models/embedding-001", supported_generation_methods=["embedContent"]),
        ]
        genai.GenerativeModel.return_value.generate_content_async = AsyncMock(
            return_value=SimpleNamespace(text=" Gemini API is working! ")
        )

        result = await check_gemini("g-key", genai=genai)

        genai.configure.assert_called_once_with(api_key="g-key")
        assert result.ok is True
        assert result.detail == "Gemini API is working!"
        assert result.models == ["models/gemini-2.5-flash"]


class TestCheckVision:
    @pytest.mark.asyncio
    async def test_reports_each_provider(self):
        good = _Provider("openai", '[{"name": "Test Apple", "category": "produce"}]')
        bad = _Provider("gemini", "no idea")
        missing = _Provider("claude", "", configured=False)

        results = await check_vision([good, bad, missing])

        assert [r.ok for r in results] == [True, False, False]
        assert results[0].detail == "answered with 1 entries"
        assert "not JSON" in results[1].detail
        assert "not configured" in results[2].detail

    @pytest.mark.asyncio
    async def test_empty_array_counts_as_working(self):
        results = await check_vision([_Provider("openai", "[]")])

        assert results[0].ok is True
        assert results[0].detail == "answered with 0 entries"
