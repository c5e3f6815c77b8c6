"""Smoke checks for the vision provider API keys."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import httpx

from .errors import VisionError
from .vision import VisionProvider
from .vision.parsing import load_item_array

logger = logging.getLogger(__name__)

# 64x64 JPEG, small enough to keep the vision checks cheap
TEST_IMAGE_BASE64 = (
    "/9j/4AAQSkZJRgABAQEAYABgAAD/2wBDAAgGBgcGBQgHBwcJCQgKDBQNDAsLDBkSEw8UHRof"
    "Hh0aHBwgJC4nICIsIxwcKDcpLDAxNDQ0Hyc5PTgyPC4zNDL/2wBDAQkJCQwLDBgNDRgyIRwh"
    "MjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjIyMjL/wAAR"
    "CABAAEADASIAAhEBAxEB/8QAHwAAAQUBAQEBAQEAAAAAAAAAAAECAwQFBgcICQoL/8QAtRAA"
    "AgEDAwIEAwUFBAQAAAF9AQIDAAQRBRIhMUEGE1FhByJxFDKBkaEII0KxwRVS0fAkM2JyggkK"
    "FhcYGRolJicoKSo0NTY3ODk6Q0RFRkdISUpTVFVWV1hZWmNkZWZnaGlqc3R1dnd4eXqDhIWG"
    "h4iJipKTlJWWl5iZmqKjpKWmp6ipqrKztLW2t7i5usLDxMXGx8jJytLT1NXW19jZ2uHi4+Tl"
    "5ufo6erx8vP09fb3+Pn6/8QAHwEAAwEBAQEBAQEBAQAAAAAAAAECAwQFBgcICQoL/8QAtREA"
    "AgECBAQDBAcFBAQAAQJ3AAECAxEEBSExBhJBUQdhcRMiMoEIFEKRobHBCSMzUvAVYnLRChYk"
    "NOEl8RcYGRomJygpKjU2Nzg5OkNERUZHSElKU1RVVldYWVpjZGVmZ2hpanN0dXZ3eHl6goOE"
    "hYaHiImKkpOUlZaXmJmaoqOkpaanqKmqsrO0tba3uLm6wsPExcbHyMnK0tPU1dbX2Nna4uPk"
    "5ebn6Onq8vP09fb3+Pn6/9oADAMBAAIRAxEAPwD5/ooooAKKKKACiiigAooooAKKKKACiiig"
    "AooooAKKKKAP/9k="
)


@dataclass
class SmokeResult:
    provider: str
    ok: bool
    detail: str
    models: list[str] = field(default_factory=list)


def error_hint(status_code: int | None, message: str = "") -> str:
    """Translate a failed call into a hint about what to fix."""
    if status_code in (401, 403):
        return "invalid API key"
    if status_code == 429:
        return "rate limit exceeded, wait a moment and try again"
    if "quota" in message.lower():
        return "quota exceeded, check the account's billing"
    return ""


def _failure(provider: str, status_code: int | None, message: str) -> SmokeResult:
    hint = error_hint(status_code, message)
    detail = f"{message} ({hint})" if hint else message
    return SmokeResult(provider, False, detail)


async def check_openai(
    api_key: str,
    client: httpx.AsyncClient | None = None,
    base_url: str = "https://api.openai.com/v1",
) -> SmokeResult:
    """List models and run a tiny chat completion with the OpenAI key."""
    if not api_key:
        return SmokeResult("openai", False, "OpenAI API key not configured")

    headers = {"Authorization": f"Bearer {api_key}"}
    own_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=30.0)
    try:
        models_resp = await client.get(f"{base_url}/models", headers=headers)
        if models_resp.is_error:
            return _failure(
                "openai",
                models_resp.status_code,
                f"API error {models_resp.status_code}: {models_resp.text[:200]}",
            )

        chat_resp = await client.post(
            f"{base_url}/chat/completions",
            headers=headers,
            json={
                "model": "gpt-4o-mini",
                "messages": [
                    {
                        "role": "user",
                        "content": 'Say "Vision API is working!" if you can process images.',
                    }
                ],
                "max_tokens": 50,
            },
        )
        if chat_resp.is_error:
            return _failure(
                "openai",
                chat_resp.status_code,
                f"Vision API error {chat_resp.status_code}: {chat_resp.text[:200]}",
            )
        reply = chat_resp.json()["choices"][0]["message"]["content"] or ""
        models = sorted(
            m["id"]
            for m in models_resp.json().get("data", [])
            if "gpt-4" in m["id"] or "vision" in m["id"]
        )
    except httpx.HTTPError as e:
        return _failure("openai", None, f"request failed: {e}")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        return _failure("openai", None, f"unexpected response from OpenAI: {e!r}")
    finally:
        if own_client:
            await client.aclose()

    return SmokeResult("openai", True, reply.strip(), models)


async def check_gemini(api_key: str, genai: Any = None) -> SmokeResult:
    """List generateContent-capable models and run a tiny generation."""
    if not api_key:
        return SmokeResult("gemini", False, "Gemini API key not configured")

    if genai is None:
        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None
    from google.api_core import exceptions as google_exceptions

    genai.configure(api_key=api_key)
    try:
        listed = await asyncio.to_thread(lambda: list(genai.list_models()))
        models = sorted(
            m.name
            for m in listed
            if "generateContent" in (m.supported_generation_methods or [])
        )
        model = genai.GenerativeModel("gemini-2.5-flash")
        response = await model.generate_content_async(
            'Say "Gemini API is working!" if you are functioning properly.'
        )
        reply = response.text
    except google_exceptions.GoogleAPIError as e:
        return _failure("gemini", getattr(e, "code", None), str(e))
    except ValueError as e:
        return SmokeResult("gemini", False, f"generation returned no text: {e}")

    return SmokeResult("gemini", True, reply.strip(), models)


async def check_vision(
    providers: Sequence[VisionProvider],
    image_base64: str = TEST_IMAGE_BASE64,
) -> list[SmokeResult]:
    """Run each configured provider on the built-in test image.

    A provider passes when it answers with a JSON array, even an empty
    one; the test image holds no groceries.
    """
    results: list[SmokeResult] = []
    for provider in providers:
        if not provider.configured:
            results.append(
                SmokeResult(provider.name, False, f"{provider.name} API key not configured")
            )
            continue

        logger.info("Testing %s vision...", provider.name)
        try:
            entries = load_item_array(await provider._request(image_base64))
        except VisionError as e:
            results.append(SmokeResult(provider.name, False, str(e)))
            continue

        results.append(
            SmokeResult(provider.name, True, f"answered with {len(entries)} entries")
        )
    return results
