"""OpenAI chat-completions vision provider for grocery detection."""

from __future__ import annotations

import logging

import httpx

from ..errors import MalformedResponseError, ProviderTransportError
from . import VisionProvider

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """\
You are a grocery item detection AI. Analyze the image and identify food/grocery items.

Return ONLY a JSON array with detected items. Each item must have:
- name: string (specific product name)
- category: string (produce|dairy|meat|grain|canned|snack|beverage|condiment|frozen|other)
- quantity: number (estimated count)
- unit: string (pieces|kg|liters|etc)
- confidence: number (0-1 detection confidence)

Example response:
[{"name":"Green Apples","category":"produce","quantity":6,"unit":"pieces","confidence":0.9}]

If no items detected, return empty array: []
"""

_USER_PROMPT = "Detect all grocery items in this image. Return only the JSON array."


class OpenAIVisionProvider(VisionProvider):
    """Detect grocery items using an OpenAI chat-completions vision model."""

    name = "openai"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def build_payload(self, photo_base64: str) -> dict:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": _SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": _USER_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:image/jpeg;base64,{photo_base64}",
                                "detail": "high",
                            },
                        },
                    ],
                },
            ],
            "max_tokens": 1000,
            "temperature": 0.3,
        }

    async def _request(self, photo_base64: str) -> str:
        try:
            response = await self._client.post(
                f"{self._base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self._api_key}"},
                json=self.build_payload(photo_base64),
            )
        except httpx.HTTPError as e:
            raise ProviderTransportError(f"OpenAI request failed: {e}") from e

        if response.is_error:
            logger.debug("OpenAI error response: %s", response.text[:500])
            raise ProviderTransportError(
                f"OpenAI API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                "unexpected chat-completions payload", response.text
            ) from e

        if not content:
            raise MalformedResponseError("no response content from OpenAI")
        return content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
