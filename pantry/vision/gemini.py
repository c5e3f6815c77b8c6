"""Gemini API vision provider for grocery detection."""

from __future__ import annotations

import base64
from typing import Any

from ..errors import ProviderTransportError, VisionError
from . import VisionProvider

_PROMPT = """\
Analyze this image and identify all grocery/food items.

Return ONLY a JSON array with detected items. Each item should have:
- name: specific product name
- category: one of (produce, dairy, meat, grain, canned, snack, beverage, condiment, frozen, other)
- quantity: estimated count (number)
- unit: appropriate unit (pieces, kg, liters, etc)
- confidence: detection confidence (0-1)

Example: [{"name":"Tomatoes","category":"produce","quantity":4,"unit":"pieces","confidence":0.8}]

If no items found, return: []
"""


class GeminiVisionProvider(VisionProvider):
    """Detect grocery items using Google Gemini's vision capability.

    ``model`` may be any object with an async ``generate_content_async``;
    when omitted a ``GenerativeModel`` is built on first use.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.5-flash",
        client: Any = None,
    ) -> None:
        self._api_key = api_key
        self._model_name = model
        self._model = client

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or self._model is not None

    def _get_model(self) -> Any:
        if self._model is None:
            try:
                import google.generativeai as genai
            except ImportError:
                raise ImportError(
                    "google-generativeai SDK is required: pip install google-generativeai"
                ) from None

            genai.configure(api_key=self._api_key)
            self._model = genai.GenerativeModel(self._model_name)
        return self._model

    async def _request(self, photo_base64: str) -> str:
        try:
            data = base64.b64decode(photo_base64, validate=False)
        except ValueError as e:
            raise VisionError(f"photo is not valid base64: {e}") from e

        from google.api_core import exceptions as google_exceptions

        model = self._get_model()
        parts: list = [_PROMPT, {"mime_type": "image/jpeg", "data": data}]
        try:
            response = await model.generate_content_async(parts)
            # .text raises ValueError when the candidate was blocked
            return response.text
        except google_exceptions.GoogleAPIError as e:
            raise ProviderTransportError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise ProviderTransportError(f"Gemini returned no text: {e}") from e
