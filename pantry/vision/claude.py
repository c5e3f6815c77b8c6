"""Claude API vision provider for grocery detection."""

from __future__ import annotations

from typing import Any

from ..errors import MalformedResponseError, ProviderTransportError
from . import VisionProvider

_PROMPT = """\
This photo shows groceries, a pantry shelf or the inside of a fridge.
List every food or grocery item you can see.

Return ONLY a JSON array (no other text):
[
  {"name": "item name", "category": "category", "quantity": 1, "unit": "pieces", "confidence": 0.0-1.0}
]

category must be one of:
produce, dairy, meat, grain, canned, snack, beverage, condiment, frozen, other

Use confidence 0.8-1.0 when the item is clearly visible,
0.5-0.8 when somewhat uncertain, and below 0.5 when barely visible.
"""


class ClaudeVisionProvider(VisionProvider):
    """Detect grocery items using Claude's vision capability."""

    name = "claude"

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        client: Any = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or self._client is not None

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                import anthropic
            except ImportError:
                raise ImportError(
                    "anthropic SDK is required: pip install anthropic"
                ) from None

            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    async def _request(self, photo_base64: str) -> str:
        content: list[dict] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": "image/jpeg",
                    "data": photo_base64,
                },
            },
            {"type": "text", "text": _PROMPT},
        ]

        client = self._get_client()
        import anthropic

        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=1024,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            raise ProviderTransportError(
                f"Claude request failed: {e}",
                status_code=getattr(e, "status_code", None),
            ) from e

        if not response.content:
            raise MalformedResponseError("no response content from Claude")
        return response.content[0].text
