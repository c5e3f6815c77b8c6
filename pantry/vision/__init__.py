"""Vision provider base class, data types, and factory."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from ..errors import MalformedResponseError, ProviderNotConfigured, VisionError

if TYPE_CHECKING:
    from ..config import PantryConfig
    from .parsing import RejectedEntry

logger = logging.getLogger(__name__)


@dataclass
class DetectedItem:
    """One grocery item recognized in a photo."""

    id: str
    name: str
    category: str  # produce, dairy, meat, grain, ... other
    quantity: float = 1
    unit: str = "piece"
    confidence: float = 0.7  # 0.0-1.0
    expiry_days: int = 30
    expiry_date: str = ""  # ISO date

    def to_dict(self) -> dict[str, Any]:
        """Render the shape the mobile client stores in its pantry."""
        return {
            "id": self.id,
            "name": self.name,
            "title": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "qty": self.quantity,
            "unit": self.unit,
            "confidence": self.confidence,
            "expiryEstimate": self.expiry_days,
            "expiryDate": self.expiry_date,
            "expiresOn": self.expiry_date,
        }


@dataclass
class DetectionResult:
    success: bool
    items: list[DetectedItem] = field(default_factory=list)
    method: str = "mock"
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "method": self.method,
            "items": [item.to_dict() for item in self.items],
        }
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass
class ProviderSuccess:
    provider: str
    items: list[DetectedItem]
    rejected: list[RejectedEntry] = field(default_factory=list)


@dataclass
class ProviderFailure:
    provider: str
    reason: str
    skipped: bool = False  # True when the provider has no credential


ProviderResult = Union[ProviderSuccess, ProviderFailure]


class VisionProvider(ABC):
    """Abstract base for grocery detection from a single photo.

    Subclasses implement :meth:`_request`, which returns the raw model text.
    :meth:`detect` turns every provider-level error into a
    :class:`ProviderFailure`, so callers never see an exception.
    """

    name: str = ""

    @property
    def configured(self) -> bool:
        return True

    @abstractmethod
    async def _request(self, photo_base64: str) -> str:
        """Send the photo to the provider and return its text answer."""
        ...

    async def detect(self, photo_base64: str) -> ProviderResult:
        from .parsing import parse_items

        try:
            if not self.configured:
                raise ProviderNotConfigured(f"{self.name} API key is not configured")
            text = await self._request(photo_base64)
            items, rejected = parse_items(text)
            if not items:
                raise MalformedResponseError("no valid items in response", text)
        except ProviderNotConfigured as e:
            return ProviderFailure(self.name, str(e), skipped=True)
        except VisionError as e:
            return ProviderFailure(self.name, str(e))

        for entry in rejected:
            logger.debug(
                "%s: skipped entry %d (%s)", self.name, entry.index, entry.reason
            )
        return ProviderSuccess(self.name, items, rejected)


def create_provider(name: str, config: PantryConfig) -> VisionProvider:
    """Create one vision provider by name."""
    match name:
        case "openai":
            from .openai import OpenAIVisionProvider

            return OpenAIVisionProvider(
                api_key=config.vision.openai.api_key,
                model=config.vision.openai.model,
                base_url=config.vision.openai.base_url,
                timeout=config.vision.openai.timeout,
            )
        case "gemini":
            from .gemini import GeminiVisionProvider

            return GeminiVisionProvider(
                api_key=config.vision.gemini.api_key,
                model=config.vision.gemini.model,
            )
        case "claude":
            from .claude import ClaudeVisionProvider

            return ClaudeVisionProvider(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
            )
        case "mock":
            from .mock import MockVisionProvider

            return MockVisionProvider()
        case _:
            raise ValueError(
                f"Unknown vision provider: {name!r} "
                f"(choose from openai / gemini / claude / mock)"
            )


def create_providers(config: PantryConfig) -> list[VisionProvider]:
    """Create the ordered provider chain from configuration."""
    return [create_provider(name, config) for name in config.vision.providers]
