"""Photo → grocery items, trying each vision provider in turn."""

from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from .vision import (
    DetectedItem,
    DetectionResult,
    ProviderFailure,
    ProviderResult,
    VisionProvider,
    create_providers,
)
from .vision.mock import MOCK_MESSAGE, sample_items

if TYPE_CHECKING:
    from .config import PantryConfig

logger = logging.getLogger(__name__)


def encode_image(path: str | Path) -> str:
    """Read an image file as the base64 string providers expect."""
    return base64.standard_b64encode(Path(path).read_bytes()).decode()


class VisionAnalysisGateway:
    """Best-effort grocery detection over an ordered provider chain.

    Providers are awaited one after another; the first one that yields at
    least one valid item wins. When every provider fails (or none has a
    key) the fixed sample set is returned. :meth:`analyze` never raises.
    """

    def __init__(
        self,
        providers: Sequence[VisionProvider] = (),
        mock_fallback: bool = True,
    ) -> None:
        self._providers = list(providers)
        self._mock_fallback = mock_fallback

    @classmethod
    def from_config(cls, config: PantryConfig) -> VisionAnalysisGateway:
        return cls(
            providers=create_providers(config),
            mock_fallback=config.vision.mock_fallback,
        )

    @property
    def providers(self) -> list[VisionProvider]:
        return list(self._providers)

    async def _try(self, provider: VisionProvider, photo_base64: str) -> ProviderResult:
        try:
            return await provider.detect(photo_base64)
        except Exception as e:
            logger.exception("%s: unexpected error during detection", provider.name)
            return ProviderFailure(provider.name, f"unexpected error: {e}")

    async def analyze(self, photo_base64: str) -> DetectionResult:
        """Detect grocery items in a base64-encoded JPEG."""
        failures: list[ProviderFailure] = []
        for provider in self._providers:
            if not provider.configured:
                logger.debug("%s: not configured, skipping", provider.name)
                continue

            logger.info("Attempting %s vision analysis...", provider.name)
            result = await self._try(provider, photo_base64)
            if isinstance(result, ProviderFailure):
                logger.warning("%s analysis failed: %s", provider.name, result.reason)
                failures.append(result)
                continue

            logger.info("%s detected %d items", provider.name, len(result.items))
            return DetectionResult(
                success=True, items=result.items, method=result.provider
            )

        return self._fallback(failures)

    def _fallback(self, failures: list[ProviderFailure]) -> DetectionResult:
        if failures:
            reasons = "; ".join(f"{f.provider}: {f.reason}" for f in failures)
        else:
            reasons = "no vision provider configured"

        if not self._mock_fallback:
            logger.info("No vision provider succeeded (%s)", reasons)
            return DetectionResult(
                success=False,
                items=[],
                method="mock",
                message=f"Image analysis unavailable ({reasons})",
            )

        logger.info("Using mock data (%s)", reasons)
        return DetectionResult(
            success=True, items=sample_items(), method="mock", message=MOCK_MESSAGE
        )

    async def analyze_many(self, photos: Sequence[str]) -> DetectionResult:
        """Analyze several photos of the same pantry and merge the items.

        Items sharing a name (case-insensitive) are merged, keeping the
        higher-confidence detection. Only photos a real provider analyzed
        contribute items; the mock result is returned only when none did.
        """
        if not photos:
            return DetectionResult(
                success=False, items=[], method="mock", message="no photos given"
            )

        results = await asyncio.gather(*(self.analyze(p) for p in photos))

        real = [r for r in results if r.success and r.method != "mock"]
        if not real:
            return results[0]

        seen: dict[str, DetectedItem] = {}
        for result in real:
            for item in result.items:
                key = item.name.lower()
                if key not in seen or item.confidence > seen[key].confidence:
                    seen[key] = item

        skipped = len(results) - len(real)
        return DetectionResult(
            success=True,
            items=list(seen.values()),
            method=real[0].method,
            message=f"{skipped} of {len(results)} photos could not be analyzed"
            if skipped
            else None,
        )

    async def analyze_file(self, path: str | Path) -> DetectionResult:
        return await self.analyze(encode_image(path))

    async def aclose(self) -> None:
        for provider in self._providers:
            close = getattr(provider, "aclose", None)
            if close is not None:
                await close()

    async def __aenter__(self) -> VisionAnalysisGateway:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
