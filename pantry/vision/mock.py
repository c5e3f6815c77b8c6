"""Built-in sample detection used when no real provider is available."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date

from . import DetectedItem, VisionProvider
from .parsing import ValidEntry, build_items

MOCK_MESSAGE = "Using demo data for testing"

SAMPLE_ENTRIES: tuple[ValidEntry, ...] = (
    ValidEntry("Fresh Tomatoes", "produce", 6, "pieces", 0.9),
    ValidEntry("Whole Milk", "dairy", 1, "liter", 0.85),
    ValidEntry("Whole Wheat Bread", "grain", 1, "loaf", 0.88),
    ValidEntry("Green Apples", "produce", 8, "pieces", 0.92),
)


def sample_items(today: date | None = None) -> list[DetectedItem]:
    return build_items(list(SAMPLE_ENTRIES), today)


class MockVisionProvider(VisionProvider):
    """Answers like a model would, with the fixed sample set."""

    name = "mock"

    async def _request(self, photo_base64: str) -> str:
        return json.dumps([asdict(entry) for entry in SAMPLE_ENTRIES])
