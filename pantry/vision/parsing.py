"""Validation and normalization of provider responses."""

from __future__ import annotations

import json
import math
import re
import secrets
import string
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Union

from ..categories import coerce_category, estimate_expiry, expiry_days_for
from ..errors import MalformedResponseError
from . import DetectedItem

DEFAULT_QUANTITY = 1
DEFAULT_UNIT = "piece"
DEFAULT_CONFIDENCE = 0.7

_FENCE_RE = re.compile(r"```(?:json)?\n?", re.IGNORECASE)
_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class ValidEntry:
    name: str
    category: str
    quantity: float
    unit: str
    confidence: float


@dataclass(frozen=True)
class RejectedEntry:
    index: int
    reason: str
    raw: Any = None


ValidationResult = Union[ValidEntry, RejectedEntry]


def strip_code_fences(text: str) -> str:
    """Remove markdown fences such as ```json ... ``` around a payload."""
    return _FENCE_RE.sub("", text).strip()


def load_item_array(text: str) -> list[Any]:
    """Parse the JSON array from a model's answer."""
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise MalformedResponseError("empty response", text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"response is not JSON: {e.msg}", text) from e
    if not isinstance(data, list):
        raise MalformedResponseError(
            f"response is not an array (got {type(data).__name__})", text
        )
    return data


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except (ValueError, OverflowError):
        return None


def _quantity(value: Any) -> float:
    number = _number(value)
    if number is None or not math.isfinite(number) or number <= 0:
        return DEFAULT_QUANTITY
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def _confidence(value: Any) -> float:
    number = _number(value)
    if number is None or not math.isfinite(number):
        return DEFAULT_CONFIDENCE
    return min(max(float(number), 0.0), 1.0)


def validate_entry(index: int, raw: Any) -> ValidationResult:
    """Check one element of the provider's array against the item schema."""
    if not isinstance(raw, dict):
        return RejectedEntry(index, "not an object", raw)

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return RejectedEntry(index, "missing name", raw)

    category = raw.get("category")
    if category is None or category == "":
        return RejectedEntry(index, "missing category", raw)

    unit = raw.get("unit")
    if not isinstance(unit, str) or not unit.strip():
        unit = DEFAULT_UNIT

    return ValidEntry(
        name=name.strip(),
        category=coerce_category(category),
        quantity=_quantity(raw.get("quantity")),
        unit=unit.strip(),
        confidence=_confidence(raw.get("confidence")),
    )


def new_item_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"item_{int(time.time() * 1000)}_{suffix}"


def build_item(entry: ValidEntry, item_id: str, today: date | None = None) -> DetectedItem:
    return DetectedItem(
        id=item_id,
        name=entry.name,
        category=entry.category,
        quantity=entry.quantity,
        unit=entry.unit,
        confidence=entry.confidence,
        expiry_days=expiry_days_for(entry.category),
        expiry_date=estimate_expiry(entry.category, today).isoformat(),
    )


def build_items(
    entries: list[ValidEntry],
    today: date | None = None,
    id_factory: Callable[[], str] = new_item_id,
) -> list[DetectedItem]:
    """Turn validated entries into items with ids unique within the batch."""
    seen: set[str] = set()
    items: list[DetectedItem] = []
    for entry in entries:
        item_id = id_factory()
        while item_id in seen:
            item_id = id_factory()
        seen.add(item_id)
        items.append(build_item(entry, item_id, today))
    return items


def parse_items(
    text: str, today: date | None = None
) -> tuple[list[DetectedItem], list[RejectedEntry]]:
    """Parse a provider answer into normalized items and rejected entries.

    Raises:
        MalformedResponseError: If the text is not a JSON array.
    """
    valid: list[ValidEntry] = []
    rejected: list[RejectedEntry] = []
    for index, raw in enumerate(load_item_array(text)):
        result = validate_entry(index, raw)
        if isinstance(result, RejectedEntry):
            rejected.append(result)
        else:
            valid.append(result)
    return build_items(valid, today), rejected
