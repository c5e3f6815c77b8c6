"""Grocery categories, shelf-life estimates and keyword categorization."""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Literal, get_args

Category = Literal[
    "produce",
    "dairy",
    "meat",
    "grain",
    "canned",
    "snack",
    "beverage",
    "condiment",
    "frozen",
    "other",
]

CATEGORIES: tuple[str, ...] = get_args(Category)

# Category-based expiry estimates (days from detection)
CATEGORY_EXPIRY_DAYS: dict[str, int] = {
    "produce": 7,
    "dairy": 14,
    "meat": 3,
    "grain": 180,
    "canned": 365,
    "snack": 90,
    "beverage": 180,
    "condiment": 365,
    "frozen": 90,
    "other": 30,
}

# Ordered keyword rules, first match wins
_CATEGORY_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("produce", re.compile(
        r"apple|banana|orange|grape|berry|mango|pear|peach|plum|melon|tomato|"
        r"potato|carrot|onion|lettuce|spinach|kale|broccoli|cucumber|pepper",
        re.IGNORECASE,
    )),
    ("dairy", re.compile(r"milk|cheese|yogurt|butter|cream|eggs?", re.IGNORECASE)),
    ("meat", re.compile(
        r"chicken|beef|pork|fish|salmon|tuna|turkey|lamb|bacon|sausage|ham",
        re.IGNORECASE,
    )),
    ("grain", re.compile(
        r"bread|rice|pasta|cereal|flour|oats|quinoa|wheat|barley",
        re.IGNORECASE,
    )),
    ("canned", re.compile(r"canned|tin|beans|soup|sauce", re.IGNORECASE)),
    ("snack", re.compile(
        r"chip|cookie|cracker|candy|chocolate|popcorn|nuts|bar",
        re.IGNORECASE,
    )),
    ("beverage", re.compile(
        r"juice|soda|water|tea|coffee|drink|beer|wine",
        re.IGNORECASE,
    )),
    ("condiment", re.compile(
        r"sauce|ketchup|mustard|mayo|dressing|oil|vinegar|spice|salt|pepper|sugar",
        re.IGNORECASE,
    )),
    ("frozen", re.compile(r"frozen|ice cream|pizza", re.IGNORECASE)),
]


def categorize_grocery_item(item_name: str) -> Category:
    """Guess the category of a free-text food name.

    Used for manually entered items; AI-detected items carry the category
    chosen by the provider.
    """
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(item_name):
            return category  # type: ignore[return-value]
    return "other"


def coerce_category(value: object) -> Category:
    """Map provider output onto one of the fixed categories."""
    if isinstance(value, str):
        cleaned = value.strip().lower()
        if cleaned in CATEGORY_EXPIRY_DAYS:
            return cleaned  # type: ignore[return-value]
    return "other"


def expiry_days_for(category: str) -> int:
    return CATEGORY_EXPIRY_DAYS.get(category, CATEGORY_EXPIRY_DAYS["other"])


def estimate_expiry(category: str, today: date | None = None) -> date:
    """Estimate an expiration date for a freshly detected item."""
    start = today or date.today()
    return start + timedelta(days=expiry_days_for(category))
