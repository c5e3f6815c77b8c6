"""Tests for grocery categories and keyword categorization."""

from datetime import date

import pytest

from pantry.categories import (
    CATEGORIES,
    CATEGORY_EXPIRY_DAYS,
    categorize_grocery_item,
    coerce_category,
    estimate_expiry,
    expiry_days_for,
)


class TestExpiryTable:
    @pytest.mark.parametrize(
        "category,days",
        [
            ("produce", 7),
            ("dairy", 14),
            ("meat", 3),
            ("grain", 180),
            ("canned", 365),
            ("snack", 90),
            ("beverage", 180),
            ("condiment", 365),
            ("frozen", 90),
            ("other", 30),
        ],
    )
    def test_documented_days(self, category, days):
        assert expiry_days_for(category) == days

    def test_table_covers_every_category(self):
        assert set(CATEGORY_EXPIRY_DAYS) == set(CATEGORIES)
        assert len(CATEGORIES) == 10

    def test_unknown_category_uses_other(self):
        assert expiry_days_for("spaceship") == 30

    def test_estimate_expiry(self):
        assert estimate_expiry("meat", date(2026, 1, 30)) == date(2026, 2, 2)
        assert estimate_expiry("canned", date(2026, 1, 1)) == date(2027, 1, 1)


class TestCoerceCategory:
    def test_known_value(self):
        assert coerce_category("dairy") == "dairy"

    def test_case_and_whitespace(self):
        assert coerce_category("  Produce ") == "produce"

    def test_unknown_value(self):
        assert coerce_category("vegetables") == "other"

    def test_non_string(self):
        assert coerce_category(42) == "other"
        assert coerce_category(None) == "other"


class TestCategorizeGroceryItem:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Green Apples", "produce"),
            ("Whole Milk", "dairy"),
            ("Unknown Widget", "other"),
            ("Chicken Breast", "meat"),
            ("Brown Rice", "grain"),
            ("Canned Corn", "canned"),
            ("Chocolate Bar", "snack"),
            ("Sparkling Water", "beverage"),
            ("Olive Oil", "condiment"),
            ("Frozen Peas", "frozen"),
            ("", "other"),
        ],
    )
    def test_examples(self, name, expected):
        assert categorize_grocery_item(name) == expected

    def test_case_insensitive(self):
        assert categorize_grocery_item("BANANAS") == "produce"

    def test_first_match_wins(self):
        # "orange" is a produce keyword even though this is a drink
        assert categorize_grocery_item("Orange Juice") == "produce"
        # "cream" hits dairy before "ice cream" reaches frozen
        assert categorize_grocery_item("Vanilla Ice Cream") == "dairy"
        # "sauce" is listed under canned before condiment
        assert categorize_grocery_item("Soy Sauce") == "canned"
