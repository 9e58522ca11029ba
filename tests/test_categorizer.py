"""Tests for expense categorization."""

from decimal import Decimal

import pytest

from receipt_split.categorizer import (
    Category,
    KeywordClassifier,
    classify_description,
    normalize_description,
    totals_by_category,
)


class TestKeywordClassifier:
    """Tests for the default keyword rules."""

    @pytest.mark.parametrize(
        ("description", "category"),
        [
            ("Cena con amigos", Category.FOOD),
            ("Pizza night!", Category.FOOD),
            ("Supermercado semanal", Category.GROCERIES),
            ("Taxi to the airport", Category.TRANSPORT),
            ("Hotel, 2 nights", Category.LODGING),
            ("Entradas de cine", Category.ENTERTAINMENT),
            ("Internet bill", Category.UTILITIES),
            ("Birthday present", Category.OTHER),
        ],
    )
    def test_default_rules(self, description, category):
        assert classify_description(description) == category

    def test_matches_whole_words_only(self):
        """'barbecue' should not match the 'bar' keyword."""
        assert classify_description("barbecue grill") == Category.OTHER

    def test_first_matching_rule_wins(self):
        classifier = KeywordClassifier(
            {Category.TRANSPORT: ["gas"], Category.UTILITIES: ["gas"]}
        )

        assert classifier("Gas refill") == Category.TRANSPORT

    def test_custom_default(self):
        classifier = KeywordClassifier(
            {Category.FOOD: ["tacos"]}, default=Category.LODGING
        )

        assert classifier("Tacos") == Category.FOOD
        assert classifier("Something else") == Category.LODGING


def test_normalize_description():
    assert normalize_description("  Cena, con AMIGOS! ") == ["cena", "con", "amigos"]


def test_totals_by_category(make_expense):
    expenses = [
        make_expense("e1", "30", "1", ["1"], description="Dinner"),
        make_expense("e2", "12.50", "2", ["2"], description="Lunch"),
        make_expense("e3", "8", "2", ["2"], description="Gift"),
    ]

    assert totals_by_category(expenses) == {
        Category.FOOD: Decimal("42.50"),
        Category.OTHER: Decimal("8"),
    }


def test_pluggable_classifier(make_expense):
    expenses = [make_expense("e1", "30", "1", ["1"], description="Anything")]

    totals = totals_by_category(expenses, lambda description: Category.UTILITIES)

    assert totals == {Category.UTILITIES: Decimal("30")}
