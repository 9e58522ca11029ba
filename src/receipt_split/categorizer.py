"""Keyword-based expense categorization for reports."""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from enum import Enum

from .models import Expense

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Spending categories shown in the report."""

    FOOD = "Food & Dining"
    GROCERIES = "Groceries"
    TRANSPORT = "Transport"
    LODGING = "Lodging"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    OTHER = "Other"


Classifier = Callable[[str], Category]

DEFAULT_RULES: dict[Category, frozenset[str]] = {
    Category.FOOD: frozenset(
        {
            "dinner", "lunch", "breakfast", "restaurant", "pizza", "coffee",
            "cafe", "bar", "drinks", "cena", "almuerzo", "desayuno",
            "comida", "restaurante", "café", "tacos",
        }
    ),
    Category.GROCERIES: frozenset(
        {
            "groceries", "grocery", "supermarket", "market", "super",
            "supermercado", "mercado", "despensa", "compras",
        }
    ),
    Category.TRANSPORT: frozenset(
        {
            "taxi", "uber", "bus", "train", "flight", "gas", "fuel", "parking",
            "toll", "gasolina", "vuelo", "tren", "estacionamiento", "peaje",
        }
    ),
    Category.LODGING: frozenset(
        {"hotel", "hostel", "airbnb", "rent", "alquiler", "hospedaje", "cabaña"}
    ),
    Category.ENTERTAINMENT: frozenset(
        {
            "movie", "movies", "cinema", "concert", "tickets", "museum", "cine",
            "concierto", "entradas", "museo",
        }
    ),
    Category.UTILITIES: frozenset(
        {
            "electricity", "water", "internet", "wifi", "phone", "luz", "agua",
            "teléfono", "telefono",
        }
    ),
}

_WORD = re.compile(r"\w+")


def normalize_description(description: str) -> list[str]:
    """
    Split a description into lowercase words.

    Args:
        description: The raw expense description

    Returns:
        Words in order of appearance
    """
    return _WORD.findall(description.lower())


class KeywordClassifier:
    """
    Classifies descriptions by keyword lookup.

    Rules are checked in insertion order and the first category with a
    matching word wins. Descriptions with no match fall back to ``default``.
    """

    def __init__(
        self,
        rules: Mapping[Category, Iterable[str]] | None = None,
        default: Category = Category.OTHER,
    ):
        """Initialize the classifier with keyword rules."""
        source = DEFAULT_RULES if rules is None else rules
        self.rules = {
            category: frozenset(word.lower() for word in words)
            for category, words in source.items()
        }
        self.default = default

    def __call__(self, description: str) -> Category:
        """Classify a description."""
        words = set(normalize_description(description))
        for category, keywords in self.rules.items():
            if words & keywords:
                return category
        logger.debug(f"No category rule matched '{description}'")
        return self.default


classify_description: Classifier = KeywordClassifier()


def totals_by_category(
    expenses: Iterable[Expense], classifier: Classifier = classify_description
) -> dict[Category, Decimal]:
    """Sum expense amounts per category, skipping categories with no spend."""
    totals: dict[Category, Decimal] = {}
    for expense in expenses:
        category = classifier(expense.description)
        totals[category] = totals.get(category, Decimal("0")) + expense.amount
    return totals
