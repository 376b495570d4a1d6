#!/usr/bin/env python3
"""
Transaction Classifier

Maps free-text payment descriptions to spending categories by ordered keyword
matching. The first category (in table order) with a keyword contained in the
lower-cased description wins; anything unmatched falls back to Others.

Classification is a pure function of the description and the keyword table.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from pathlib import Path

import yaml

from .core.currency import USD_TO_INR_RATE
from .core.models import Transaction, TransactionCategory
from .core.money import convert_to_inr

logger = logging.getLogger(__name__)

KeywordTable = Mapping[TransactionCategory, tuple[str, ...]]

DEFAULT_CATEGORY = TransactionCategory.OTHERS

# Declaration order is precedence order
DEFAULT_KEYWORD_TABLE: dict[TransactionCategory, tuple[str, ...]] = {
    TransactionCategory.FOOD: (
        "swiggy",
        "zomato",
        "restaurant",
        "cafe",
        "dominos",
        "pizza",
        "mcdonald",
        "kfc",
        "starbucks",
        "chai",
        "biryani",
        "bakery",
        "eatsure",
    ),
    TransactionCategory.GROCERIES: (
        "bigbasket",
        "blinkit",
        "zepto",
        "grofers",
        "dmart",
        "jiomart",
        "instamart",
        "kirana",
        "supermarket",
        "grocery",
        "milk",
        "vegetable",
    ),
    TransactionCategory.CLOTHING: (
        "myntra",
        "ajio",
        "zara",
        "h&m",
        "max fashion",
        "pantaloons",
        "westside",
        "lifestyle",
        "fabindia",
        "clothing",
    ),
    TransactionCategory.ENTERTAINMENT: (
        "bookmyshow",
        "pvr",
        "inox",
        "netflix",
        "hotstar",
        "spotify",
        "prime video",
        "youtube",
        "movie",
        "gaming",
    ),
    TransactionCategory.E_COMMERCE: (
        "amazon",
        "flipkart",
        "meesho",
        "snapdeal",
        "nykaa",
        "tatacliq",
        "shopsy",
    ),
    TransactionCategory.TRAVEL_TRANSPORT: (
        "uber",
        "ola",
        "rapido",
        "irctc",
        "makemytrip",
        "goibibo",
        "redbus",
        "indigo",
        "air india",
        "metro",
        "fastag",
        "petrol",
        "fuel",
        "cleartrip",
    ),
    TransactionCategory.UTILITIES_BILLS: (
        "electricity",
        "recharge",
        "airtel",
        "jio",
        "vodafone",
        "bsnl",
        "broadband",
        "gas",
        "water bill",
        "dth",
        "bill payment",
        "rent",
    ),
    TransactionCategory.HEALTHCARE: (
        "pharmacy",
        "apollo",
        "medplus",
        "1mg",
        "pharmeasy",
        "hospital",
        "clinic",
        "doctor",
        "diagnostic",
        "netmeds",
    ),
    TransactionCategory.EDUCATION: (
        "school",
        "college",
        "university",
        "udemy",
        "coursera",
        "byju",
        "unacademy",
        "tuition",
        "books",
        "exam fee",
    ),
    TransactionCategory.INVESTMENTS: (
        "zerodha",
        "groww",
        "upstox",
        "mutual fund",
        "sip",
        "kuvera",
        "coin by",
        "smallcase",
        "nps",
        "ppf",
    ),
}


class TransactionClassifier:
    """
    Keyword classifier over an injected, ordered category table.

    Keywords are lower-cased once at construction; the table is not mutated
    afterwards.
    """

    def __init__(self, keyword_table: KeywordTable | None = None):
        table = DEFAULT_KEYWORD_TABLE if keyword_table is None else keyword_table
        self._table: tuple[tuple[TransactionCategory, tuple[str, ...]], ...] = tuple(
            (category, tuple(keyword.lower() for keyword in keywords if keyword))
            for category, keywords in table.items()
        )

    @property
    def categories(self) -> list[TransactionCategory]:
        """Categories in precedence order."""
        return [category for category, _ in self._table]

    def classify(self, description: str | None) -> TransactionCategory:
        """
        Classify a description.

        Args:
            description: Free-text payment description

        Returns:
            First matching category in table order, or Others
        """
        if not description:
            return DEFAULT_CATEGORY

        lower_desc = description.lower()
        for category, keywords in self._table:
            for keyword in keywords:
                if keyword in lower_desc:
                    return category

        return DEFAULT_CATEGORY


_default_classifier = TransactionClassifier()


def classify(description: str | None) -> TransactionCategory:
    """Classify with the built-in keyword table."""
    return _default_classifier.classify(description)


def load_keyword_table(path: str | Path) -> dict[TransactionCategory, tuple[str, ...]]:
    """
    Load a category keyword table from a YAML (or JSON) file.

    The file maps category names to keyword lists, in precedence order:

        Food: [swiggy, zomato]
        Travel & Transport: [uber, irctc]

    Raises:
        ValueError: If the file is not a mapping, names an unknown category,
            or a keyword list is not a list of strings
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Category file must be a mapping of category to keywords: {path}")

    table: dict[TransactionCategory, tuple[str, ...]] = {}
    for name, keywords in raw.items():
        try:
            category = TransactionCategory(name)
        except ValueError as e:
            raise ValueError(f"Unknown category {name!r} in {path}") from e
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise ValueError(f"Keywords for {name!r} must be a list of strings in {path}")
        table[category] = tuple(keywords)

    logger.info("Loaded %d categories from %s", len(table), path)
    return table


def summarize_by_category(
    transactions: Iterable[Transaction], rate: Decimal = USD_TO_INR_RATE
) -> dict[TransactionCategory, dict[str, Decimal | int]]:
    """
    Count and total (in INR) transactions per category.

    Unclassified transactions are counted under Others.

    Returns:
        Mapping of category to {"count": int, "total": Decimal}, largest total first
    """
    stats: dict[TransactionCategory, dict[str, Decimal | int]] = {}

    for transaction in transactions:
        category = transaction.category or DEFAULT_CATEGORY
        entry = stats.setdefault(category, {"count": 0, "total": Decimal("0")})
        entry["count"] += 1
        entry["total"] += convert_to_inr(transaction.amount, rate)

    return dict(sorted(stats.items(), key=lambda item: item[1]["total"], reverse=True))
