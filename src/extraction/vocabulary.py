# src/extraction/vocabulary.py

"""Heuristic key vocabulary for locating and reading commerce data.

Kept as plain tables so the heuristics can be tuned and tested without
touching the traversal or resolution code.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRule:
    """A key category that contributes *weight* when present on a node."""

    category: str
    pattern: re.Pattern[str]
    weight: int


SCORING_RULES: tuple[ScoringRule, ...] = (
    ScoringRule(
        "price",
        re.compile(r"price|amount|cost", re.IGNORECASE),
        3,
    ),
    ScoringRule(
        "stock",
        re.compile(
            r"in[_-]?stock|availability|available|stock",
            re.IGNORECASE,
        ),
        2,
    ),
    ScoringRule(
        "currency",
        re.compile(r"currency|symbol", re.IGNORECASE),
        1,
    ),
)

# Bonus when any key on the path down to a node looks price-related
PATH_BONUS_PATTERN = re.compile(r"restock|price", re.IGNORECASE)
PATH_BONUS_WEIGHT = 1

# Ordered candidate keys per logical field; the first key holding a
# non-null value wins.  Dotted keys are nested lookups.
PRICE_KEYS: tuple[str, ...] = (
    "current_price",
    "price_now",
    "new_price",
    "latest_price",
    "price",
    "amount",
    "value",
    "cost",
    "current.price",
    "latest.price",
)

PREVIOUS_PRICE_KEYS: tuple[str, ...] = (
    "previous_price",
    "old_price",
    "price_was",
    "previous",
    "previous.price",
    "old.price",
)

CURRENCY_KEYS: tuple[str, ...] = (
    "currency",
    "currency_symbol",
    "currencySymbol",
    "currencyCode",
    "currency_code",
    "current.currency",
)

STOCK_KEYS: tuple[str, ...] = (
    "in_stock",
    "inStock",
    "stock",
    "available",
    "availability",
    "is_available",
    "isAvailable",
)

IMAGE_KEYS: tuple[str, ...] = (
    "image_url",
    "imageUrl",
    "image",
    "thumbnail",
    "thumbnail_url",
    "thumbnailUrl",
    "product_image",
    "productImage",
)

FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "price": PRICE_KEYS,
    "previous_price": PREVIOUS_PRICE_KEYS,
    "currency": CURRENCY_KEYS,
    "stock": STOCK_KEYS,
    "image": IMAGE_KEYS,
}
