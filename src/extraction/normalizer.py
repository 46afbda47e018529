# src/extraction/normalizer.py

"""Scalar normalisation: stock labels, display prices, timestamps."""

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger("watch_signal.extraction")

IN_STOCK_LABEL = "In stock"
OUT_OF_STOCK_LABEL = "Out of stock"
UNKNOWN_LABEL = "Unknown"

# Positive tokens are checked first; "Not available" therefore reads as
# in stock because it contains "available".
_POSITIVE_STOCK_TOKENS: tuple[str, ...] = (
    "in stock",
    "instock",
    "available",
    "true",
    "yes",
)
_NEGATIVE_STOCK_TOKENS: tuple[str, ...] = (
    "out of stock",
    "oos",
    "sold out",
    "false",
    "no",
)

_CURRENCY_CODE_RE = re.compile(r"^[A-Za-z]{3}$")

_EPOCH_MILLIS_THRESHOLD = 1e12
_EPOCH_SECONDS_THRESHOLD = 1e9


def _is_number(value: Any) -> bool:
    """True for ints/floats, excluding bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _finite_float(value: Any) -> float | None:
    """Return *value* as a finite float, or None if it has no such form.

    JSON integers are unbounded, so very long ones overflow a float.
    """
    if not _is_number(value):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def describe_stock(raw: Any) -> tuple[str, bool | None]:
    """Map a raw stock value to a display label and a tri-state flag.

    Never raises, whatever the input shape.
    """
    if isinstance(raw, bool):
        return (IN_STOCK_LABEL if raw else OUT_OF_STOCK_LABEL), raw

    if _is_number(raw):
        in_stock = raw > 0
        return (
            IN_STOCK_LABEL if in_stock else OUT_OF_STOCK_LABEL
        ), in_stock

    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if not normalized:
            return raw, None
        if any(token in normalized for token in _POSITIVE_STOCK_TOKENS):
            return raw, True
        if any(token in normalized for token in _NEGATIVE_STOCK_TOKENS):
            return raw, False
        return raw, None

    if raw is None:
        return UNKNOWN_LABEL, None

    try:
        label = str(raw)
    except Exception:
        logger.debug(
            "Could not stringify stock value of type %s",
            type(raw).__name__,
            exc_info=True,
        )
        label = UNKNOWN_LABEL
    return label, None


def format_price(raw: Any, currency: Any = None) -> str | None:
    """Render a raw price for display, prefixed with its currency.

    Numbers get two decimals, strings are only stripped (they may
    already carry a symbol).  A three-letter code is separated by a
    space (``"USD 19.50"``); any other token is glued on (``"$19.50"``).
    """
    if _is_number(raw):
        number = _finite_float(raw)
        if number is None:
            return None
        value = f"{number:.2f}"
    elif isinstance(raw, str):
        value = raw.strip()
    else:
        return None

    if not value:
        return None

    currency_str = currency.strip() if isinstance(currency, str) else ""
    if currency_str:
        if _CURRENCY_CODE_RE.match(currency_str):
            return f"{currency_str} {value}"
        return f"{currency_str}{value}"
    return value


def to_timestamp_string(value: Any) -> str | None:
    """Normalise a raw timestamp to a string.

    Non-empty strings pass through unchanged.  Numbers above 1e12 are
    epoch milliseconds, above 1e9 epoch seconds; smaller numbers are
    implausible and dropped.
    """
    if isinstance(value, str):
        return value if value.strip() else None

    number = _finite_float(value)
    if number is None:
        return None

    if number > _EPOCH_MILLIS_THRESHOLD:
        seconds = number / 1000
    elif number > _EPOCH_SECONDS_THRESHOLD:
        seconds = number
    else:
        return None

    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return moment.isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
