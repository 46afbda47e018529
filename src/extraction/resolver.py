# src/extraction/resolver.py

"""Resolve logical commerce fields on a winning candidate node."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from src.extraction.normalizer import format_price
from src.extraction.vocabulary import FIELD_KEYS
from src.models.watch import JsonObject, get_path


def first_present(node: JsonObject, keys: Iterable[str]) -> Any:
    """Return the value of the first key in *keys* that is not ``None``.

    Key order is a priority contract: earlier keys always win,
    regardless of how the node was scored.
    """
    for key in keys:
        value = get_path(node, key)
        if value is not None:
            return value
    return None


def _http_url(value: Any) -> str | None:
    """Return the stripped URL when *value* is an http(s) string."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if trimmed.startswith("http") else None


@dataclass(frozen=True)
class ResolvedFields:
    """Raw field values read from one node, plus derived display prices."""

    price_raw: Any
    previous_raw: Any
    currency_raw: Any
    stock_raw: Any
    image_url: str | None

    @property
    def price(self) -> str | None:
        return format_price(self.price_raw, self.currency_raw)

    @property
    def previous_price(self) -> str | None:
        return format_price(self.previous_raw, self.currency_raw)

    @property
    def currency(self) -> str | None:
        if isinstance(self.currency_raw, str):
            return self.currency_raw
        return None

    @property
    def has_signal(self) -> bool:
        """False when the node carries no price, previous price or stock.

        Only a missing stock value counts as absent.  A falsy value such
        as ``False``, ``0`` or ``""`` is still a signal, so an
        out-of-stock flag with no price yields a snapshot.
        """
        return (
            self.price is not None
            or self.previous_price is not None
            or self.stock_raw is not None
        )


def resolve_fields(node: JsonObject) -> ResolvedFields:
    """Read every logical field from *node* using the ordered key lists."""
    return ResolvedFields(
        price_raw=first_present(node, FIELD_KEYS["price"]),
        previous_raw=first_present(node, FIELD_KEYS["previous_price"]),
        currency_raw=first_present(node, FIELD_KEYS["currency"]),
        stock_raw=first_present(node, FIELD_KEYS["stock"]),
        image_url=_http_url(first_present(node, FIELD_KEYS["image"])),
    )
