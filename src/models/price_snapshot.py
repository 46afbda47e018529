# src/models/price_snapshot.py

"""Canonical price/stock record produced by the extraction engine."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class PriceSnapshot:
    """Normalised commerce signal for one watch at one point in time.

    ``stock_state`` is tri-state: ``True`` in stock, ``False`` out of
    stock, ``None`` unknown.
    """

    price: str | None
    previous_price: str | None
    currency: str | None
    stock_label: str
    stock_state: bool | None
    image_url: str | None = None
    context: str | None = None
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable copy of the snapshot."""
        return asdict(self)
