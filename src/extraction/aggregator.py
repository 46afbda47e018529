# src/extraction/aggregator.py

"""Collect price candidates across a watch's payloads and pick one.

This is the single entry point of the extraction engine.  It is pure
and synchronous: it never mutates its inputs, never performs I/O and
never raises for malformed payloads.
"""

import logging
from collections.abc import Sequence
from typing import Any

from src.extraction.locator import find_price_candidate
from src.extraction.normalizer import describe_stock, to_timestamp_string
from src.extraction.resolver import resolve_fields
from src.models.price_snapshot import PriceSnapshot
from src.models.watch import (
    HistoryEntry,
    PriceCandidate,
    WatchDetails,
    as_object,
    first_defined,
    get_path,
)

logger = logging.getLogger("watch_signal.extraction")


class _CandidateCollector:
    """Accumulates qualifying candidates in source order."""

    def __init__(self) -> None:
        self.candidates: list[PriceCandidate] = []

    def push(self, node: Any, context: str, timestamp: Any = None) -> None:
        """Run the locator on *node* and keep the result if it qualifies."""
        candidate = find_price_candidate(
            node, context, to_timestamp_string(timestamp)
        )
        if candidate is None:
            return
        if not resolve_fields(candidate.node).has_signal:
            logger.debug(
                "Dropped %s candidate (score %d): no price or stock value",
                context,
                candidate.score,
            )
            return
        self.candidates.append(candidate)

    def best(self) -> PriceCandidate | None:
        """Highest score wins; the earliest candidate wins ties."""
        best: PriceCandidate | None = None
        for candidate in self.candidates:
            if best is None or candidate.score > best.score:
                best = candidate
        return best


def _collect_from_details(
    collector: _CandidateCollector, details: WatchDetails,
) -> None:
    last_changed = details.get("last_changed")
    last_checked = details.get("last_checked")

    for key in ("latest_snapshot", "latest_data"):
        sub = details.get(key)
        collector.push(
            sub,
            key,
            first_defined(
                get_path(sub, "timestamp"), last_changed, last_checked
            ),
        )

    notification = details.get("last_notification")
    collector.push(
        notification,
        "last_notification",
        first_defined(
            get_path(notification, "timestamp"),
            get_path(notification, "date"),
            get_path(notification, "ts"),
        ),
    )

    collector.push(
        details, "watch", first_defined(last_changed, last_checked)
    )


def _collect_from_history(
    collector: _CandidateCollector, history: Sequence[HistoryEntry],
) -> None:
    for index, raw_entry in enumerate(history):
        entry = as_object(raw_entry)
        if entry is None:
            continue
        timestamp = first_defined(
            entry.get("timestamp"),
            entry.get("ts"),
            entry.get("time"),
            entry.get("date"),
        )
        collector.push(
            entry.get("snapshot"), f"history[{index}].snapshot", timestamp
        )
        collector.push(
            entry.get("data"), f"history[{index}].data", timestamp
        )
        collector.push(entry, f"history[{index}]", timestamp)


def extract_price_snapshot(
    details: WatchDetails | None,
    history: Sequence[HistoryEntry] | None,
) -> PriceSnapshot | None:
    """Extract the best price/stock signal for one watch.

    Sources are scanned in a fixed order: ``latest_snapshot``,
    ``latest_data``, ``last_notification``, the whole details object,
    then every history entry (its ``snapshot``, its ``data``, the entry
    itself) in the order given.  The globally highest-scoring candidate
    is normalised into a :class:`PriceSnapshot`.

    Returns ``None`` when no source carries a price or stock value.
    *details* may be ``None`` when fetching it failed; history alone is
    then used.
    """
    collector = _CandidateCollector()

    details_obj = as_object(details)
    if details_obj is not None:
        _collect_from_details(collector, details_obj)

    if history:
        _collect_from_history(collector, history)

    best = collector.best()
    if best is None:
        return None

    fields = resolve_fields(best.node)
    if not fields.has_signal:
        return None

    stock_label, stock_state = describe_stock(fields.stock_raw)

    logger.debug(
        "Selected %s candidate (score %d) out of %d",
        best.context,
        best.score,
        len(collector.candidates),
    )

    return PriceSnapshot(
        price=fields.price,
        previous_price=fields.previous_price,
        currency=fields.currency,
        stock_label=stock_label,
        stock_state=stock_state,
        image_url=fields.image_url,
        context=best.context,
        timestamp=best.timestamp,
    )
