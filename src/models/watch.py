# src/models/watch.py

"""Read-only views over changedetection.io watch payloads.

Watch details and history entries are schema-less JSON.  Every access
goes through the checked helpers below so that a lookup on the wrong
JSON kind yields ``None`` instead of raising.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

JsonObject: TypeAlias = Mapping[str, Any]

# Current state of one watch (GET /api/v1/watch/<uuid>)
WatchDetails: TypeAlias = JsonObject

# One past observation (GET /api/v1/watch/<uuid>/history)
HistoryEntry: TypeAlias = JsonObject


def as_object(value: Any) -> JsonObject | None:
    """Return *value* if it is a JSON object, else ``None``."""
    if isinstance(value, Mapping):
        return value
    return None


def is_array(value: Any) -> bool:
    """True for JSON arrays (lists/tuples, never strings or bytes)."""
    return isinstance(value, Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )


def is_scalar(value: Any) -> bool:
    """True for non-null values that are neither objects nor arrays."""
    return (
        value is not None
        and not isinstance(value, Mapping)
        and not is_array(value)
    )


def get_path(node: Any, dotted_key: str) -> Any:
    """Look up ``"a.b.c"`` through nested objects.

    Returns ``None`` as soon as an intermediate value is not an object.
    """
    current: Any = node
    for part in dotted_key.split("."):
        obj = as_object(current)
        if obj is None:
            return None
        current = obj.get(part)
    return current


def first_defined(*values: Any) -> Any:
    """Return the first argument that is not ``None``."""
    for value in values:
        if value is not None:
            return value
    return None


@dataclass
class PriceCandidate:
    """A sub-object judged plausible to hold commerce data."""

    node: JsonObject
    context: str
    timestamp: str | None
    score: int
