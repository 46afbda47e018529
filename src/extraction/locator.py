# src/extraction/locator.py

"""Breadth-first search for the sub-object most likely to hold prices."""

import logging
from collections import deque
from typing import Any

from src.extraction.vocabulary import (
    PATH_BONUS_PATTERN,
    PATH_BONUS_WEIGHT,
    SCORING_RULES,
)
from src.models.watch import JsonObject, PriceCandidate, as_object, is_scalar

logger = logging.getLogger("watch_signal.extraction")


def score_node(node: JsonObject, path: tuple[str, ...] = ()) -> int:
    """Score one node on its own key/value pairs.

    Each rule in ``SCORING_RULES`` counts once if at least one key
    matches it with a scalar value.  *path* holds the keys leading from
    the root to *node*.
    """
    score = 0
    for rule in SCORING_RULES:
        if any(
            isinstance(key, str)
            and rule.pattern.search(key)
            and is_scalar(value)
            for key, value in node.items()
        ):
            score += rule.weight

    if any(
        isinstance(segment, str) and PATH_BONUS_PATTERN.search(segment)
        for segment in path
    ):
        score += PATH_BONUS_WEIGHT

    return score


def find_price_candidate(
    root: Any,
    context: str,
    timestamp: str | None = None,
) -> PriceCandidate | None:
    """Return the best-scoring node reachable from *root*.

    Only nested objects are traversed; arrays and scalars are leaves.
    Ties keep the node visited first, so shallower nodes (and earlier
    siblings at the same depth) win.  Returns ``None`` when no node
    scores above zero or *root* is not an object.
    """
    start = as_object(root)
    if start is None:
        return None

    queue: deque[tuple[JsonObject, tuple[str, ...]]] = deque(
        [(start, ())]
    )
    # A node shared by several parents is scored once, under the first
    # path that reaches it.  Parsed JSON never shares nodes.
    seen: set[int] = {id(start)}
    best: PriceCandidate | None = None

    while queue:
        node, path = queue.popleft()

        score = score_node(node, path)
        if score > 0 and (best is None or score > best.score):
            best = PriceCandidate(
                node=node,
                context=context,
                timestamp=timestamp,
                score=score,
            )

        for key, value in node.items():
            child = as_object(value)
            if child is None or id(child) in seen:
                continue
            seen.add(id(child))
            queue.append((child, path + (str(key),)))

    if best is not None:
        logger.debug(
            "Candidate in %s scored %d (keys: %s)",
            context,
            best.score,
            ", ".join(str(k) for k in best.node),
        )
    return best
