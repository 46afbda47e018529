# tests/test_locator.py

"""Tests for node scoring and the breadth-first candidate search."""

import copy
import unittest
from typing import Any

from src.extraction.locator import find_price_candidate, score_node
from src.extraction.vocabulary import SCORING_RULES


class TestScoringVocabulary(unittest.TestCase):
    """The vocabulary table matches the keys it is meant to."""

    def _rule(self, category: str) -> Any:
        return next(r for r in SCORING_RULES if r.category == category)

    def test_weights(self) -> None:
        """Price outweighs stock, which outweighs currency."""
        weights = {r.category: r.weight for r in SCORING_RULES}
        self.assertEqual(weights, {"price": 3, "stock": 2, "currency": 1})

    def test_price_pattern(self) -> None:
        """Price-ish keys match case-insensitively."""
        rule = self._rule("price")
        for key in ("price", "Price", "salePrice", "amount", "COST"):
            with self.subTest(key=key):
                self.assertIsNotNone(rule.pattern.search(key))
        self.assertIsNone(rule.pattern.search("title"))

    def test_stock_pattern(self) -> None:
        """Stock-ish keys cover the usual spellings."""
        rule = self._rule("stock")
        for key in (
            "in_stock", "in-stock", "inStock", "availability",
            "available", "stock_level",
        ):
            with self.subTest(key=key):
                self.assertIsNotNone(rule.pattern.search(key))

    def test_currency_pattern(self) -> None:
        """Currency-ish keys include symbols."""
        rule = self._rule("currency")
        for key in ("currency", "currencyCode", "symbol"):
            with self.subTest(key=key):
                self.assertIsNotNone(rule.pattern.search(key))


class TestScoreNode(unittest.TestCase):
    """score_node unit tests."""

    def test_single_categories(self) -> None:
        """Each category contributes its weight once."""
        self.assertEqual(score_node({"price": 10}), 3)
        self.assertEqual(score_node({"in_stock": True}), 2)
        self.assertEqual(score_node({"currency": "USD"}), 1)

    def test_all_categories(self) -> None:
        """Price, stock and currency add up."""
        node = {"price": 10, "in_stock": True, "currency": "USD"}
        self.assertEqual(score_node(node), 6)

    def test_category_counts_once(self) -> None:
        """Several price keys still count as one category hit."""
        self.assertEqual(
            score_node({"price": 1, "old_price": 2, "amount": 3}), 3
        )

    def test_key_matching_two_categories(self) -> None:
        """'priceCurrency' is both price-ish and currency-ish."""
        self.assertEqual(score_node({"priceCurrency": "USD"}), 4)

    def test_null_object_and_array_values_ignored(self) -> None:
        """Only scalar values count towards the score."""
        self.assertEqual(score_node({"price": None}), 0)
        self.assertEqual(score_node({"price": {"amount": 1}}), 0)
        self.assertEqual(score_node({"prices": [1, 2]}), 0)

    def test_irrelevant_keys_score_zero(self) -> None:
        """Titles and URLs carry no commerce signal."""
        self.assertEqual(score_node({"title": "x", "url": "y"}), 0)

    def test_path_bonus(self) -> None:
        """A restock/price path segment adds one point."""
        self.assertEqual(score_node({"in_stock": True}, ("restock",)), 3)
        self.assertEqual(
            score_node({"value": 1}, ("data", "PriceInfo")), 1
        )
        self.assertEqual(score_node({"in_stock": True}, ("data",)), 2)


class TestFindPriceCandidate(unittest.TestCase):
    """find_price_candidate unit tests."""

    def test_non_object_root(self) -> None:
        """Non-object roots produce no candidate."""
        for root in (None, [], "price", 5):
            with self.subTest(root=root):
                self.assertIsNone(find_price_candidate(root, "ctx"))

    def test_no_scoring_node(self) -> None:
        """A tree without commerce keys yields no candidate."""
        root = {"title": "x", "meta": {"lang": "en"}}
        self.assertIsNone(find_price_candidate(root, "ctx"))

    def test_finds_nested_best_node(self) -> None:
        """The highest-scoring descendant is returned."""
        offer = {"price": 5, "currency": "USD"}
        root = {"meta": {"title": "x"}, "offer": offer}
        candidate = find_price_candidate(root, "latest_snapshot", "ts-1")
        assert candidate is not None
        self.assertIs(candidate.node, offer)
        self.assertEqual(candidate.score, 4)
        self.assertEqual(candidate.context, "latest_snapshot")
        self.assertEqual(candidate.timestamp, "ts-1")

    def test_equal_siblings_first_wins(self) -> None:
        """Ties between siblings keep the first one visited."""
        first = {"price": 1}
        root = {"a": first, "b": {"price": 2}}
        candidate = find_price_candidate(root, "ctx")
        assert candidate is not None
        self.assertIs(candidate.node, first)

    def test_shallower_node_wins_tie(self) -> None:
        """A root scoring as high as its child wins."""
        root = {"price": 1, "child": {"price": 2}}
        candidate = find_price_candidate(root, "ctx")
        assert candidate is not None
        self.assertIs(candidate.node, root)

    def test_path_bonus_breaks_tie(self) -> None:
        """A child under a price-ish key outranks an equal parent."""
        child = {"amount": 2}
        root = {"price": 1, "price_info": child}
        candidate = find_price_candidate(root, "ctx")
        assert candidate is not None
        self.assertIs(candidate.node, child)
        self.assertEqual(candidate.score, 4)

    def test_arrays_are_not_traversed(self) -> None:
        """Objects inside arrays are never visited."""
        root = {"offers": [{"price": 1, "in_stock": True}]}
        self.assertIsNone(find_price_candidate(root, "ctx"))

    def test_deep_bonus_inherited_from_ancestor(self) -> None:
        """The path bonus applies to every descendant of a price key."""
        leaf = {"in_stock": True}
        root = {"restock": {"details": leaf}}
        candidate = find_price_candidate(root, "ctx")
        assert candidate is not None
        self.assertIs(candidate.node, leaf)
        self.assertEqual(candidate.score, 3)

    def test_cyclic_structure_terminates(self) -> None:
        """A self-referencing object is visited once."""
        root: dict[str, Any] = {"price": 1}
        root["self"] = root
        candidate = find_price_candidate(root, "ctx")
        assert candidate is not None
        self.assertEqual(candidate.score, 3)

    def test_shared_node_scored_at_first_path(self) -> None:
        """A node reachable twice keeps the score of its first path."""
        shared = {"stock": 1}
        root = {"info": shared, "price_box": shared}
        candidate = find_price_candidate(root, "ctx")
        assert candidate is not None
        self.assertIs(candidate.node, shared)
        self.assertEqual(candidate.score, 2)

    def test_input_not_mutated(self) -> None:
        """The search never modifies the object graph."""
        root = {"a": {"price": 1, "tags": ["x"]}, "b": {"stock": 2}}
        before = copy.deepcopy(root)
        find_price_candidate(root, "ctx")
        self.assertEqual(root, before)


if __name__ == "__main__":
    unittest.main()
