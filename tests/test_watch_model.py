# tests/test_watch_model.py

"""Tests for the checked JSON access helpers."""

import unittest
from types import MappingProxyType

from src.models.watch import (
    as_object,
    first_defined,
    get_path,
    is_array,
    is_scalar,
)


class TestJsonHelpers(unittest.TestCase):
    """Checked accessors over untyped JSON."""

    def test_as_object(self) -> None:
        """Only mappings are objects."""
        self.assertEqual(as_object({"a": 1}), {"a": 1})
        proxy = MappingProxyType({"a": 1})
        self.assertIs(as_object(proxy), proxy)
        for value in (None, [], "x", 1, True):
            with self.subTest(value=value):
                self.assertIsNone(as_object(value))

    def test_is_array(self) -> None:
        """Lists and tuples are arrays, strings are not."""
        self.assertTrue(is_array([1]))
        self.assertTrue(is_array(()))
        self.assertFalse(is_array("abc"))
        self.assertFalse(is_array(b"abc"))
        self.assertFalse(is_array({"a": 1}))

    def test_is_scalar(self) -> None:
        """Scalars are non-null, non-object, non-array values."""
        for value in ("x", "", 0, 1.5, False):
            with self.subTest(value=value):
                self.assertTrue(is_scalar(value))
        for value in (None, {}, [], (1,)):
            with self.subTest(value=value):
                self.assertFalse(is_scalar(value))

    def test_get_path(self) -> None:
        """Dotted lookups stop at the first non-object."""
        node = {"current": {"price": 5}, "flat": 3}
        self.assertEqual(get_path(node, "current.price"), 5)
        self.assertEqual(get_path(node, "flat"), 3)
        self.assertIsNone(get_path(node, "flat.price"))
        self.assertIsNone(get_path(node, "missing.price"))
        self.assertIsNone(get_path(None, "price"))
        self.assertIsNone(get_path([1, 2], "0"))

    def test_first_defined(self) -> None:
        """Only None is skipped."""
        self.assertEqual(first_defined(None, 0, 1), 0)
        self.assertIs(first_defined(None, False), False)
        self.assertIsNone(first_defined(None, None))
        self.assertIsNone(first_defined())


if __name__ == "__main__":
    unittest.main()
