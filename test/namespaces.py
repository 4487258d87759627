# python
"""
Namespace module behavioral tests.

Scope
- Validate keyed storage (set/has/remove/keys/size/empty/clear).
- Validate typed lookup with and without defaults.
- Validate isolation: reads and copies never alias stored payloads.
- Validate attribute access and representations.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argot import KeyNotFoundError, Namespace, TypeMismatchError, Value


class TestNamespace(TestCase):

    def setUp(self):
        self.namespace = Namespace({"count": 3, "name": "Alice", "files": ["a.txt"]})

    def testGet(self):
        self.assertEqual(self.namespace.get("count"), 3)
        self.assertEqual(self.namespace.get("count", type=int), 3)
        self.assertEqual(self.namespace.get("name", type=str), "Alice")

    def testGetWrongType(self):
        with self.assertRaises(TypeMismatchError):
            self.namespace.get("count", type=str)

    def testGetMissing(self):
        with self.assertRaises(KeyNotFoundError) as context:
            self.namespace.get("missing")
        self.assertIsInstance(context.exception, KeyError)
        self.assertEqual(context.exception.options["key"], "missing")

    def testGetWithDefaultNeverRaisesForAbsence(self):
        self.assertEqual(self.namespace.get("missing", 0), 0)
        self.assertIsNone(self.namespace.get("missing", None))

    def testGetWithDefaultStillTypeChecks(self):
        self.assertEqual(self.namespace.get("count", 0), 3)
        with self.assertRaises(TypeMismatchError):
            self.namespace.get("count", "zero")

    def testNoneDefaultSkipsTypeCheck(self):
        self.assertEqual(self.namespace.get("name", None), "Alice")

    def testSetAndOverwrite(self):
        self.namespace.set("count", 4)
        self.assertEqual(self.namespace.get("count"), 4)
        self.namespace.set("flag", Value(True))
        self.assertIs(self.namespace.get("flag", type=bool), True)

    def testSetRejectsNonStringKeys(self):
        with self.assertRaises(TypeError):
            self.namespace.set(1, "x")

    def testHasAndRemove(self):
        self.assertTrue(self.namespace.has("count"))
        self.assertTrue(self.namespace.contains("count"))
        self.assertIn("count", self.namespace)
        self.assertTrue(self.namespace.remove("count"))
        self.assertFalse(self.namespace.remove("count"))
        self.assertFalse(self.namespace.has("count"))

    def testKeysKeepInsertionOrder(self):
        self.assertEqual(self.namespace.keys(), ["count", "name", "files"])
        self.assertEqual(list(self.namespace), ["count", "name", "files"])

    def testSizeEmptyClear(self):
        self.assertEqual(self.namespace.size(), 3)
        self.assertEqual(len(self.namespace), 3)
        self.assertFalse(self.namespace.empty())
        self.namespace.clear()
        self.assertTrue(self.namespace.empty())
        self.assertTrue(Namespace().empty())

    def testValue(self):
        self.assertEqual(self.namespace.value("count"), Value(3))
        with self.assertRaises(KeyNotFoundError):
            self.namespace.value("missing")

    def testItems(self):
        self.assertEqual(dict(self.namespace.items())["files"], Value(["a.txt"]))

    def testAsDict(self):
        self.assertEqual(self.namespace.as_dict(), {"count": 3, "name": "Alice", "files": ["a.txt"]})

    def testReadsDoNotAlias(self):
        self.namespace.get("files").append("b.txt")
        self.namespace.value("files").reset()
        self.assertEqual(self.namespace.get("files"), ["a.txt"])

    def testCopiesAreIsolated(self):
        for duplicate in (self.namespace.copy(), copy.copy(self.namespace), copy.deepcopy(self.namespace)):
            duplicate.set("files", ["b.txt"])
            duplicate.remove("count")
            self.assertEqual(self.namespace.get("files"), ["a.txt"])
            self.assertTrue(self.namespace.has("count"))

    def testConstructionFromPairsAndNamespace(self):
        self.assertEqual(Namespace([("count", 3)]).get("count"), 3)
        self.assertEqual(Namespace(self.namespace), self.namespace)

    def testAttributeAccess(self):
        self.assertEqual(self.namespace.count, 3)
        with self.assertRaises(AttributeError):
            self.namespace.missing

    def testEquality(self):
        self.assertEqual(Namespace({"a": 1}), Namespace({"a": 1}))
        self.assertNotEqual(Namespace({"a": 1}), Namespace({"a": True}))

    def testRepr(self):
        self.assertEqual(repr(Namespace({"count": 3})), "Namespace(count=3)")


if __name__ == "__main__":
    unittest.main()
