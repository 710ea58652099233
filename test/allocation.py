# python
"""
Cardinal and allocator behavioral tests.

Scope
- Validate Cardinal construction: nargs normalization into (minimum, maximum), scalar storage,
  placeholders and rejected arities.
- Validate allocate(): minimums first, left-biased greedy extras, shortfall and excess reporting.

Conventions
- Test method names follow CamelCase per project convention.
- Residues are plain sequences of strings; a str stands in for single-character tokens.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argbinder import Cardinal, allocate, MissingRequiredArgumentError, UnrecognizedArgumentsError


class TestCardinal(TestCase):
    """Arity normalization."""

    def testDefaultIsExactlyOneScalar(self):
        c = Cardinal("FILE")
        self.assertEqual((c.minimum, c.maximum, c.scalar), (1, 1, True))
        self.assertEqual(c.placeholder, "FILE")

    def testOptionalIsScalar(self):
        c = Cardinal("FILE", nargs="?")
        self.assertEqual((c.minimum, c.maximum, c.scalar), (0, 1, True))
        self.assertEqual(c.placeholder, "[FILE]")

    def testStarAndPlusAreUnbounded(self):
        star = Cardinal("FILE", nargs="*")
        plus = Cardinal("FILE", nargs="+")
        self.assertEqual((star.minimum, star.maximum), (0, None))
        self.assertEqual((plus.minimum, plus.maximum), (1, None))
        self.assertFalse(star.bounded)
        self.assertEqual(star.placeholder, "[FILE ...]")
        self.assertEqual(plus.placeholder, "FILE [FILE ...]")

    def testFixedCountIsList(self):
        c = Cardinal("XY", nargs=2)
        self.assertEqual((c.minimum, c.maximum, c.scalar), (2, 2, False))
        self.assertEqual(c.placeholder, "XY XY")

    def testExplicitBounds(self):
        c = Cardinal("N", nargs=(1, 3))
        self.assertEqual((c.minimum, c.maximum), (1, 3))
        self.assertEqual(c.placeholder, "N [N ...]")
        self.assertEqual(Cardinal("N", nargs=(0, None)).maximum, None)

    def testRejectedArities(self):
        with self.assertRaises(ValueError):
            Cardinal("N", nargs=0)
        with self.assertRaises(TypeError):
            Cardinal("N", nargs=True)
        with self.assertRaises(ValueError):
            Cardinal("N", nargs="...")
        with self.assertRaises(ValueError):
            Cardinal("N", nargs=(2, 1))
        with self.assertRaises(ValueError):
            Cardinal("N", nargs=(-1, 1))
        with self.assertRaises(TypeError):
            Cardinal("N", nargs=1.5)

    def testMetavarMustBeNonEmpty(self):
        with self.assertRaises(ValueError):
            Cardinal("  ")
        with self.assertRaises(TypeError):
            Cardinal(3)


class TestAllocate(TestCase):
    """Two-pass greedy allocation."""

    def testSingleThenUnbounded(self):
        chunks = allocate([Cardinal("A"), Cardinal("B", nargs="+")], "abcde")
        self.assertEqual(chunks, (("a",), ("b", "c", "d", "e")))

    def testUnboundedThenSingle(self):
        chunks = allocate([Cardinal("A", nargs="+"), Cardinal("B")], "abcde")
        self.assertEqual(chunks, (("a", "b", "c", "d"), ("e",)))

    def testExtrasGoLeftFirst(self):
        cardinals = [Cardinal("A", nargs="*"), Cardinal("B", nargs="*")]
        self.assertEqual(allocate(cardinals, "abc"), (("a", "b", "c"), ()))

    def testOptionalBeforeRequired(self):
        cardinals = [Cardinal("A", nargs="?"), Cardinal("B")]
        self.assertEqual(allocate(cardinals, "x"), ((), ("x",)))
        self.assertEqual(allocate(cardinals, "xy"), (("x",), ("y",)))

    def testBoundedMaximumRespected(self):
        cardinals = [Cardinal("A", nargs=(1, 2)), Cardinal("B", nargs="*")]
        self.assertEqual(allocate(cardinals, "abcd"), (("a", "b"), ("c", "d")))

    def testEmptyResidueWithNoCardinals(self):
        self.assertEqual(allocate([], []), ())

    def testShortfallNamesFirstUnsatisfiedCardinal(self):
        with self.assertRaises(MissingRequiredArgumentError) as context:
            allocate([Cardinal("SRC"), Cardinal("DST")], ["a"])
        self.assertEqual(context.exception.input, "DST")
        self.assertIn("'DST'", context.exception.message)

    def testExcessReportsExtraTokens(self):
        with self.assertRaises(UnrecognizedArgumentsError) as context:
            allocate([Cardinal("A")], ["a", "b", "c"])
        self.assertEqual(context.exception.tokens, ("b", "c"))
        self.assertIn("b c", context.exception.message)

    def testExcessWithoutCardinals(self):
        with self.assertRaises(UnrecognizedArgumentsError) as context:
            allocate([], ["a"])
        self.assertIn("no positional", context.exception.hint)


if __name__ == "__main__":
    unittest.main()
