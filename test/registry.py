# python
"""
Registry behavioral tests (option name rules and lookups).

Scope
- Validate name rules: short names take one character, long names at least one and never "=".
- Validate uniqueness across short and long names, and the frozen state.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argbinder import Handle, ConfigurationError
from argbinder.registry import Registry


class TestRegistry(TestCase):
    """Name validation and lookups."""

    def setUp(self):
        self.registry = Registry()

    def testRegisterAndLookup(self):
        self.registry.register("-v", Handle(0, 1))
        self.registry.register("--verbose", Handle(0, 1))
        self.assertEqual(self.registry.lookup("-v"), Handle(0, 1))
        self.assertEqual(self.registry.lookup("--verbose"), Handle(0, 1))
        self.assertIsNone(self.registry.lookup("--quiet"))
        self.assertIsNone(self.registry.lookup("-vv"))
        self.assertIn("-v", self.registry)
        self.assertEqual(len(self.registry), 2)
        self.assertEqual(self.registry.names(), ["-v", "--verbose"])
        self.assertEqual(dict(self.registry.short), {"v": Handle(0, 1)})

    def testMalformedNamesRejected(self):
        for name in ("--", "--a=b", "-", "-ab", "verbose"):
            with self.subTest(name=name), self.assertRaises(ConfigurationError):
                self.registry.check(name)

    def testOneCharacterLongNameAccepted(self):
        self.registry.register("--x", Handle(0, 1))
        self.assertEqual(self.registry.lookup("--x"), Handle(0, 1))

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            self.registry.check(3)

    def testDuplicatesRejected(self):
        self.registry.register("-v", Handle(0, 1))
        self.registry.register("--verbose", Handle(0, 1))
        with self.assertRaises(ConfigurationError):
            self.registry.register("-v", Handle(1, 1))
        with self.assertRaises(ConfigurationError):
            self.registry.register("--verbose", Handle(1, 1))

    def testFrozenRegistryRejectsNames(self):
        self.registry.freeze()
        self.assertTrue(self.registry.frozen)
        with self.assertRaises(ConfigurationError):
            self.registry.register("-v", Handle(0, 1))


if __name__ == "__main__":
    unittest.main()
