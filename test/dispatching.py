# python
"""
Dispatcher behavioral tests (token grammar and modes).

Scope
- Validate long options with separate and inline values, and inline values nobody consumes.
- Validate short options and clusters, including a value-taking option that absorbs the cluster tail.
- Validate the "--" terminator, a lone "-", interspersed and exclusive modes.
- Validate unknown option reporting (suggestions, positions) and missing option values.

Conventions
- Test method names follow CamelCase per project convention.
- Grammar is exercised through Parser; the Dispatcher is driven directly only for its residue.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argbinder import (
    Parser,
    Binding,
    Handle,
    InlineValueNotConsumedError,
    MissingRequiredArgumentError,
    OptionValueRequiredError,
    UnknownOptionError,
)
from argbinder.dispatcher import Dispatcher, Pass
from argbinder.registry import Registry
from argbinder.utils import rename


def cluster(tokens, /, mode="interspersed"):
    parser = Parser(tokens, "tool", mode=mode)
    handles = {
        "x": parser.flag("-x"),
        "y": parser.flag("-y"),
        "z": parser.option("-z", "--zeta", default="-"),
        "rest": parser.cardinal("REST", nargs="*"),
    }
    return parser, handles


class TestLongOptions(TestCase):
    """Long option grammar."""

    def testSeparateValueConsumesTwoTokens(self):
        parser, handles = cluster(["--zeta", "5", "tail"])
        parser.parse()
        self.assertEqual(parser[handles["z"]], "5")
        self.assertEqual(parser[handles["rest"]], ["tail"])

    def testInlineValueConsumesOneToken(self):
        parser, handles = cluster(["--zeta=5", "tail"])
        parser.parse()
        self.assertEqual(parser[handles["z"]], "5")
        self.assertEqual(parser[handles["rest"]], ["tail"])

    def testInlineValueMayContainEquals(self):
        parser, handles = cluster(["--zeta=a=b"])
        parser.parse()
        self.assertEqual(parser[handles["z"]], "a=b")

    def testEmptyInlineValueIsAValue(self):
        parser, handles = cluster(["--zeta=", "tail"])
        parser.parse()
        self.assertEqual(parser[handles["z"]], "")
        self.assertEqual(parser[handles["rest"]], ["tail"])

    def testInlineValueOnFlagFails(self):
        parser = Parser(["--verbose=yes"], "tool")
        parser.flag("--verbose")
        outcome = parser.parse()
        self.assertIsInstance(outcome.fault, InlineValueNotConsumedError)
        self.assertEqual(outcome.fault.input, "--verbose")

    def testMissingValueAtEnd(self):
        parser, _ = cluster(["--zeta"])
        outcome = parser.parse()
        self.assertIsInstance(outcome.fault, OptionValueRequiredError)
        self.assertIsInstance(outcome.fault, MissingRequiredArgumentError)

    def testUnknownLongOptionSuggests(self):
        parser = Parser(["a", "--verbos"], "tool")
        parser.flag("--verbose")
        parser.cardinal("A")
        outcome = parser.parse()
        self.assertIsInstance(outcome.fault, UnknownOptionError)
        self.assertEqual(outcome.fault.index, 2)
        self.assertIn("--verbose", outcome.fault.suggestions)
        self.assertIn("second position", outcome.message)


class TestShortOptions(TestCase):
    """Short options and clusters."""

    def testClusterOfFlags(self):
        parser, handles = cluster(["-xy"])
        parser.parse()
        self.assertIs(parser[handles["x"]], True)
        self.assertIs(parser[handles["y"]], True)

    def testClusterTailIsInlineValue(self):
        parser, handles = cluster(["-xyzARG", "tail"])
        parser.parse()
        self.assertIs(parser[handles["x"]], True)
        self.assertIs(parser[handles["y"]], True)
        self.assertEqual(parser[handles["z"]], "ARG")
        self.assertEqual(parser[handles["rest"]], ["tail"])

    def testClusterEndingInValueOptionTakesNextToken(self):
        parser, handles = cluster(["-xz", "ARG", "tail"])
        parser.parse()
        self.assertIs(parser[handles["x"]], True)
        self.assertEqual(parser[handles["z"]], "ARG")
        self.assertEqual(parser[handles["rest"]], ["tail"])

    def testValueOptionMidClusterAbsorbsRemainder(self):
        parser, handles = cluster(["-zxy"])
        parser.parse()
        self.assertEqual(parser[handles["z"]], "xy")
        self.assertIs(parser[handles["x"]], False)
        self.assertIs(parser[handles["y"]], False)

    def testUnknownShortInsideCluster(self):
        parser, _ = cluster(["-xq"])
        outcome = parser.parse()
        self.assertIsInstance(outcome.fault, UnknownOptionError)
        self.assertEqual(outcome.fault.input, "-q")

    def testMissingShortValueAtEnd(self):
        parser, _ = cluster(["-z"])
        outcome = parser.parse()
        self.assertIsInstance(outcome.fault, OptionValueRequiredError)
        self.assertIn("-z", outcome.fault.hint)

    def testLoneDashIsPositional(self):
        parser, handles = cluster(["-", "-x"])
        parser.parse()
        self.assertEqual(parser[handles["rest"]], ["-"])
        self.assertIs(parser[handles["x"]], True)


class TestModes(TestCase):
    """Terminator and mode handling."""

    def testTerminatorStopsOptionRecognition(self):
        parser, handles = cluster(["-x", "--", "-y", "--zeta", "--"])
        parser.parse()
        self.assertIs(parser[handles["x"]], True)
        self.assertIs(parser[handles["y"]], False)
        self.assertEqual(parser[handles["rest"]], ["-y", "--zeta", "--"])

    def testInterspersedOptionsAfterPositionals(self):
        parser, handles = cluster(["a", "-x", "b"])
        parser.parse()
        self.assertIs(parser[handles["x"]], True)
        self.assertEqual(parser[handles["rest"]], ["a", "b"])

    def testExclusiveFirstPositionalEndsOptions(self):
        parser, handles = cluster(["-y", "a", "-x", "b"], mode="exclusive")
        parser.parse()
        self.assertIs(parser[handles["y"]], True)
        self.assertIs(parser[handles["x"]], False)
        self.assertEqual(parser[handles["rest"]], ["a", "-x", "b"])

    def testExclusiveHonorsTerminator(self):
        parser, handles = cluster(["--", "-x"], mode="exclusive")
        parser.parse()
        self.assertEqual(parser[handles["rest"]], ["-x"])


class TestDispatcher(TestCase):
    """Direct dispatch over a hand-built registry."""

    def setUp(self):
        self.registry = Registry()
        self.bindings = [Binding(("-v",), rename(lambda cursor: True, "flag"), False, flag=True)]
        self.registry.register("-v", Handle(0, 0))

    def testResidueKeepsOrder(self):
        result = Dispatcher(self.registry, self.bindings).run(["a", "-v", "b"])
        self.assertEqual(result, Pass(("a", "b")))
        self.assertIs(self.bindings[0].slot, True)

    def testExclusiveResidue(self):
        result = Dispatcher(self.registry, self.bindings, "exclusive").run(["a", "-v"])
        self.assertEqual(result.residue, ("a", "-v"))
        self.assertIs(self.bindings[0].slot, False)

    def testUnknownModeRejected(self):
        with self.assertRaises(ValueError):
            Dispatcher(self.registry, self.bindings, "strict")

    def testFaultsRaisedDirectly(self):
        with self.assertRaises(UnknownOptionError):
            Dispatcher(self.registry, self.bindings).run(["--nope"])


if __name__ == "__main__":
    unittest.main()
