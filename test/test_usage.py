"""
Usage reporter behavioral tests.

Scope
- Validate the usage line, flag rows (names, metavars, usage text, defaults).
- Validate fancy panels and that rendering leaves the flag set untouched.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from rich.console import Console

from flagbind import FlagSet, Integer
from flagbind.usage import render


def _print(renderable):
    console = Console(color_system=None, force_terminal=False, width=100)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


class TestUsage(TestCase):
    """Rendering of a populated flag set."""

    def setUp(self):
        self.flags = FlagSet("cut", colorful=False)
        self.fields = self.flags.delimited("fields", (), "fields to select", kind=Integer, short=True)
        self.delimiter = self.flags.character("delimiter", "\t", "field delimiter", short=True)
        self.quiet = self.flags.boolean("s", False, "suppress lines without delimiters")

    def testUsageLine(self):
        self.assertIn("usage: cut [flags] [args ...]", _print(render(self.flags)))

    def testRows(self):
        output = _print(render(self.flags))
        self.assertIn("flags:", output)
        self.assertIn("-f | --fields <int,...>", output)
        self.assertIn("-d | --delimiter <char>", output)
        self.assertIn("fields to select", output)
        self.assertIn("suppress lines without delimiters", output)

    def testDefaultShownOnlyWhenSet(self):
        output = _print(render(self.flags))
        self.assertIn("(default: '\\t')", output)
        self.assertEqual(output.count("(default:"), 1)

    def testBooleanHasNoMetavar(self):
        line = next(line for line in _print(render(self.flags)).splitlines() if "suppress" in line)
        self.assertNotIn("<", line)

    def testRichProtocol(self):
        self.assertEqual(_print(self.flags), _print(render(self.flags)))

    def testRenderingDoesNotMutate(self):
        self.fields.parse("2,4")
        _print(render(self.flags))
        self.assertEqual(self.fields.value, (2, 4))
        self.assertEqual(len(self.flags), 3)

    def testFancyPanel(self):
        flags = FlagSet("cut", fancy=True, colorful=False)
        flags.boolean("verbose")
        output = _print(render(flags))
        self.assertIn("╭", output)
        self.assertIn("--verbose", output)


class TestEmptyUsage(TestCase):
    """Rendering of a flag set without flags."""

    def testNoFlagsSection(self):
        output = _print(render(FlagSet("tool", colorful=False)))
        self.assertIn("usage: tool [args ...]", output)
        self.assertNotIn("flags:", output)


if __name__ == '__main__':
    unittest.main()
