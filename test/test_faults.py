"""
Faults module behavioral tests (codes, rendering, trigger modes).

Scope
- Validate stable fault codes and host remapping via __main__.__codes__.
- Validate rich rendering of exceptions and warnings.
- Validate trigger() in library mode (raise / warn) and shell mode (render / exit).

Conventions
- Test method names follow CamelCase per project convention.
"""
import sys
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from flagbind import (
    FlagSet,
    FaultCode,
    FlagException,
    UnknownFlagError,
    FlagParseError,
    DanglingFlagWarning,
    trigger,
    getdoc,
)
from flagbind import faults


def _capture():
    return Console(color_system=None, force_terminal=False, width=120)


class TestFaultCode(TestCase):
    """Stable identifiers and host remapping."""

    def testValues(self):
        self.assertEqual(FaultCode.UNKNOWN_FLAG, 21111)
        self.assertEqual(FaultCode.UNPARSABLE_VALUE, 21112)
        self.assertEqual(FaultCode.DANGLING_FLAG, 22111)
        self.assertEqual(FaultCode.CLUSTER_VALUE, 22112)

    def testNormalizeDefault(self):
        self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "21111")

    def testNormalizeHostMapping(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {FaultCode.UNKNOWN_FLAG: "F1"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "F1")
            self.assertEqual(FaultCode.DANGLING_FLAG.normalize(), "22111")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_FLAG))
        with mock.patch.object(sys.modules["__main__"], "__docs__", {FaultCode.UNKNOWN_FLAG: "docs"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_FLAG), "docs")

    def testGetdocRejectsNonCode(self):
        with self.assertRaises(TypeError):
            getdoc(21111)


class TestRendering(TestCase):
    """Rich rendering of faults."""

    def testExceptionRendering(self):
        fault = UnknownFlagError(
            "unknown flag 'z' at first position",
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
            hint="try 'tool --help'",
            prog="tool",
            colorful=False,
        )
        console = _capture()
        with console.capture() as capture:
            console.print(fault)
        output = capture.get()
        self.assertIn("[ tool — 21111 | Unknown Flag ]", output)
        self.assertIn("unknown flag 'z' at first position", output)
        self.assertIn("→ try 'tool --help'", output)

    def testFancyRendering(self):
        fault = FlagParseError("bad value", title="invalid flag value", code=FaultCode.UNPARSABLE_VALUE, fancy=True)
        console = _capture()
        with console.capture() as capture:
            console.print(fault)
        self.assertIn("bad value", capture.get())
        self.assertIn("╭", capture.get())

    def testStrIsMessage(self):
        self.assertEqual(str(FlagException("plain message")), "plain message")

    def testReplaceMergesOptions(self):
        fault = UnknownFlagError("message", name="z")
        replaced = fault.__replace__(shell=False, prog="tool")
        self.assertIsInstance(replaced, UnknownFlagError)
        self.assertEqual(replaced.name, "z")
        self.assertEqual(replaced.options["prog"], "tool")
        self.assertNotIn("prog", fault.options)

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            UnknownFlagError("message").options["name"] = "x"


class TestTrigger(TestCase):
    """Library and shell modes."""

    def testRequiresProtocol(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testLibraryModeRaises(self):
        with self.assertRaises(UnknownFlagError) as context:
            trigger(UnknownFlagError("message", name="z"), shell=False)
        self.assertEqual(context.exception.name, "z")

    def testLibraryModeWarns(self):
        with self.assertWarns(DanglingFlagWarning):
            trigger(DanglingFlagWarning("message", name="n"), shell=False)

    def testShellModeExits(self):
        flags = FlagSet("tool", shell=True, colorful=False)
        flags.boolean("verbose")
        console = _capture()
        with mock.patch.object(faults, "console", console), console.capture() as capture:
            with mock.patch.object(flags, "print_usage") as usage:
                with self.assertRaises(SystemExit) as context:
                    flags.parse(["--verbos"])
        self.assertEqual(context.exception.code, 1)
        usage.assert_called_once_with()
        output = capture.get()
        self.assertIn("[ tool — 21111 | Unknown Flag ]", output)
        self.assertIn("did you mean '--verbose'?", output)

    def testShellModeRendersWarnings(self):
        flags = FlagSet("tool", shell=True, colorful=False)
        name = flags.string("name", "keep")
        console = _capture()
        with mock.patch.object(faults, "console", console), console.capture() as capture:
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                self.assertEqual(flags.parse(["--name"]), [])
        self.assertIn("Missing Flag Value", capture.get())
        self.assertEqual(name.value, "keep")


if __name__ == '__main__':
    unittest.main()
