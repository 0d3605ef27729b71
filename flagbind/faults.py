"""
flagbind faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  raised while parsing tokens (errors and warnings).
- FlagException / FlagWarning: base types that carry message + options and know
  how to render themselves with rich in a short, lowercased, actionable way.
- trigger(): central entry point to surface a fault (library vs. shell mode).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- UnknownFlagError: a flag-shaped token names no registered flag (for a
  cluster such as "-bz", at least one letter is unknown). Parsing aborts.
- FlagParseError: a value token did not convert to the bound kind. Parsing
  aborts; the reason is the kind's own message, untouched.
- DanglingFlagWarning: the tokens ended while a flag was still waiting for its
  value. The flag is dropped; parsing succeeds.
- ClusterValueWarning: a letter inside a cluster is bound to a non-boolean
  value. The letter is skipped; parsing succeeds.

Registration mistakes (duplicate names, alias collisions) are not faults: they
are programming errors and FlagSet.bind() raises ValueError straight away.

Integration
- FlagSet collects context and calls trigger(fault, **options).
- In library mode exceptions are raised and warnings go through `warnings`.
- In shell mode both are rendered via rich on stderr; exceptions then exit.
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used while parsing flags (stable identifiers).

    grouping
    - flag errors (2111x)
      • UNKNOWN_FLAG, UNPARSABLE_VALUE
    - flag warnings (2211x)
      • DANGLING_FLAG, CLUSTER_VALUE

    normalize() lets the host remap codes to custom labels without changing
    the numeric identity.
    """
    # --- flag errors (21xxx) ---
    UNKNOWN_FLAG     = 21111
    UNPARSABLE_VALUE = 21112

    # --- flag warnings (22xxx) ---
    DANGLING_FLAG    = 22111
    CLUSTER_VALUE    = 22112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    """
    program label for fault headers: explicit option, then __main__.__prog__, then "flags".
    """
    if prog := options.get("prog"):
        return prog
    return getattr(__import__("__main__"), "__prog__", "flags")


def _render(fault, palette):
    """
    shared rich rendering for exceptions and warnings.

    layout
    - header: [ prog — code | title ]
    - body:   message
    - hint:   → hint
    fancy=True wraps the body in a Panel titled with the header.
    """
    options = fault.options
    colorful = options.get("colorful", True)
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_prog(options), styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(options.get("title", type(fault).__name__).title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
    if docs := options.get("docs"):
        renders.append(text(docs, styler("docs")))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class FlagException(Exception):
    """
    base for parse faults that abort a FlagSet.parse() call.

    attributes
    - message: one-sentence, lowercased description.
    - options: read-only mapping of rendering/trigger context
      (code, title, hint, docs, prog, shell, fancy, colorful, flagset...).
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
        "docs": "dim",
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, type(self).__palette__)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if (flagset := self.options.get("flagset")) is not None:
            flagset.print_usage()
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownFlagError(FlagException):
    """
    a flag-shaped token that names no registered flag.
    """

    @property
    def name(self):
        return self.options.get("name")


class FlagParseError(FlagException):
    """
    a value token that does not convert to its flag's kind.

    `reason` is the conversion's own message, unmodified.
    """

    @property
    def flag(self):
        return self.options.get("flag")

    @property
    def reason(self):
        return self.options.get("reason")


class FlagWarning(Warning):
    """
    base for lenient parse outcomes: reported, never fatal.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
        "docs": "dim",
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, type(self).__palette__)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DanglingFlagWarning(FlagWarning):
    @property
    def name(self):
        return self.options.get("name")


class ClusterValueWarning(FlagWarning):
    @property
    def name(self):
        return self.options.get("name")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise exceptions
      are raised and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "FlagException",
    "UnknownFlagError",
    "FlagParseError",
    "FlagWarning",
    "DanglingFlagWarning",
    "ClusterValueWarning",
    "trigger",
    "getdoc",
)
