"""
flagbind flag registry and token scanner.

What this module provides
- Flag: read-only record tying a canonical name (and optional one-letter
  alias) to a bound Value and its usage text.
- FlagSet: the registry plus the parser that walks argument tokens, writes
  into bound values and hands back the positional leftovers.

Quick start
    from flagbind import FlagSet, Integer

    flags = FlagSet("cut")
    fields = flags.delimited("fields", (), "fields to select", kind=Integer, short=True)
    delimiter = flags.character("delimiter", "\\t", "field delimiter", short=True)
    quiet = flags.boolean("s", False, "suppress lines without delimiters")

    files = flags.parse(["-f", "1,3", "-d", ",", "-s", "data.csv"])
    # fields.value == (1, 3); delimiter.value == ","; quiet.value is True
    # files == ["data.csv"]

Token rules (checked in this order for every token)
- "--"            : end of flags; every later token is positional, verbatim.
- after flags end : every token is positional, verbatim ("--" included).
- pending value   : the token is the value of the flag seen just before it,
                    even when it looks like a flag.
- "--name"        : presence for boolean-like values, else the next token is the value.
- "--name=value"  : inline value, parsed immediately.
- "-x"            : same as "--name", by canonical name or alias.
- "-xyz"          : cluster of boolean-like flags; no value is ever consumed.
- anything else   : first positional; flags end here.

Lenient outcomes (warnings, never errors)
- tokens end while a flag still waits for its value: the flag is dropped.
- a cluster letter bound to a non-boolean value: the letter is skipped.

Faults
- UnknownFlagError and FlagParseError abort the parse. Values written by
  earlier tokens of the same call stay written (parsing is not transactional).
"""
import difflib
import re
import shlex
from collections import deque
from collections.abc import Iterable

from rich.console import Console

from .faults import *
from .usage import render
from .utils import *
from .values import *


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _spell(key):
    """
    Spell a lookup key the way a user types it ("-x" or "--name").
    """
    return ("-" if len(key) == 1 else "--") + key


class Flag:
    """
    A bound flag (read-only once built).

    Fields
    - name: canonical name, unique within its FlagSet.
    - short: one-letter alias (the first letter of name) or None.
    - usage: help text (may be empty).
    - value: the bound Value handle.
    - default: rendering of the value at bind time when it differs from the
      kind's own default; None otherwise (usage shows it only when set).
    """
    __slots__ = ("_name", "_short", "_usage", "_value", "_default")

    name = mirror("name")
    short = mirror("short")
    usage = mirror("usage")
    value = mirror("value")
    default = mirror("default")

    def __init__(self, name, short, usage, value, /):
        self._name = name
        self._short = short
        self._usage = usage
        self._value = value
        self._default = value.render() if value.default != type(value).__default__ else None

    @property
    def keys(self):
        """
        Lookup keys resolving to this flag (canonical name first).
        """
        if self._short is None or self._short == self._name:
            return (self._name,)
        return self._name, self._short

    def __repr__(self):
        return "flag(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "short", self._short
        yield "usage", self._usage
        yield "value", self._value


class FlagSet:
    """
    Registry of flags and the parser over argument tokens.

    Parameters
    - name: program name shown in usage and fault headers (optional; falls back
      to __main__.__prog__, then "flags").
    - shell: render faults on stderr and exit(1) instead of raising; warnings
      are rendered instead of going through the warnings module.
    - fancy: panel chrome for usage and faults.
    - colorful: styled output (rich palettes, overridable via __main__.__styles__).

    Lifecycle
    - bind() (or a typed factory) once per flag, before parsing.
    - parse() as many times as needed; no state survives between calls apart
      from what was written into the bound values.
    """

    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    flags = mirror("flags")

    def __init__(self, name=Unset, /, *, shell=False, fancy=False, colorful=True):
        if not isinstance(name, str | Unset):
            raise TypeError("flag-set 'name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError("flag-set 'name' cannot be empty")
        for option, setting in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(setting, bool):
                raise TypeError(f"flag-set {option!r} must be a bool")

        self._name = name
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful
        self._flags = {}  # canonical name -> Flag, in bind order
        self._keys = {}   # canonical name or alias -> Flag

    @property
    def name(self):
        return coalesce(self._name, getattr(__import__("__main__"), "__prog__", "flags"))

    # --- registry -----------------------------------------------------------

    def bind(self, name, value, usage=Unset, /, *, short=False):
        """
        Register value under name (and under name[0] when short is true).

        Returns
        - the same value handle, so binding can be inlined.

        Raises
        - TypeError: name is not a string, value is not a Value, usage is not a string.
        - ValueError: name is empty, starts with "-", or holds "=" or whitespace;
          name is already a key; the alias collides with another flag's key.
          These are programming errors and are never routed through trigger().
        """
        if not isinstance(name, str):
            raise TypeError("flag name must be a string")
        elif not name:
            raise ValueError("flag name cannot be empty")
        elif name.startswith("-") or re.search(r"[\s=]", name):
            raise ValueError(f"flag name {name!r} cannot start with '-' or contain '=' or whitespace")
        if not isinstance(value, Value):
            raise TypeError(f"flag {name!r} must be bound to a value")
        if not isinstance(usage := coalesce(usage, ""), str):
            raise TypeError(f"flag {name!r} usage must be a string")

        if (existing := self._keys.get(name)) is not None:
            if existing.name == name:
                raise ValueError(f"flag redefined: {name!r}")
            raise ValueError(f"flag {name!r} collides with the alias of flag {existing.name!r}")

        alias = name[0] if short else None
        if alias is not None and alias != name and (existing := self._keys.get(alias)) is not None:
            raise ValueError(f"alias {alias!r} of flag {name!r} collides with flag {existing.name!r}")

        flag = Flag(name, alias, usage, value)
        self._flags[name] = flag
        for key in flag.keys:
            self._keys[key] = flag
        return value

    def string(self, name, default=Unset, usage=Unset, /, *, short=False):
        return self.bind(name, String(default), usage, short=short)

    def integer(self, name, default=Unset, usage=Unset, /, *, short=False):
        return self.bind(name, Integer(default), usage, short=short)

    def character(self, name, default=Unset, usage=Unset, /, *, short=False):
        return self.bind(name, Character(default), usage, short=short)

    def boolean(self, name, default=Unset, usage=Unset, /, *, short=False):
        return self.bind(name, Boolean(default), usage, short=short)

    def delimited(self, name, default=Unset, usage=Unset, /, *, kind=Unset, delimiter=Unset, short=False):
        return self.bind(name, Delimited(default, kind, delimiter), usage, short=short)

    def lookup(self, name, /):
        """
        Resolve a canonical name or alias to its Flag (None when unknown).
        """
        return self._keys.get(name) if isinstance(name, str) else None

    def has_flag(self, name, /):
        """
        True when name is a registered canonical name or one-letter alias.
        """
        return self.lookup(name) is not None

    def usage(self):
        """
        (lookup key, usage text) pairs, one per key, sorted by key.
        """
        return sorted((key, flag.usage) for key, flag in self._keys.items())

    def print_usage(self):
        Console(stderr=True).print(self)

    def __contains__(self, name):
        return name in self._flags

    def __iter__(self):
        return iter(tuple(self._flags.values()))

    def __len__(self):
        return len(self._flags)

    def __repr__(self):
        return "flag-set(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self.name
        yield "flags", tuple(self._flags)
        yield "shell", self._shell

    def __rich__(self):
        return render(self)

    # --- faults -------------------------------------------------------------

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this flag set's runtime options attached.
        """
        trigger(
            fault,
            **options,
            flagset=self,
            prog=self.name,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
        )

    def _unknown(self, name, index):
        suggestions = difflib.get_close_matches(name, self._keys.keys(), 5)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all flags" % (_spell(suggestions[0]), self.name)
        except IndexError:
            hint = "try '%s --help' to see all available flags" % self.name
        self.trigger(UnknownFlagError(
            "unknown flag %r at %s position" % (name, _ordinal(index)),
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
            name=name,
            index=index,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_FLAG),
        ))

    def _assign(self, name, text, index):
        """
        Parse text into the flag bound under name; unknown names are ignored.
        """
        if (flag := self._keys.get(name)) is None:
            return
        try:
            flag.value.parse(text)
        except ValueError as exception:
            self.trigger(FlagParseError(
                "invalid value %r for flag %r at %s position: %s" % (text, name, _ordinal(index), exception),
                title="invalid flag value",
                code=FaultCode.UNPARSABLE_VALUE,
                flag=name,
                reason=str(exception),
                input=text,
                index=index,
                hint="pass a %s value to %s" % (type(flag.value).__typename__, _spell(name)),
                docs=getdoc(FaultCode.UNPARSABLE_VALUE),
            ))

    def _dangling(self, name, index):
        self.trigger(DanglingFlagWarning(
            "flag %r at %s position has no value and was ignored" % (name, _ordinal(index)),
            title="missing flag value",
            code=FaultCode.DANGLING_FLAG,
            name=name,
            index=index,
            hint="add a value after it (for example: %s <value>)" % _spell(name),
            docs=getdoc(FaultCode.DANGLING_FLAG),
        ))

    # --- scanner ------------------------------------------------------------

    @staticmethod
    def _activate(flag):
        try:
            flag.value.activate()
        except TypeError:
            return False
        return True

    def parse(self, tokens, /):
        """
        Walk tokens, write flag values into their bound slots, return positionals.

        Parameters
        - tokens:
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used verbatim (no trimming).

        Returns
        - list[str]: positional tokens in input order.

        Raises (library mode; shell mode renders and exits instead)
        - UnknownFlagError: a flag-shaped token names no registered flag.
        - FlagParseError: a value did not convert.
        - TypeError: tokens is neither a string nor an iterable of strings.
        """
        if isinstance(tokens, str):
            tokens = shlex.split(tokens)
        elif isinstance(tokens, Iterable):
            tokens = list(tokens)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        tokens = deque(tokens)
        remaining = []
        pending = None  # (name, index) of the flag waiting for its value
        passthrough = False
        index = 0

        while tokens:
            token = tokens.popleft()
            index += 1

            if passthrough:
                remaining.append(token)
                continue

            if token == "--":
                if pending is not None:
                    self._dangling(*pending)
                    pending = None
                passthrough = True
                continue

            if pending is not None:
                self._assign(pending[0], token, index)
                pending = None
                continue

            if token.startswith("--"):
                name, assigned, value = token[2:].partition("=")
                if (flag := self.lookup(name)) is None:
                    self._unknown(name, index)
                elif assigned:
                    self._assign(name, value, index)
                elif not self._activate(flag):
                    pending = name, index
            elif token.startswith("-") and len(token) > 1:
                letters = token[1:]
                if len(letters) == 1:
                    if (flag := self.lookup(letters)) is None:
                        self._unknown(letters, index)
                    elif not self._activate(flag):
                        pending = letters, index
                    continue
                if not all(map(self.has_flag, letters)):
                    self._unknown(letters, index)
                for letter in letters:
                    if not self._activate(self._keys[letter]):
                        self.trigger(ClusterValueWarning(
                            "flag %r in cluster %r at %s position takes a value and was ignored" % (
                                letter, token, _ordinal(index)
                            ),
                            title="value flag in cluster",
                            code=FaultCode.CLUSTER_VALUE,
                            name=letter,
                            input=token,
                            index=index,
                            hint="pass it on its own (for example: -%s <value>)" % letter,
                            docs=getdoc(FaultCode.CLUSTER_VALUE),
                        ))
            else:
                remaining.append(token)
                passthrough = True

        if pending is not None:
            self._dangling(*pending)

        return remaining


__all__ = (
    "Flag",
    "FlagSet",
)
