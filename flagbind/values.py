"""
flagbind bindable values.

Overview
- Value: the single polymorphic handle over a mutable, typed slot. A flag set
  keeps one reference to it and writes into it while parsing; the caller keeps
  another reference and reads the result once parsing is done.
- Kinds (closed set, no open-ended generic dispatch):
  • String    → str, taken verbatim.
  • Integer   → int, base 10.
  • Character → str of exactly one character.
  • Boolean   → bool, spelled exactly "true" or "false".
  • Delimited → tuple of one scalar kind, split on a delimiter (e.g. "1,3,5").

Contract (every kind)
- parse(text): convert and overwrite the slot; on failure the slot is left
  untouched and ValueError carries the kind's own parse-error message.
- activate(): presence-only use of a flag ("--verbose" with no value). It only
  succeeds when the current rendering is exactly "true" or "false", and then
  parses "true". Anything else raises TypeError so the caller knows to take the
  next token as a value instead.
- render(): textual form of the current value (also drives activate()).

Notes
- Activation is a heuristic over render(), not a type tag: there is no
  "is boolean" declaration at bind time.
- Values are not locked; a flag set is expected to be the only writer while a
  parse is running.

Quick example
    >>> count = Integer(1)
    >>> count.parse("42")
    >>> count.value
    42
    >>> Boolean().activate() is None
    True
"""
from abc import ABC, abstractmethod

from .utils import *


class Value(ABC):
    """
    Abstract bindable slot.

    Subclasses provide three hooks:
    - _check(value): raise TypeError when a default has the wrong type.
    - _convert(text): text → value, raising ValueError with a readable reason.
    - _render(value): value → text.

    Class attributes
    - __default__: value used when no default is given.
    - __typename__: short label used in metavars and representations.
    """
    __default__ = None
    __typename__ = "value"

    def __init__(self, default=Unset, /):
        default = coalesce(default, self.__default__)
        self._check(default)
        self._default = default
        self._value = default

    @abstractmethod
    def _check(self, value, /): ...

    @abstractmethod
    def _convert(self, text, /): ...

    @abstractmethod
    def _render(self, value, /): ...

    @property
    def value(self):
        """
        Current value of the slot.
        """
        return self._value

    @property
    def default(self):
        """
        Value the slot held when it was built.
        """
        return self._default

    @property
    def metavar(self):
        """
        Placeholder shown next to the flag names in usage (None for presence-only kinds).
        """
        return "<%s>" % self.__typename__

    def get(self):
        return self._value

    def parse(self, text, /):
        """
        Convert text into the slot's type and store it.

        Raises
        - TypeError: text is not a string.
        - ValueError: text does not convert; the slot keeps its previous value.
        """
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__name__}.parse() argument must be a string")
        self._value = self._convert(text)

    def activate(self):
        """
        Treat the flag's presence as "true".

        Raises
        - TypeError: the slot does not render as a boolean.
        """
        if self.render() not in ("true", "false"):
            raise TypeError("bound value should be of type bool")
        self.parse("true")

    def render(self):
        return self._render(self._value)

    def __repr__(self):
        return f"{type(self).__name__.lower()}({self.render()!r})"

    def __rich_repr__(self):
        yield "value", self._value
        yield "default", self._default


class String(Value):
    __default__ = ""
    __typename__ = "string"

    def _check(self, value, /):
        if not isinstance(value, str):
            raise TypeError("string default must be a string")

    def _convert(self, text, /):
        return text

    def _render(self, value, /):
        return value


class Integer(Value):
    """
    Base-10 integer slot. Conversion errors are Python's own int() messages.
    """
    __default__ = 0
    __typename__ = "int"

    def _check(self, value, /):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("integer default must be an int")

    def _convert(self, text, /):
        return int(text, 10)

    def _render(self, value, /):
        return str(value)


class Character(Value):
    """
    Single character slot (delimiters, separators).

    The default is NUL, mirroring an unset character.
    """
    __default__ = "\0"
    __typename__ = "char"

    def _check(self, value, /):
        if not isinstance(value, str) or len(value) != 1:
            raise TypeError("character default must be a one-character string")

    def _convert(self, text, /):
        if not text:
            raise ValueError("cannot parse char from empty string")
        if len(text) > 1:
            raise ValueError("too many characters in string")
        return text

    def _render(self, value, /):
        return value


class Boolean(Value):
    __default__ = False
    __typename__ = "bool"

    @property
    def metavar(self):
        return None

    def _check(self, value, /):
        if not isinstance(value, bool):
            raise TypeError("boolean default must be a bool")

    def _convert(self, text, /):
        match text:
            case "true":
                return True
            case "false":
                return False
        raise ValueError("provided string was not 'true' or 'false'")

    def _render(self, value, /):
        return "true" if value else "false"


class Delimited(Value):
    """
    Tuple of scalar values read from one delimited token ("1,3,5").

    Parameters
    - default: iterable of already-typed elements (defaults to an empty tuple).
    - kind: scalar Value subclass used for every element (String, Integer,
      Character or Boolean); defaults to String.
    - delimiter: non-empty separator string; defaults to ",".

    Notes
    - Every part goes through the element kind; the first failing part aborts
      the whole conversion with that part's message.
    - An empty token yields one empty part, which only String accepts.
    """
    __default__ = ()
    __typename__ = "list"

    def __init__(self, default=Unset, /, kind=Unset, delimiter=Unset):
        kind = coalesce(kind, String)
        if not isinstance(kind, type) or not issubclass(kind, Value) or issubclass(kind, Delimited):
            raise TypeError("delimited 'kind' must be a scalar value type")
        if not isinstance(delimiter := coalesce(delimiter, ","), str):
            raise TypeError("delimited 'delimiter' must be a string")
        elif not delimiter:
            raise ValueError("delimited 'delimiter' cannot be empty")
        self._element = kind()
        self._delimiter = delimiter
        if default is not Unset:
            default = tuple(default)
        super().__init__(default)

    @property
    def kind(self):
        return type(self._element)

    @property
    def delimiter(self):
        return self._delimiter

    @property
    def metavar(self):
        return "<%s%s...>" % (self._element.__typename__, self._delimiter)

    def _check(self, value, /):
        for element in value:
            self._element._check(element)

    def _convert(self, text, /):
        return tuple(self._element._convert(part) for part in text.split(self._delimiter))

    def _render(self, value, /):
        return self._delimiter.join(map(self._element._render, value))


__all__ = (
    "Value",
    "String",
    "Integer",
    "Character",
    "Boolean",
    "Delimited",
)
