"""
flagbind utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the value, flag-set and usage layers.
- Public-but-internal leaning: importable, but designed to support the
  higher-level FlagSet/Value API rather than application code.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/().

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated accessors for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr); containers
    are handed out as fresh copies so the registry state cannot be mutated from outside.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce("", "fallback")
    ''
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None (or "", or 0) is a legitimate user value, but the API
    needs a way to distinguish “not provided” from “provided”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations and isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or () are preserved as-is; only Unset is
    replaced. Pair with parameters that default to Unset when the "empty" value
    of a kind is itself a legitimate user value (an empty string default, a
    zero integer default).

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - @rename(name)

    Raises
    - TypeError on a non-callable target, a non-string name, or a callable
      whose names cannot be updated (some built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values so callers never hold live registry state.

    - Sequence (non-string) → tuple of processed items.
    - Mapping → new dict with processed values (keys preserved).
    - Set → frozenset of processed items.
    - Anything else (flags, values, scalars) → returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a copy
    for container types (see _immortalize).

    Example
    - Given self._flags, declare flags = mirror("flags") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: equality and identity checks must not treat it as None.
- Typical pattern: value = coalesce(user_value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
