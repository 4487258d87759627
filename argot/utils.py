"""
Argot utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel for “not provided”, distinct from None.
  • Falsey, printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers (converters, accessors).

- mirror("attr")
  • Read-only property over a private backing field (self._attr); containers are
    handed out as fresh copies so callers cannot mutate declared metadata.

- trim(text)
  • Strip the command-line whitespace set (space, tab, newline, carriage return).

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
- Use mirror() to expose sanitized metadata as read-only properties.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final

WHITESPACE = " \t\n\r"


@final
class UnsetType:
    """
    Sentinel type representing a value that was not provided.

    A single instance, Unset, is exposed. It is falsey, prints as "Unset",
    and cannot be subclassed.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are returned as-is; only Unset is replaced.

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

    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> decorator
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
    Recursively copy container values.

    Sequences (other than strings) become tuples, mappings become dicts and
    sets become frozensets, so the copy handed out cannot alias internal state.
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
    Define a read-only property that mirrors the private attribute "_{name}".

    Example
    - Given self._names, declare names = mirror("names") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def trim(text, /):
    """
    Strip leading and trailing command-line whitespace (space, tab, CR, LF).
    """
    if not isinstance(text, str):
        raise TypeError("trim() argument must be a string")
    return text.strip(WHITESPACE)


Unset = UnsetType()
"""
Sentinel for “not provided”.

Distinct from None: an argument whose default is None has a default, an
argument whose default is Unset has none.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "trim",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
