"""
Argot namespace: the result set of a parse.

A Namespace maps storage keys to Values. It is a plain data holder: the parser
fills a fresh one per call and hands it to the caller, who owns it.

    >>> ns = Namespace({"count": 3})
    >>> ns.get("count", type=int)
    3
    >>> ns.get("missing", 0)
    0
    >>> ns.count
    3
"""
from collections.abc import Mapping

from .faults import KeyNotFoundError
from .utils import Unset
from .values import Value, ValueKind


class Namespace:
    """
    Mapping from storage key to Value, queryable by type.

    - get(key) raises KeyNotFoundError when the key is absent.
    - get(key, default) never raises for absence; a present value is still
      type-checked against the default's kind (or against type= when given).
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        self._values = {}
        items = values.items() if isinstance(values, Mapping | Namespace) else values
        for key, value in items:
            self.set(key, value)

    def set(self, key, value, /):
        if not isinstance(key, str):
            raise TypeError("namespace keys must be strings")
        self._values[key] = Value(value)

    def value(self, key, /):
        try:
            return Value(self._values[key])
        except KeyError:
            raise KeyNotFoundError("key not found: %r" % key, key=key) from None

    def get(self, key, default=Unset, /, *, type=Unset):
        if key not in self._values:
            if default is Unset:
                raise KeyNotFoundError("key not found: %r" % key, key=key)
            return default
        if type is Unset and default is not Unset and default is not None:
            if (kind := ValueKind.of(default)) is not ValueKind.OBJECT:
                type = kind
        return self._values[key].get(type)

    def has(self, key, /):
        return key in self._values

    contains = has

    def remove(self, key, /):
        return self._values.pop(key, Unset) is not Unset

    def keys(self):
        return list(self._values)

    def items(self):
        return [(key, Value(value)) for key, value in self._values.items()]

    def size(self):
        return len(self._values)

    def empty(self):
        return not self._values

    def clear(self):
        self._values.clear()

    def copy(self):
        return Namespace(self)

    def as_dict(self):
        return {key: value.get() for key, value in self._values.items()}

    __copy__ = copy

    def __deepcopy__(self, memo, /):
        return Namespace(self)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name].get()
        except KeyError:
            raise AttributeError("%r object has no attribute %r" % (type(self).__name__, name)) from None

    def __contains__(self, key):
        return key in self._values

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(list(self._values))

    def __eq__(self, other):
        if not isinstance(other, Namespace):
            return NotImplemented
        return self._values == other._values

    __hash__ = None

    def __repr__(self):
        return "Namespace(%s)" % ", ".join("%s=%r" % (key, value.get()) for key, value in self._values.items())

    def __rich_repr__(self):
        for key, value in self._values.items():
            yield key, value.get()


__all__ = (
    "Namespace",
)
