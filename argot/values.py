"""
Argot values: the tagged container that holds parsed results and defaults.

A Value owns exactly one payload together with an explicit discriminant
(ValueKind). The kind is computed once when the value is built, and typed reads
compare kinds, never Python classes, except for OBJECT payloads produced by
custom converters or accumulators.

    >>> Value(42).get(int)
    42
    >>> Value(42).get(float)
    Traceback (most recent call last):
    ...
    argot.faults.TypeMismatchError: type mismatch: stored type is int, requested type is float
"""
import builtins
import copy
from enum import Enum

from .faults import EmptyValueError, TypeMismatchError
from .utils import Unset


class ValueKind(Enum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    LIST = "list"
    OBJECT = "object"

    @classmethod
    def of(cls, payload, /):
        """
        Discriminant for a concrete payload (bool is checked before int).
        """
        match payload:
            case bool():
                return cls.BOOL
            case int():
                return cls.INT
            case float():
                return cls.FLOAT
            case str():
                return cls.STRING
            case list() | tuple():
                return cls.LIST
            case _:
                return cls.OBJECT

    @classmethod
    def resolve(cls, type, /):
        """
        Discriminant requested by a Python type; anything unknown is OBJECT.
        """
        if isinstance(type, cls):
            return type
        return _REQUESTS.get(type, cls.OBJECT)


_REQUESTS = {
    bool: ValueKind.BOOL,
    int: ValueKind.INT,
    float: ValueKind.FLOAT,
    str: ValueKind.STRING,
    list: ValueKind.LIST,
}


def _typename(kind, payload, /):
    return type(payload).__qualname__ if kind is ValueKind.OBJECT else kind.value


class Value:
    """
    Copyable holder for exactly one payload of any type, or nothing.

    - Value() is empty; Value(x) stores x (tuples are stored as lists).
    - get() returns the payload; get(T) also checks the stored kind is exactly T.
    - copies never share the payload with the original.
    """
    __slots__ = ("_kind", "_payload")

    def __init__(self, payload=Unset, /):
        if isinstance(payload, Value):
            self._kind = payload._kind
            self._payload = copy.deepcopy(payload._payload)
            return
        if isinstance(payload, tuple):
            payload = list(payload)
        self._kind = ValueKind.of(payload) if payload is not Unset else Unset
        self._payload = copy.deepcopy(payload)

    @property
    def kind(self):
        return self._kind

    def empty(self):
        return self._payload is Unset

    def reset(self):
        self._kind = Unset
        self._payload = Unset

    def get(self, type=Unset, /):
        if self._payload is Unset:
            raise EmptyValueError("value is empty")
        if type is not Unset:
            requested = ValueKind.resolve(type)
            if requested is not self._kind or (
                requested is ValueKind.OBJECT and builtins.type(self._payload) is not type
            ):
                raise TypeMismatchError(
                    "type mismatch: stored type is %s, requested type is %s" % (
                        _typename(self._kind, self._payload),
                        getattr(type, "value", None) or getattr(type, "__qualname__", repr(type)),
                    ),
                    stored=self._kind,
                    requested=requested,
                )
        if self._kind is ValueKind.LIST:
            return list(self._payload)
        return self._payload

    def copy(self):
        return Value(self)

    def __copy__(self):
        return Value(self)

    def __deepcopy__(self, memo, /):
        return Value(self)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._kind is other._kind and self._payload == other._payload

    __hash__ = None

    def __repr__(self):
        if self._payload is Unset:
            return "Value()"
        return "Value(%r)" % (self._payload,)

    def __rich_repr__(self):
        yield "kind", self._kind
        yield "payload", self._payload


__all__ = (
    "Value",
    "ValueKind",
)
