"""
Argot converters: type name -> (str -> Value).

The built-in table is process-wide and read-only. Per-argument converters are
wrapped by custom() so their failures surface as ConversionError.

Built-ins
- int:    optional sign + decimal digits, signed 32-bit range.
- float:  decimal or scientific notation, plus inf/infinity/nan spellings.
          ("double" is an alias.)
- bool:   true/1/yes/on and false/0/no/off, case-insensitive.
- string: identity ("str" is an alias; unknown names fall back to it).

Every built-in trims space, tab, CR and LF before converting; string does not.
"""
import math
import re
import sys
from types import MappingProxyType

from .faults import ConversionError
from .utils import rename, trim
from .values import Value

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_SPECIAL = re.compile(r"[+-]?(inf|infinity|nan)", re.IGNORECASE)

_TRUTHY = frozenset(("true", "1", "yes", "on"))
_FALSY = frozenset(("false", "0", "no", "off"))


def _empty(typename, /):
    return ConversionError("empty string cannot be converted to %s" % typename, type=typename, value="")


def to_int(value, /):
    if not (stripped := trim(value)):
        raise _empty("int")
    if not _INTEGER.fullmatch(stripped):
        raise ConversionError("invalid int value: '%s'" % value, type="int", value=value)
    if not INT_MIN <= (result := int(stripped)) <= INT_MAX:
        raise ConversionError("int value out of range: '%s'" % value, type="int", value=value)
    return Value(result)


def to_float(value, /):
    if not (stripped := trim(value)):
        raise _empty("float")
    if _SPECIAL.fullmatch(stripped):
        return Value(float(stripped))
    if not (match := _DECIMAL.fullmatch(stripped)):
        raise ConversionError("invalid float value: '%s'" % value, type="float", value=value)
    result = float(stripped)
    # underflow counts as out of range, like overflow
    underflow = abs(result) < sys.float_info.min and any(digit in "123456789" for digit in match.group(1))
    if math.isinf(result) or underflow:
        raise ConversionError("float value out of range: '%s'" % value, type="float", value=value)
    return Value(result)


def to_bool(value, /):
    if not (stripped := trim(value)):
        raise _empty("bool")
    if (lowered := stripped.lower()) in _TRUTHY:
        return Value(True)
    if lowered in _FALSY:
        return Value(False)
    raise ConversionError(
        "invalid bool value: '%s' (expected: true/false, 1/0, yes/no, on/off)" % value,
        type="bool",
        value=value,
    )


def to_string(value, /):
    return Value(value)


CONVERTERS = MappingProxyType({
    "int": to_int,
    "float": to_float,
    "double": to_float,
    "bool": to_bool,
    "string": to_string,
    "str": to_string,
})

_TYPENAMES = MappingProxyType({
    int: "int",
    float: "float",
    bool: "bool",
    str: "string",
})


def resolve(typename, /):
    """
    Converter registered under typename; unknown names resolve to the identity.
    """
    if not isinstance(typename, str):
        raise TypeError("resolve() argument must be a string")
    return CONVERTERS.get(typename, to_string)


def typename(object, /):
    """
    Registry name for the Python types int/float/bool/str, else None.
    """
    return _TYPENAMES.get(object)


def custom(function, /):
    """
    Wrap a user converter (str -> T) into a registry-shaped converter (str -> Value).

    Any exception raised by the function is re-raised as ConversionError naming
    the raw input and carrying the original message; the original is chained.
    """
    if not callable(function):
        raise TypeError("custom() argument must be callable")

    @rename(getattr(function, "__name__", "custom"))
    def converter(value, /):
        try:
            result = function(value)
        except Exception as error:
            raise ConversionError(
                "custom conversion failed for '%s': %s" % (value, error),
                type=converter.__name__,
                value=value,
            ) from error
        return result if isinstance(result, Value) else Value(result)

    converter.__wrapped__ = function
    return converter


__all__ = (
    "resolve",
    "typename",
    "custom",
    "to_int",
    "to_float",
    "to_bool",
    "to_string",
    "CONVERTERS",
    "INT_MIN",
    "INT_MAX",
)
