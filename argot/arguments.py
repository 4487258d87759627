r"""
Argot argument definitions and groups.

Overview
- Argument: immutable description of one declared argument (aliases, action,
  arity, converter, default, choices, required flag, help metadata).
- Arity: symbolic nargs ("?", "*", "+", remainder); exact counts stay plain ints.
- ArgumentGroup: titled display bucket; membership never changes binding.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    sanitized fields via read-only properties declared in __introspectable__.

Metadata (sanitized on construction)
- names: one positional name, or one or more option aliases.
  • positional: r"[A-Za-z_][A-Za-z0-9_-]*" (exactly one name)
  • short:      r"-[A-Za-z0-9]+"
  • long:       r"--[A-Za-z0-9_-]+"
- action: store | store_true | store_false | count | append | help | custom.
  Positionals only store; custom requires an accumulator.
- type: registry name ("int", "float", "bool", "string", ...), one of the Python
  types int/float/bool/str, or any other callable (used as a custom converter).
- nargs: None | int (>= 0) | "?" | "*" | "+" | "remainder" | "..." | Ellipsis | Arity.
  Only meaningful for store.
- choices: iterable of allowed (converted) values; duplicates rejected.
- default: any value; Unset means "no default".
- required: options only; positionals derive it from nargs.

Derived
- positional: first alias does not start with '-'.
- dest: storage key (positional name, else longest long alias, else longest short
  alias, dashes stripped).
- canonical: the alias behind dest, used in messages.

Quick example:
    >>> count = Argument("--count", "-c", type=int, default=1)
    >>> count.dest, count.canonical, count.display_metavar
    ('count', '--count', 'COUNT')
"""
import copy
import enum
import functools
import operator
import re
from collections.abc import Iterable
from types import EllipsisType

from . import converters
from .faults import DuplicateArgumentError, InvalidArgumentNameError
from .utils import *
from .values import Value

_POSITIONAL = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")
_SHORT = re.compile(r"-[A-Za-z0-9]+")
_LONG = re.compile(r"--[A-Za-z0-9_-]+")

ACTIONS = ("store", "store_true", "store_false", "count", "append", "help", "custom")
# actions that never consume a value token
SWITCHES = frozenset(("store_true", "store_false", "count", "help"))


class Arity(enum.Enum):
    OPTIONAL = "?"
    ZERO_OR_MORE = "*"
    ONE_OR_MORE = "+"
    REMAINDER = "..."


_ARITIES = {
    "?": Arity.OPTIONAL,
    "*": Arity.ZERO_OR_MORE,
    "+": Arity.ONE_OR_MORE,
    "...": Arity.REMAINDER,
    "remainder": Arity.REMAINDER,
}


class ArgumentType(type):
    """
    Metaclass that gives definitions read-only fields and stable representations.

    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in validation messages.
    - every name in __introspectable__ becomes a mirror() property over "_name".
    - __displayable__ (if set) narrows which properties __rich_repr__ yields.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the alias list and derive positional/dest/canonical.

    Raises
    - TypeError: no names, or a non-string name.
    - InvalidArgumentNameError: a name violates its form, or positional and
      option forms are mixed.
    - DuplicateArgumentError: the same alias appears twice.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    names = []
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif name in names:
            raise DuplicateArgumentError(
                f"conflicting option string: {name}", name=name
            )
        names.append(name)

    positional = not names[0].startswith("-")
    if positional:
        if len(names) > 1:
            raise InvalidArgumentNameError(
                "positional argument %r takes exactly one name" % names[0], name=names[0]
            )
        if not _POSITIONAL.fullmatch(names[0]):
            raise InvalidArgumentNameError("invalid positional argument name: %r" % names[0], name=names[0])
    else:
        for name in names:
            if not (_LONG if name.startswith("--") else _SHORT).fullmatch(name):
                raise InvalidArgumentNameError("invalid option name: %r" % name, name=name)

    metadata["names"] = tuple(names)
    metadata["positional"] = positional

    if positional:
        canonical = names[0]
        dest = canonical
    else:
        longs = [name for name in names if name.startswith("--")]
        shorts = [name for name in names if not name.startswith("--")]
        # max() keeps the first of equally long aliases
        canonical = max(longs or shorts, key=len)
        dest = canonical.lstrip("-")

    metadata["canonical"] = canonical
    metadata["dest"] = dest


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate help/metavar/action/accumulator/required.
    """
    if not isinstance(help := metadata["help"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    metadata["help"] = coalesce(help, "").strip()

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    if (accumulator := metadata["accumulator"]) is not Unset and not callable(accumulator):
        raise TypeError(f"{cls.__typename__} 'accumulator' must be callable")

    action = metadata["action"]
    if action is Unset:
        action = "custom" if accumulator is not Unset else "store"
    if not isinstance(action, str):
        raise TypeError(f"{cls.__typename__} 'action' must be a string")
    elif action not in ACTIONS:
        raise ValueError(f"{cls.__typename__} 'action' must be one of {", ".join(map(repr, ACTIONS))}")
    elif action == "custom" and accumulator is Unset:
        raise TypeError(f"{cls.__typename__} with a 'custom' action must specify an 'accumulator'")
    elif metadata["positional"] and action != "store":
        raise ValueError(f"positional {cls.__typename__} cannot use the {action!r} action")
    metadata["action"] = action
    metadata["accumulator"] = coalesce(accumulator)

    if metadata["positional"]:
        if metadata["required"] is not Unset:
            raise TypeError(f"'required' is an invalid {cls.__typename__} option for positionals")
    elif not isinstance(metadata["required"], bool | Unset):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate type/converter/nargs/choices and settle the converter.

    Side effects
    - metadata["type"] becomes the registry name (or the custom callable's name).
    - metadata["converter"] becomes the str -> Value callable actually used.
    - metadata["nargs"] becomes an int or an Arity member.
    - metadata["choices"] becomes a tuple of Values.
    """
    match (type := metadata["type"]):
        case str():
            converter = converters.resolve(type)
        case _ if (name := converters.typename(type)) is not None:
            type, converter = name, converters.resolve(name)
        case _ if callable(type):
            converter = converters.custom(type)
            type = converter.__name__
        case _:
            raise TypeError(f"{cls.__typename__} 'type' must be a string or a callable")

    if (custom := metadata["converter"]) is not Unset:
        if not callable(custom):
            raise TypeError(f"{cls.__typename__} 'converter' must be callable")
        converter = converters.custom(custom)

    metadata["type"] = type
    metadata["converter"] = converter

    nargs = metadata["nargs"]
    if nargs is not Unset and nargs is not None and metadata["action"] != "store":
        raise ValueError(f"{cls.__typename__} 'nargs' is only valid with the 'store' action")
    match nargs:
        case UnsetType() | None:
            nargs = 0 if metadata["action"] in SWITCHES else 1
        case Arity():
            pass
        case EllipsisType():
            nargs = Arity.REMAINDER
        case bool():
            raise TypeError(f"{cls.__typename__} 'nargs' must be a string or an integer")
        case int() if nargs < 0:
            raise ValueError(f"{cls.__typename__} 'nargs' must be a non-negative integer")
        case int():
            pass
        case str() if nargs in _ARITIES:
            nargs = _ARITIES[nargs]
        case str():
            raise ValueError(f"{cls.__typename__} 'nargs' must be one of '?', '*', '+', or 'remainder'")
        case _:
            raise TypeError(f"{cls.__typename__} 'nargs' must be a string or an integer")
    if metadata["positional"] and nargs == 0:
        raise ValueError(f"positional {cls.__typename__} 'nargs' must be greater than zero")
    metadata["nargs"] = nargs

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be a non-string iterable")
    sanitized = []
    for choice in map(Value, choices):
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    metadata["choices"] = tuple(sanitized)


class Argument(metaclass=ArgumentType):
    """
    Declared argument, immutable once constructed.

    Positional vs. optional is decided by the first alias alone. Every field
    listed in __introspectable__ is a read-only property; default is handed out
    as a deep copy.
    """

    __introspectable__ = (
        "names",
        "help",
        "metavar",
        "action",
        "type",
        "nargs",
        "choices",
        "positional",
        "dest",
        "canonical",
        "converter",
        "accumulator",
    )
    __displayable__ = (
        "names",
        "action",
        "type",
        "nargs",
        "default",
        "choices",
        "required",
        "dest",
    )

    def __init__(
            self,
            *names,
            help=Unset,
            metavar=Unset,
            action=Unset,
            type="string",
            default=Unset,
            choices=(),
            nargs=Unset,
            required=Unset,
            converter=Unset,
            accumulator=Unset
    ):
        metadata = {
            "names": names,
            "help": help,
            "metavar": metavar,
            "action": action,
            "type": type,
            "choices": choices,
            "nargs": nargs,
            "required": required,
            "converter": converter,
            "accumulator": accumulator,
        }
        _sanitize_names(Argument, metadata)
        _sanitize_metadata(Argument, metadata)
        _sanitize_parametric_metadata(Argument, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._default = copy.deepcopy(default)
        if self._positional:
            self._required = self._nargs not in (Arity.OPTIONAL, Arity.ZERO_OR_MORE, Arity.REMAINDER)
        else:
            self._required = coalesce(required, False)

    @property
    def default(self):
        return copy.deepcopy(self._default)

    @property
    def required(self):
        return self._required

    @property
    def switch(self):
        """
        Whether matching this argument consumes no value token.
        """
        return self._action in SWITCHES

    @property
    def multiple(self):
        """
        Whether a store result is a list of raw strings rather than a scalar.
        """
        return self._nargs not in (1, Arity.OPTIONAL)

    @property
    def display_metavar(self):
        if self._metavar is not None:
            return self._metavar
        if self._choices:
            return "{%s}" % ",".join(str(choice.get()) for choice in self._choices)
        if self._positional:
            return self._dest
        return self._dest.upper().replace("-", "_")

    def convert(self, raw, /):
        """
        Convert one raw string with this argument's converter.
        """
        return self._converter(raw)

    def accepts(self, value, /):
        """
        Whether a converted Value satisfies the declared choices.
        """
        return not self._choices or value in self._choices


class ArgumentGroup(metaclass=ArgumentType):
    """
    Titled bucket of arguments, used by help rendering only.

    A group built by a parser forwards every new argument to the parser's
    registry (which rejects duplicate aliases parser-wide); a free-standing
    group checks duplicates among its own arguments.
    """

    __introspectable__ = (
        "title",
        "description",
        "arguments",
    )

    def __init__(self, title, description=Unset, /, *, registry=Unset):
        if not isinstance(title, str):
            raise TypeError(f"{ArgumentGroup.__typename__} 'title' must be a string")
        elif not (title := title.strip()):
            raise ValueError(f"{ArgumentGroup.__typename__} 'title' cannot be empty")
        if not isinstance(description, str | Unset):
            raise TypeError(f"{ArgumentGroup.__typename__} 'description' must be a string")
        if registry is not Unset and not callable(registry):
            raise TypeError(f"{ArgumentGroup.__typename__} 'registry' must be callable")

        self._title = title
        self._description = coalesce(description, "").strip()
        self._arguments = []
        self._registry = registry

    def add_argument(self, *names, **metadata):
        argument = Argument(*names, **metadata)
        if self._registry is not Unset:
            self._registry(argument)
        else:
            for name in argument.names:
                if self.find_argument(name) is not None:
                    raise DuplicateArgumentError(
                        f"conflicting option string: {name}", name=name
                    )
        self._arguments.append(argument)
        return argument

    def find_argument(self, name, /):
        for argument in self._arguments:
            if name in argument.names:
                return argument
        return None

    def argument_count(self):
        return len(self._arguments)

    def empty(self):
        return not self._arguments

    def __len__(self):
        return len(self._arguments)

    def __iter__(self):
        return iter(tuple(self._arguments))


__all__ = (
    "Argument",
    "ArgumentGroup",
    "Arity",
    "ACTIONS",
)
