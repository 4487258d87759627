"""
Argot parser: declaration surface and the per-call binder.

Declaration
- add_argument() routes a definition to the "positional arguments" or the
  "options" group by its first alias; every alias is registered parser-wide and
  collisions raise DuplicateArgumentError right away.
- add_argument_group() adds a display bucket; membership never changes binding.

Parsing
- parse_args(args) takes an explicit list (nothing stripped); parse_args() with
  no list reads sys.argv and strips the program name.
- parse_argv(argv) takes an OS vector and strips (and adopts) the program name.
- Every call runs in a fresh _Session, so parser state is never mutated by a
  parse (beyond prog adoption in parse_argv when prog was not given).

Binding rules
- Defaults are seeded first: explicit defaults are deep-copied, store_true and
  store_false imply False and True, unfilled "*" positionals become [].
- Tokens are scanned once, left to right; positionals fill in declaration order.
- Unknown aliases, excess positionals and stray inline values are collected and
  reported together after the required check.
- Single-value results are converted scalars; every other arity stores the raw
  strings as a list (still validated through the converter and choices).

Shell mode
    >>> parser = ArgumentParser("tool", shell=True)
    >>> parser.parse_args(["--help"])   # prints help, exits 0
    >>> parser.parse_args(["--bogus"])  # prints usage + error to stderr, exits 2
"""
import logging
import re
import sys
from collections import deque

from rich.console import Console

from .arguments import ArgumentGroup, ArgumentType, Arity
from .faults import *
from .formatting import ErrorFormatter, HelpGenerator
from .namespace import Namespace
from .tokens import TokenKind, Tokenizer
from .utils import *
from .values import Value

logger = logging.getLogger(__name__)


def _required_message(names, /):
    if not names:
        return "required arguments are missing"
    return "the following arguments are required: %s" % ", ".join(names)


def _arity_message(nargs, /):
    match nargs:
        case Arity.ONE_OR_MORE:
            return "expected at least one argument"
        case 1:
            return "expected one argument"
        case int(count):
            return "expected %d argument%s" % (count, "" if count == 1 else "s")


class _Session:
    """
    Transient state of one parse call: token cursor, positional queue, alias
    map, result namespace and the set of matched arguments.
    """

    def __init__(self, parser, args, /):
        self._parser = parser
        self._tokens = Tokenizer(args)
        self._positionals = deque(argument for argument in parser.arguments if argument.positional)
        self._options = {
            name: argument
            for argument in parser.arguments if not argument.positional
            for name in argument.names
        }
        self._namespace = Namespace()
        self._seen = set()
        self._extras = []

    def run(self):
        self._seed()
        while self._tokens.has_next():
            token = self._tokens.next()
            match token.kind:
                case TokenKind.POSITIONAL:
                    self._positional(token)
                case TokenKind.SHORT_OPTION | TokenKind.LONG_OPTION:
                    self._option(token)
                case TokenKind.OPTION_VALUE:
                    self._extras.append(token.value)
                case TokenKind.END_OPTIONS:
                    pass
        self._finalize()
        logger.debug("parsed keys: %s", ", ".join(self._namespace.keys()))
        return self._namespace

    def _seed(self):
        for argument in self._parser.arguments:
            if (default := argument.default) is not Unset:
                self._namespace.set(argument.dest, default)
            elif argument.action == "store_true":
                self._namespace.set(argument.dest, False)
            elif argument.action == "store_false":
                self._namespace.set(argument.dest, True)
        logger.debug("seeded defaults: %r", self._namespace)

    def _valued(self):
        return self._tokens.has_next() and self._tokens.peek().valued

    def _inline(self):
        if self._tokens.has_next() and self._tokens.peek().kind is TokenKind.OPTION_VALUE:
            return self._tokens.next().value
        return Unset

    def _remainder(self):
        """
        Every remaining source argument, verbatim, once each.

        Bundle siblings of the token just consumed are emitted one by one.
        """
        collected = []
        origin = self._tokens.tokens[self._tokens.position() - 1].origin if self._tokens.position() else Unset
        sibling = origin is not Unset and origin >= 0
        while self._tokens.has_next():
            token = self._tokens.next()
            if sibling and token.origin == origin:
                collected.append(token.value)
                continue
            sibling = False
            if token.origin != origin or token.origin < 0:
                collected.append(token.raw)
            origin = token.origin
        return collected

    def _positional(self, token, /):
        if not self._positionals:
            self._extras.append(token.value)
            return
        argument = self._positionals.popleft()
        self._seen.add(argument)
        logger.debug("binding %r to positional %s", token.value, argument.dest)

        values = [token.value]
        match argument.nargs:
            case Arity.REMAINDER:
                values += self._remainder()
            case Arity.ZERO_OR_MORE | Arity.ONE_OR_MORE:
                while self._valued():
                    values.append(self._tokens.next().value)
            case int(count):
                while len(values) < count and self._valued():
                    values.append(self._tokens.next().value)
                if len(values) < count:
                    raise ArityError(_arity_message(count), argument=argument.canonical)
        self._store(argument, argument.canonical, values)

    def _option(self, token, /):
        if (argument := self._options.get(token.value)) is None:
            unknown = token.raw if token.kind is TokenKind.LONG_OPTION else token.value
            logger.debug("unrecognized option %s", unknown)
            self._extras.append(unknown)
            # the inline value of an unknown option is part of the same raw argument
            self._inline()
            return

        self._seen.add(argument)
        inline = self._inline()
        logger.debug("dispatching %s to %s (%s)", token.value, argument.dest, argument.action)

        match argument.action:
            case "help":
                generator = HelpGenerator(self._parser)
                raise HelpRequested(generator.format(), rendered=generator.render())
            case "store_true" | "store_false" | "count" if inline is not Unset:
                raise ArityError("ignored explicit argument %r" % inline, argument=token.value)
            case "store_true":
                self._namespace.set(argument.dest, True)
            case "store_false":
                self._namespace.set(argument.dest, False)
            case "count":
                self._namespace.set(argument.dest, (self._namespace.get(argument.dest, None) or 0) + 1)
            case "append":
                self._append(argument, token.value, inline)
            case "custom":
                self._accumulate(argument, token.value, inline)
            case "store":
                self._store(argument, token.value, self._collect(argument, token.value, inline))

    def _collect(self, argument, alias, inline, /):
        """
        Raw strings for a store option per its arity; Unset when "?" found none.
        """
        values = [] if inline is Unset else [inline]
        match argument.nargs:
            case Arity.REMAINDER:
                values += self._remainder()
            case Arity.OPTIONAL:
                if not values and self._valued():
                    values.append(self._tokens.next().value)
                if not values:
                    return Unset
            case Arity.ZERO_OR_MORE | Arity.ONE_OR_MORE:
                while self._valued():
                    values.append(self._tokens.next().value)
                if not values and argument.nargs is Arity.ONE_OR_MORE:
                    raise ArityError(_arity_message(Arity.ONE_OR_MORE), argument=alias)
            case int(count):
                if len(values) > count:
                    raise ArityError("ignored explicit argument %r" % inline, argument=alias)
                while len(values) < count and self._valued():
                    values.append(self._tokens.next().value)
                if len(values) < count:
                    raise ArityError(_arity_message(count), argument=alias)
        return values

    def _convert(self, argument, alias, raw, /):
        try:
            value = argument.convert(raw)
        except ConversionError as error:
            raise ConversionError(error.message, argument=alias, value=raw, type=argument.type) from error
        if not argument.accepts(value):
            choices = tuple(choice.get() for choice in argument.choices)
            raise InvalidChoiceError(
                "invalid choice: %r (choose from %s)" % (value.get(), ", ".join(map(repr, choices))),
                argument=alias,
                value=value.get(),
                choices=choices,
            )
        return value

    def _store(self, argument, alias, values, /):
        dest = argument.dest
        if values is Unset:
            if (default := argument.default) is not Unset:
                self._namespace.set(dest, default)
            else:
                self._namespace.remove(dest)
        elif argument.multiple:
            if argument.nargs is not Arity.REMAINDER:
                for raw in values:
                    self._convert(argument, alias, raw)
            self._namespace.set(dest, list(values))
        else:
            self._namespace.set(dest, self._convert(argument, alias, values[0]))

    def _append(self, argument, alias, inline, /):
        if inline is Unset:
            if not self._valued():
                raise ArityError(_arity_message(1), argument=alias)
            inline = self._tokens.next().value
        value = self._convert(argument, alias, inline)
        match self._namespace.get(argument.dest, None):
            case None:
                items = []
            case list(current):
                items = current
            case current:
                items = [current]
        items.append(value.get())
        self._namespace.set(argument.dest, items)

    def _accumulate(self, argument, alias, inline, /):
        raw = inline
        if raw is Unset:
            raw = self._tokens.next().value if self._valued() else None
        current = self._namespace.value(argument.dest) if self._namespace.has(argument.dest) else Value()
        try:
            result = argument.accumulator(current, raw)
        except ArgumentError:
            raise
        except Exception as error:
            raise ConversionError(
                "custom action failed for %r: %s" % (raw, error),
                argument=alias,
                value=raw,
            ) from error
        self._namespace.set(argument.dest, result)

    def _finalize(self):
        for argument in self._positionals:
            if argument.nargs in (Arity.ZERO_OR_MORE, Arity.REMAINDER) and argument.default is Unset:
                self._namespace.set(argument.dest, [])

        missing = [
            argument.canonical
            for argument in self._parser.arguments
            if argument.required and argument not in self._seen and argument.default is Unset
        ]
        if missing:
            raise MissingRequiredArgumentError(_required_message(missing), missing=tuple(missing))

        if self._extras:
            raise UnrecognizedArgumentError(
                "unrecognized arguments: %s" % " ".join(self._extras), tokens=tuple(self._extras)
            )


class ArgumentParser(metaclass=ArgumentType):
    """
    Declarative command-line parser.

    Definitions outlive parse calls and may be shared by concurrent parses as
    long as nobody declares new arguments meanwhile.
    """

    __introspectable__ = (
        "description",
        "epilog",
        "add_help",
        "shell",
        "colorful",
        "fancy",
        "width",
    )
    __displayable__ = (
        "prog",
        "description",
        "add_help",
        "arguments",
    )

    def __init__(
            self,
            prog=Unset,
            description=Unset,
            epilog=Unset,
            add_help=True,
            *,
            shell=False,
            colorful=True,
            fancy=False,
            width=80
    ):
        for name, object in (("prog", prog), ("description", description), ("epilog", epilog)):
            if not isinstance(object, str | Unset):
                raise TypeError(f"{ArgumentParser.__typename__} {name!r} must be a string")
        for name, object in (("add_help", add_help), ("shell", shell), ("colorful", colorful), ("fancy", fancy)):
            if not isinstance(object, bool):
                raise TypeError(f"{ArgumentParser.__typename__} {name!r} must be a boolean")
        if not isinstance(width, int) or isinstance(width, bool):
            raise TypeError(f"{ArgumentParser.__typename__} 'width' must be an integer")
        elif width < 20:
            raise ValueError(f"{ArgumentParser.__typename__} 'width' must be at least 20")

        self._prog = coalesce(prog, "program")
        self._explicit = prog is not Unset
        self._description = coalesce(description, "").strip()
        self._epilog = coalesce(epilog, "").strip()
        self._add_help = add_help
        self._shell = shell
        self._colorful = colorful
        self._fancy = fancy
        self._width = width

        self._arguments = []
        self._aliases = {}
        self._positional_group = ArgumentGroup("positional arguments", registry=self._register)
        self._optional_group = ArgumentGroup("options", registry=self._register)
        self._groups = [self._positional_group, self._optional_group]

        if add_help:
            self._optional_group.add_argument("-h", "--help", action="help", help="show this help message and exit")

    @property
    def prog(self):
        return self._prog

    @property
    def arguments(self):
        """
        Every declared argument, in declaration order.
        """
        return tuple(self._arguments)

    @property
    def groups(self):
        return tuple(self._groups)

    @property
    def positional_group(self):
        return self._positional_group

    @property
    def optional_group(self):
        return self._optional_group

    def _register(self, argument, /):
        for name in argument.names:
            if name in self._aliases:
                raise DuplicateArgumentError(f"conflicting option string: {name}", name=name)
        for name in argument.names:
            self._aliases[name] = argument
        self._arguments.append(argument)

    def add_argument(self, *names, **metadata):
        if names and isinstance(names[0], str) and not names[0].startswith("-"):
            return self._positional_group.add_argument(*names, **metadata)
        return self._optional_group.add_argument(*names, **metadata)

    def add_argument_group(self, title, description=Unset, /):
        group = ArgumentGroup(title, description, registry=self._register)
        self._groups.append(group)
        return group

    def argument_count(self):
        return len(self._arguments)

    def has_argument(self, name, /):
        return name in self._aliases

    def get_argument(self, name, /):
        return self._aliases.get(name)

    def parse_args(self, args=None, /):
        if args is None:
            return self.parse_argv(sys.argv)
        if isinstance(args, str):
            raise TypeError("parse_args() argument must be a list of strings, not a string")
        return self._parse(list(args))

    def parse_argv(self, argv, /):
        if isinstance(argv, str):
            raise TypeError("parse_argv() argument must be a list of strings, not a string")
        argv = list(argv)
        if not argv:
            return self._parse([])
        if not self._explicit and isinstance(argv[0], str) and (basename := re.split(r"[/\\]", argv[0])[-1]):
            self._prog = basename
        return self._parse(argv[1:])

    def _parse(self, args, /):
        try:
            return _Session(self, args).run()
        except (ArgumentError, HelpRequested) as fault:
            if not self._shell:
                raise
            trigger(fault, parser=self, shell=True, colorful=self._colorful, fancy=self._fancy)

    def format_usage(self):
        return HelpGenerator(self).format_usage()

    def format_help(self):
        return HelpGenerator(self).format()

    def print_help(self):
        Console(width=self._width, no_color=not self._colorful).print(HelpGenerator(self).render(), end="")

    def format_error(self, message, /):
        return ErrorFormatter(self).format_error(message)

    def format_error_with_usage(self, message, /):
        return ErrorFormatter(self).format_error_with_usage(message)


__all__ = (
    "ArgumentParser",
)
