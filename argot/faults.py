"""
Argot faults (errors and signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the library
  can raise. Codes are grouped by domain so logs and searches stay predictable.
- ArgumentError: base type that carries message + options and knows how to render
  itself argparse-style (usage, "prog: error: ...", optional hint).
- HelpRequested: the non-error control signal raised by the help action.
- trigger(): central entry point to surface a fault (respecting shell/colorful/fancy).
- getdoc(): optional description lookup for a code from the host application.

Propagation
- Declaration errors are raised at the add_argument() call site.
- Parse errors abort the parse call; nothing is retried or partially returned.
- The library never exits the process unless the parser was built with shell=True,
  in which case trigger() prints the fault and exits (0 for help, 2 for errors).

Builtin ancestry
- Every typed error also derives from the closest builtin (ValueError, KeyError,
  TypeError, LookupError) so generic handlers keep working.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - declaration (1110x)
      • INVALID_ARGUMENT_NAME, DUPLICATE_ARGUMENT
    - values (1111x)
      • EMPTY_VALUE, TYPE_MISMATCH, KEY_NOT_FOUND, CONVERSION_FAILED
    - tokens (1112x)
      • NO_MORE_TOKENS
    - binding (1113x)
      • UNRECOGNIZED_ARGUMENT, ARITY_MISMATCH, INVALID_CHOICE, MISSING_REQUIRED
    - signals (121xx)
      • HELP_REQUESTED
    """
    # --- declaration errors (1110x) ---
    INVALID_ARGUMENT_NAME = 11101
    DUPLICATE_ARGUMENT    = 11102

    # --- value errors (1111x) ---
    EMPTY_VALUE           = 11111
    TYPE_MISMATCH         = 11112
    KEY_NOT_FOUND         = 11113
    CONVERSION_FAILED     = 11114

    # --- token errors (1112x) ---
    NO_MORE_TOKENS        = 11121

    # --- binding errors (1113x) ---
    UNRECOGNIZED_ARGUMENT = 11131
    ARITY_MISMATCH        = 11132
    INVALID_CHOICE        = 11133
    MISSING_REQUIRED      = 11134

    # --- signals (121xx) ---
    HELP_REQUESTED        = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class ArgumentError(Exception):
    """
    Base of every failure raised by argot.

    The message is the bare reason ("invalid int value: 'abc'"); the argument the
    failure concerns, if any, lives in options["argument"] and is prefixed by str().
    Subclasses declare their fault code and title as class keywords.
    """
    __fault__ = Unset
    __title__ = "argument error"

    def __init_subclass__(cls, /, code=Unset, title=Unset, **options):
        super().__init_subclass__(**options)
        if code is not Unset:
            cls.__fault__ = code
        if title is not Unset:
            cls.__title__ = title

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def code(self):
        return self.options.get("code", type(self).__fault__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    def __str__(self):
        if self.argument is not None:
            return "argument %s: %s" % (self.argument, self.message)
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-label": "bold #FF4DA6",

            # body
            "usage": "#36C5F0",
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",
        })

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style)

        parser = self.options.get("parser")
        prog = getattr(main, "__prog__", parser.prog if parser is not None else "program")

        renders = []
        if parser is not None:
            renders.append(text(parser.format_usage().rstrip("\n"), styler("usage")))

        renders.append(Text.assemble(
            text(prog, styler("prog-name")),
            ": ",
            text("error", styler("error-label")),
            ": ",
            text(str(self), styler("error-message")),
        ))
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if self.code is not Unset and (docs := getdoc(self.code)):
            renders.append(text(docs, styler("docs")))

        if self.options.get("fancy", False):
            header = Text.assemble(
                "[ ",
                text(prog, styler("prog-name")),
                " — ",
                text(self.code.normalize() if self.code is not Unset else "", styler("code")),
                " | ",
                text(self.title.title(), styler("error-title")),
                " ]"
            )
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(*renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(2)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidArgumentNameError(ArgumentError, ValueError, code=FaultCode.INVALID_ARGUMENT_NAME, title="invalid argument name"): ...
class DuplicateArgumentError(ArgumentError, ValueError, code=FaultCode.DUPLICATE_ARGUMENT, title="duplicate argument"): ...
class EmptyValueError(ArgumentError, LookupError, code=FaultCode.EMPTY_VALUE, title="empty value"): ...
class TypeMismatchError(ArgumentError, TypeError, code=FaultCode.TYPE_MISMATCH, title="type mismatch"): ...
class KeyNotFoundError(ArgumentError, KeyError, code=FaultCode.KEY_NOT_FOUND, title="key not found"): ...
class ConversionError(ArgumentError, ValueError, code=FaultCode.CONVERSION_FAILED, title="conversion failed"): ...
class NoMoreTokensError(ArgumentError, LookupError, code=FaultCode.NO_MORE_TOKENS, title="no more tokens"): ...
class UnrecognizedArgumentError(ArgumentError, ValueError, code=FaultCode.UNRECOGNIZED_ARGUMENT, title="unrecognized arguments"): ...
class ArityError(ArgumentError, ValueError, code=FaultCode.ARITY_MISMATCH, title="wrong number of values"): ...
class InvalidChoiceError(ArgumentError, ValueError, code=FaultCode.INVALID_CHOICE, title="invalid choice"): ...
class MissingRequiredArgumentError(ArgumentError, ValueError, code=FaultCode.MISSING_REQUIRED, title="missing required arguments"): ...


class HelpRequested(Exception):
    """
    Control signal raised by the help action; not a failure.

    message holds the plain help text. options["rendered"], when present, is the
    styled rich renderable printed in shell mode.
    """
    __fault__ = FaultCode.HELP_REQUESTED

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("HelpRequested message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        rendered = self.options.get("rendered")
        if rendered is None or not self.options.get("colorful", True):
            return Text(self.message)
        return rendered

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        Console().print(self, end="")
        sys.exit(0)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via rich console; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return coalesce(getattr(__import__("__main__"), "__docs__", {}).get(code, Unset))


__all__ = (
    "ArgumentError",
    "InvalidArgumentNameError",
    "DuplicateArgumentError",
    "EmptyValueError",
    "TypeMismatchError",
    "KeyNotFoundError",
    "ConversionError",
    "NoMoreTokensError",
    "UnrecognizedArgumentError",
    "ArityError",
    "InvalidChoiceError",
    "MissingRequiredArgumentError",
    "HelpRequested",
    "FaultCode",
    "trigger",
    "getdoc",
)
