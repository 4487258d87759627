"""
Argot help, usage and error rendering.

HelpGenerator builds rich Text (styled when colorful) and derives the plain
string from it, so the printed help and the HelpRequested payload never drift.
ErrorFormatter produces argparse-style error strings.

Layout
    usage: prog [-h] [-o OUTPUT] input

    description

    positional arguments:
      input          input file

    options:
      -h, --help     show this help message and exit
      -o, --output OUTPUT
                     output file

    epilog

Palette keys
- usage-label, program-name, description-section, epilog-section
- group-label, group-description, argument-description
- positional-name, option-name, metavar, choice

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
import textwrap
from collections import defaultdict

from rich.text import Text

from .arguments import Arity
from .utils import Unset, coalesce

MAX_HELP_POSITION = 24
INDENT = 2


def format_args(argument, metavar, /):
    """
    Arity-decorated metavar, argparse-style ("[M]", "[M [M ...]]", "M [M ...]", "M M", "...").
    """
    match argument.nargs:
        case Arity.OPTIONAL:
            return "[%s]" % metavar
        case Arity.ZERO_OR_MORE:
            return "[%s [%s ...]]" % (metavar, metavar)
        case Arity.ONE_OR_MORE:
            return "%s [%s ...]" % (metavar, metavar)
        case Arity.REMAINDER:
            return "..."
        case int(count):
            return " ".join([metavar] * count)


class HelpGenerator:
    """
    Render usage and help for a parser as rich Text.

    The parser is read through its public surface only (prog, description,
    epilog, arguments, groups, colorful, width).
    """

    def __init__(self, parser, /, *, colorful=Unset, width=Unset):
        self._parser = parser
        self._colorful = coalesce(colorful, getattr(parser, "colorful", True))
        self._width = coalesce(width, getattr(parser, "width", 80))
        self._styles = defaultdict(str, {
            # === Head sections ===
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "description-section": "italic #A3A3A3",  # Neutral gray
            "epilog-section": "#737373",  # Dim footer gray

            # === Groups / arguments ===
            "group-label": "bold #FFFFFF",  # Pure white headers
            "group-description": "#9CA3AF",
            "argument-description": "#9CA3AF",  # Muted gray

            # === Names / metavars ===
            "positional-name": "bold #22C55E",
            "option-name": "bold #00E6FF",
            "metavar": "bold #FFD600",  # AMBER for parameters
            "choice": "bold #FF4D94",  # MAGENTA → choices stand out
        } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(self, style, /):
        return self._styles[style] if self._colorful else ""

    def text(self, fragment, style="", /):
        return Text(str(fragment), self.styler(style) if style else "")

    def _metavar(self, argument, /, *, decorated=True):
        style = "choice" if argument.choices and argument.metavar is None else "metavar"
        metavar = argument.display_metavar
        return self.text(format_args(argument, metavar) if decorated else metavar, style)

    def _usage_part(self, argument, /):
        if argument.positional:
            return self._metavar(argument)
        part = Text.assemble(self.text(argument.names[0], "option-name"))
        if not argument.switch:
            part.append(" ")
            part.append_text(self._metavar(argument))
        if argument.required:
            return part
        return Text.assemble("[", part, "]")

    def usage(self):
        """
        Usage line (no trailing newline), wrapped with a hanging indent.
        """
        arguments = self._parser.arguments
        parts = [self._usage_part(argument) for argument in arguments if not argument.positional]
        parts += [self._usage_part(argument) for argument in arguments if argument.positional]

        usage = Text()
        usage.append_text(self.text("usage", "usage-label"))
        usage.append(": ")
        usage.append_text(self.text(self._parser.prog, "program-name"))

        offset = len(usage) + 1
        column = len(usage)
        for part in parts:
            if column + 1 + len(part) > self._width and column > offset:
                usage.append("\n" + " " * offset)
                column = offset
            else:
                usage.append(" ")
                column += 1
            usage.append_text(part)
            column += len(part)
        return usage

    def _invocation(self, argument, /):
        if argument.positional:
            return self.text(argument.display_metavar, "positional-name")
        invocation = Text(", ").join(self.text(name, "option-name") for name in argument.names)
        if not argument.switch:
            invocation.append(" ")
            # "?" shows the bare metavar in rows; brackets belong to the usage line
            invocation.append_text(self._metavar(argument, decorated=argument.nargs is not Arity.OPTIONAL))
        return invocation

    def _section(self, group, /, position):
        section = Text()
        section.append_text(self.text(group.title + ":", "group-label"))
        section.append("\n")
        if group.description:
            for line in textwrap.wrap(group.description, max(self._width - INDENT, 20)):
                section.append(" " * INDENT)
                section.append_text(self.text(line, "group-description"))
                section.append("\n")
            section.append("\n")

        helpwidth = max(self._width - position, 11)
        for argument in group:
            invocation = self._invocation(argument)
            section.append(" " * INDENT)
            section.append_text(invocation)
            lines = textwrap.wrap(argument.help, helpwidth) if argument.help else []
            if not lines:
                section.append("\n")
                continue
            if INDENT + len(invocation) + 2 <= position:
                section.append(" " * (position - INDENT - len(invocation)))
            else:
                section.append("\n" + " " * position)
            section.append_text(self.text(lines[0], "argument-description"))
            section.append("\n")
            for line in lines[1:]:
                section.append(" " * position)
                section.append_text(self.text(line, "argument-description"))
                section.append("\n")
        return section

    def render(self):
        """
        Full help as rich Text, ending with a newline.
        """
        output = Text()
        output.append_text(self.usage())
        output.append("\n")

        if description := self._parser.description:
            output.append("\n")
            for line in textwrap.wrap(description, self._width):
                output.append_text(self.text(line, "description-section"))
                output.append("\n")

        groups = [group for group in self._parser.groups if not group.empty()]
        longest = max((INDENT + len(self._invocation(argument)) for group in groups for argument in group), default=0)
        position = min(longest + 2, MAX_HELP_POSITION, max(self._width - 20, INDENT * 2))

        for group in groups:
            output.append("\n")
            output.append_text(self._section(group, position))

        if epilog := self._parser.epilog:
            output.append("\n")
            for line in textwrap.wrap(epilog, self._width):
                output.append_text(self.text(line, "epilog-section"))
                output.append("\n")
        return output

    def format(self):
        return self.render().plain

    def format_usage(self):
        return self.usage().plain + "\n"


class ErrorFormatter:
    """
    argparse-style error strings.

    - format_error(message)            -> "prog: error: message\\n"
    - format_error_with_usage(message) -> "usage: prog [options] ...\\n" + format_error(message)

    message may be a string or an ArgumentError (rendered through str()).
    """

    def __init__(self, parser, /):
        self._parser = parser

    def usage(self):
        parts = ["usage:", self._parser.prog]
        arguments = self._parser.arguments
        if any(not argument.positional and not argument.required for argument in arguments):
            parts.append("[options]")
        for argument in arguments:
            if argument.positional or not argument.required:
                continue
            parts.append(argument.names[0])
            if not argument.switch:
                parts.append(format_args(argument, argument.display_metavar))
        for argument in arguments:
            if argument.positional:
                parts.append(format_args(argument, argument.display_metavar))
        return " ".join(parts) + "\n"

    def format_error(self, message, /):
        return "%s: error: %s\n" % (self._parser.prog, message)

    def format_error_with_usage(self, message, /):
        return self.usage() + self.format_error(message)


__all__ = (
    "HelpGenerator",
    "ErrorFormatter",
    "format_args",
)
