r"""
Argot tokenizer: raw argument strings -> classified tokens.

Rules (until "--" has been seen)
- "--"            → END_OPTIONS; everything after it is POSITIONAL.
- "--name=value"  → LONG_OPTION "--name" + OPTION_VALUE "value"
                    (matching quotes stripped; double-quoted values get \n \t \r \\ \" \'
                    decoded, unknown escapes kept with their backslash).
- "--name"        → LONG_OPTION.
- "-x"            → SHORT_OPTION.
- "-abc"          → SHORT_OPTION "-a", "-b", "-c" (each keeps raw "-abc").
- anything else   → POSITIONAL ("-" and "" included).

The Tokenizer keeps the stream as an immutable tuple plus a cursor, so the
binder can peek, rewind and seek without re-tokenizing.
"""
import enum
import logging
from typing import NamedTuple

from .faults import NoMoreTokensError

logger = logging.getLogger(__name__)


class TokenKind(enum.Enum):
    POSITIONAL = enum.auto()
    SHORT_OPTION = enum.auto()
    LONG_OPTION = enum.auto()
    OPTION_VALUE = enum.auto()
    END_OPTIONS = enum.auto()


class Token(NamedTuple):
    kind: TokenKind
    value: str
    raw: str
    origin: int = -1

    @property
    def option(self):
        return self.kind in (TokenKind.SHORT_OPTION, TokenKind.LONG_OPTION)

    @property
    def valued(self):
        """
        Whether the token may be consumed as an argument value.
        """
        return self.kind in (TokenKind.POSITIONAL, TokenKind.OPTION_VALUE)


_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def _unescape(text, /):
    chars = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            follower = text[index + 1]
            chars.append(_ESCAPES.get(follower, "\\" + follower))
            index += 2
            continue
        chars.append(char)
        index += 1
    return "".join(chars)


def _unquote(text, /):
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        inner = text[1:-1]
        return _unescape(inner) if text[0] == '"' else inner
    return text


def tokenize(args, /):
    """
    Classify a sequence of raw argument strings; returns a tuple of tokens.
    """
    tokens = []
    positional = False
    for origin, arg in enumerate(args):
        if not isinstance(arg, str):
            raise TypeError("tokenize() arguments must be strings")
        if positional:
            tokens.append(Token(TokenKind.POSITIONAL, arg, arg, origin))
        elif arg == "--":
            tokens.append(Token(TokenKind.END_OPTIONS, arg, arg, origin))
            positional = True
        elif arg.startswith("--"):
            name, separator, value = arg.partition("=")
            tokens.append(Token(TokenKind.LONG_OPTION, name, arg, origin))
            if separator:
                tokens.append(Token(TokenKind.OPTION_VALUE, _unquote(value), arg, origin))
        elif arg.startswith("-") and len(arg) >= 2:
            if len(arg) == 2:
                tokens.append(Token(TokenKind.SHORT_OPTION, arg, arg, origin))
            else:
                tokens.extend(Token(TokenKind.SHORT_OPTION, "-" + char, arg, origin) for char in arg[1:])
        else:
            tokens.append(Token(TokenKind.POSITIONAL, arg, arg, origin))
    return tuple(tokens)


class Tokenizer:
    """
    Replayable token stream.

    - tokenize(args) replaces the buffer and rewinds.
    - next() consumes, peek() does not; both raise NoMoreTokensError at the end.
    - seek(n) is clamped to [0, size()].
    """

    def __init__(self, args=(), /):
        self._tokens = ()
        self._position = 0
        self.tokenize(args)

    def tokenize(self, args, /):
        self._tokens = tokenize(args)
        self._position = 0
        logger.debug("tokenized %d token(s): %s", len(self._tokens), " ".join(token.value for token in self._tokens))
        return self

    @property
    def tokens(self):
        return self._tokens

    def size(self):
        return len(self._tokens)

    def position(self):
        return self._position

    def has_next(self):
        return self._position < len(self._tokens)

    def peek(self):
        if not self.has_next():
            raise NoMoreTokensError("no more tokens", position=self._position)
        return self._tokens[self._position]

    def next(self):
        token = self.peek()
        self._position += 1
        return token

    def reset(self):
        self._position = 0

    def seek(self, position, /):
        if not isinstance(position, int):
            raise TypeError("seek() argument must be an integer")
        self._position = max(0, min(position, len(self._tokens)))

    def __len__(self):
        return len(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __repr__(self):
        return "Tokenizer(size=%d, position=%d)" % (len(self._tokens), self._position)


__all__ = (
    "TokenKind",
    "Token",
    "Tokenizer",
    "tokenize",
)
