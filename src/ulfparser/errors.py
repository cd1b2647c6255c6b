"""Exception taxonomy for Unified Log Format parsing.

Sub-parsers raise the specific errors below; ``StreamParser.parse_next``
wraps whichever one escapes in a single :class:`LogFormatError` carrying the
line number. End of input between records is not an error at all: it is
signalled by ``parse_next`` returning ``None``.
"""
from __future__ import annotations


class ParseError(Exception):
    """Base class for everything the parser raises."""


class GrammarError(ParseError):
    """An expected literal or character class was not found."""


class UnexpectedCharacterError(GrammarError):
    def __init__(self, found: str, expected: str | None = None) -> None:
        self.found = found
        self.expected = expected
        if expected is None:
            msg = f"unexpected character {found!r}"
        else:
            msg = f"expect {expected!r} but found {found!r}"
        super().__init__(msg)


class UnexpectedEndError(GrammarError):
    """The stream ended after a record had begun."""

    def __init__(self) -> None:
        super().__init__("unexpected end of input")


class TokenTooLongError(ParseError):
    """A bounded token (timestamp or level) outgrew its scratch buffer."""


class ConversionError(ParseError):
    """A syntactically valid token failed domain conversion."""


class InvalidDatetimeError(ConversionError):
    pass


class UnknownLevelError(ConversionError, ValueError):
    """Raised by ``LogLevel.from_string`` for an unrecognized token.

    ``default`` is the level callers may fall back to after handling the
    error; it is never applied implicitly.
    """

    def __init__(self, text: str) -> None:
        from .models import LogLevel

        self.text = text
        self.default = LogLevel.INFO
        super().__init__(f"unexpected log level string '{text}'")


class InvalidStringLiteralError(ConversionError):
    """A JSON-quoted literal could not be decoded."""


class LogFormatError(ParseError):
    """Outermost error: the cause, localized to a line of input."""

    def __init__(self, line: int, cause: Exception) -> None:
        self.line = line
        self.cause = cause
        super().__init__(f"invalid log format at line {line}, cause: {cause}")
