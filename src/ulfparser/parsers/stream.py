"""Streaming Unified Log Format parser.

Reads a byte stream one character at a time and materializes one
:class:`~ulfparser.models.LogEntry` per :meth:`StreamParser.parse_next`
call, so arbitrarily large log files can be parsed without holding them in
memory. A record looks like::

    [2021/08/04 12:00:43.128 +08:00] [INFO] [lib.rs:81] ["Welcome"] [k=v]

Grammar (per record)::

    record   = *newline *SP timestamp SP level SP location SP message *field *SP
    location = "[<unknown>]" / "[" file ":" 1*DIGIT "]"
    field    = *SP "[" literal "=" literal "]"
    literal  = bare-token / json-quoted

For the format itself see
https://github.com/tikv/rfcs/blob/master/text/0018-unified-log-format.md
"""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import IO, AnyStr, Callable, Iterator

from ..config import settings
from ..errors import (
    InvalidDatetimeError,
    InvalidStringLiteralError,
    LogFormatError,
    ParseError,
    TokenTooLongError,
    UnexpectedCharacterError,
    UnexpectedEndError,
)
from ..lexical import (
    is_datetime_char,
    is_filename_char,
    is_level_char,
    is_line_number_char,
    is_string_literal_char,
    is_unknown_location_char,
)
from ..models import LogEntry, LogField, LogHeader, LogLevel
from .reader import RuneReader

logger = logging.getLogger(__name__)

DATETIME_MAX_LEN = 30
LEVEL_MAX_LEN = 5

# YYYY/MM/DD hh:mm:ss.mmm ±hh:mm
_DATETIME_RE = re.compile(
    r"^(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2}) "
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})\.(?P<ms>\d{3}) "
    r"(?P<sign>[+-])(?P<tz_hour>\d{2}):(?P<tz_minute>\d{2})$",
    re.ASCII,
)

# Lone UTF-16 surrogates left behind by a \uXXXX escape.
_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def parse_datetime_token(token: str) -> datetime:
    """Convert a ``YYYY/MM/DD hh:mm:ss.mmm ±hh:mm`` token to an aware datetime."""
    m = _DATETIME_RE.match(token)
    if m is None:
        raise InvalidDatetimeError(
            f"cannot parse {token!r} as 'YYYY/MM/DD hh:mm:ss.mmm +hh:mm'"
        )
    d = {k: int(v) for k, v in m.groupdict().items() if k != "sign"}
    try:
        offset = timedelta(hours=d["tz_hour"], minutes=d["tz_minute"])
        if m.group("sign") == "-":
            offset = -offset
        return datetime(
            d["year"], d["month"], d["day"],
            d["hour"], d["minute"], d["second"], d["ms"] * 1000,
            tzinfo=timezone(offset),
        )
    except ValueError as exc:
        raise InvalidDatetimeError(f"{token!r}: {exc}") from exc


class StreamParser:
    """Parse Unified Log Format records on demand from a stream.

    The parser owns its cursor state: one instance per input source, not
    safe for concurrent use. The stream is owned by the caller and is never
    closed here.

    Usage::

        with open("tikv.log", "rb") as fh:
            parser = StreamParser(fh)
            while (entry := parser.parse_next()) is not None:
                print(entry.header.level, entry.message)
    """

    def __init__(self, stream: IO[AnyStr], chunk_size: int | None = None) -> None:
        self._reader = RuneReader(
            stream, settings.chunk_size if chunk_size is None else chunk_size
        )
        self._line = 1
        self._datetime_buf = bytearray(DATETIME_MAX_LEN)
        self._level_buf = bytearray(LEVEL_MAX_LEN)

    @property
    def line(self) -> int:
        """Current 1-based line number."""
        return self._line

    def __iter__(self) -> Iterator[LogEntry]:
        while (entry := self.parse_next()) is not None:
            yield entry

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def parse_next(self) -> LogEntry | None:
        """Read and parse exactly one record.

        Returns ``None`` when the stream ends at a record boundary.

        Raises:
            LogFormatError: the record is malformed or truncated.
        """
        try:
            self._trim_newlines()
        except EOFError:
            return None
        except ParseError as exc:
            raise self._wrap(exc) from exc

        try:
            entry = self._parse_record()
        except EOFError:
            exc = UnexpectedEndError()
            raise self._wrap(exc) from exc
        except ParseError as exc:
            raise self._wrap(exc) from exc

        try:
            self._trim_char(" ")
        except EOFError:
            pass
        return entry

    def _wrap(self, cause: ParseError) -> LogFormatError:
        logger.debug("Parse failed at line %d: %s", self._line, cause)
        return LogFormatError(self._line, cause)

    def _parse_record(self) -> LogEntry:
        self._trim_char(" ")
        timestamp = self._parse_datetime()
        self._skip_char(" ")
        level = self._parse_level()
        self._skip_char(" ")
        filename, line = self._parse_file_line()
        self._skip_char(" ")
        message = self._parse_message()
        fields = self._parse_fields()
        return LogEntry(
            header=LogHeader(timestamp=timestamp, level=level, file=filename, line=line),
            message=message,
            fields=tuple(fields),
        )

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _skip_char(self, expect: str) -> None:
        c = self._reader.read()
        if c != expect:
            raise UnexpectedCharacterError(c, expected=expect)

    def _trim_char(self, skip: str) -> None:
        while True:
            c = self._reader.read()
            if c != skip:
                self._reader.unread()
                return

    def _trim_newlines(self) -> None:
        """Skip blank lines, counting ``\\n`` and ``\\r\\n`` as one line each."""
        while True:
            c = self._reader.read()
            if c == "\r":
                try:
                    c = self._reader.read()
                except EOFError:
                    raise UnexpectedEndError() from None
                if c != "\n":
                    raise UnexpectedCharacterError(c, expected="\n")
            if c != "\n":
                self._reader.unread()
                return
            self._line += 1

    def _read_bounded(
        self, buf: bytearray, accept: Callable[[str], bool], what: str
    ) -> str:
        """Collect chars accepted by ``accept`` up to ``]`` into ``buf``."""
        n = 0
        while True:
            c = self._reader.read()
            if c == "]":
                break
            if not accept(c):
                raise UnexpectedCharacterError(c)
            if n >= len(buf):
                raise TokenTooLongError(f"{what} too long")
            buf[n] = ord(c)
            n += 1
        return buf[:n].decode("ascii")

    # ------------------------------------------------------------------
    # Header segments
    # ------------------------------------------------------------------

    def _parse_datetime(self) -> datetime:
        self._skip_char("[")
        token = self._read_bounded(self._datetime_buf, is_datetime_char, "datetime")
        return parse_datetime_token(token)

    def _parse_level(self) -> LogLevel:
        self._skip_char("[")
        token = self._read_bounded(self._level_buf, is_level_char, "log level")
        return LogLevel.from_string(token)

    def _parse_file_line(self) -> tuple[str, int]:
        self._skip_char("[")
        c = self._reader.read()
        if c == "<":
            # [<unknown>]
            while (c := self._reader.read()) != "]":
                if not is_unknown_location_char(c):
                    raise UnexpectedCharacterError(c)
            return "", 0
        self._reader.unread()

        filename: list[str] = []
        while (c := self._reader.read()) != ":":
            if not is_filename_char(c):
                raise UnexpectedCharacterError(c)
            filename.append(c)

        digits: list[str] = []
        while (c := self._reader.read()) != "]":
            if not is_line_number_char(c):
                raise UnexpectedCharacterError(c)
            digits.append(c)
        if not digits:
            raise UnexpectedCharacterError("]", expected="line number")
        # All ASCII digits: int() cannot fail here.
        return "".join(filename), int("".join(digits))

    # ------------------------------------------------------------------
    # Message and fields
    # ------------------------------------------------------------------

    def _parse_message(self) -> str:
        self._skip_char("[")
        message = self._parse_string_literal()
        self._skip_char("]")
        return message

    def _parse_fields(self) -> list[LogField]:
        fields: list[LogField] = []
        while True:
            try:
                self._trim_char(" ")
            except EOFError:
                return fields
            if self._reader.read() != "[":
                self._reader.unread()
                return fields
            name = self._parse_string_literal()
            self._skip_char("=")
            value = self._parse_string_literal()
            self._skip_char("]")
            fields.append(LogField(name=name, value=value))

    def _parse_string_literal(self) -> str:
        if self._reader.peek() == '"':
            return self._parse_string_json()
        literal: list[str] = []
        while is_string_literal_char(c := self._reader.read()):
            literal.append(c)
        self._reader.unread()
        return "".join(literal)

    def _parse_string_json(self) -> str:
        """Capture a ``"..."`` literal verbatim, then decode it as JSON."""
        quotes = 0
        literal: list[str] = []
        while quotes < 2:
            c = self._reader.read()
            literal.append(c)
            if c == "\\":
                literal.append(self._reader.read())
            elif c == '"':
                quotes += 1
        raw = "".join(literal)
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidStringLiteralError(f"invalid JSON string {raw!r}: {exc}") from exc
        return _SURROGATE_RE.sub("\ufffd", value)
