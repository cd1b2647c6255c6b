"""Line/file parser protocol and its Unified Log Format implementation."""
from __future__ import annotations

import io
from typing import Iterator, Protocol, runtime_checkable

from ..errors import GrammarError, LogFormatError
from ..models import LogEntry
from . import batch
from .stream import StreamParser


@runtime_checkable
class LogParser(Protocol):
    """Protocol for log parsers: duck-typed, no inheritance required."""

    def parse_line(self, line: str) -> LogEntry | None:
        """Parse a single log line. Returns None if the line should be skipped."""
        ...

    def parse_file(self, path: str) -> Iterator[LogEntry]:
        """Stream-parse a log file."""
        ...

    @property
    def name(self) -> str:
        """Human-readable parser name (e.g. 'ulf')."""
        ...


class UnifiedLogParser:
    """Adapt :class:`StreamParser` to the line/file :class:`LogParser` protocol.

    Unlike lenient line parsers, malformed input is not skipped: a bad line
    raises :class:`~ulfparser.errors.LogFormatError`.
    """

    @property
    def name(self) -> str:
        return "ulf"

    def parse_line(self, line: str) -> LogEntry | None:
        """Parse one line. Returns None for a blank line.

        Raises:
            LogFormatError: the line is malformed or holds more than one record.
        """
        parser = StreamParser(io.BytesIO(line.encode("utf-8")))
        entry = parser.parse_next()
        if entry is not None and parser.parse_next() is not None:
            raise LogFormatError(parser.line, GrammarError("expected a single record"))
        return entry

    def parse_file(self, path: str) -> Iterator[LogEntry]:
        return batch.parse_file(path)
