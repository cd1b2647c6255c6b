"""Typed records produced by the Unified Log Format parser."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any

from .errors import UnknownLevelError


class LogLevel(IntEnum):
    """Severity of a log record, ordered from DEBUG (lowest) to FATAL."""

    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2
    FATAL = 3

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_string(cls, text: str) -> LogLevel:
        """Case-insensitive lookup of a level name.

        Raises:
            UnknownLevelError: ``text`` is not one of the five level names.
        """
        try:
            return cls[text.upper()]
        except KeyError:
            raise UnknownLevelError(text) from None


@dataclass(frozen=True, slots=True)
class LogHeader:
    timestamp: datetime
    level: LogLevel
    file: str = ""
    line: int = 0

    @property
    def is_unknown_location(self) -> bool:
        """True for records logged with the ``<unknown>`` location marker."""
        return not self.file and self.line == 0


@dataclass(frozen=True, slots=True)
class LogField:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One parsed log line: header, message and ordered key/value fields.

    Duplicate field names are kept, in the order they appear on the line.
    """

    header: LogHeader
    message: str
    fields: tuple[LogField, ...] = ()

    def get(self, name: str) -> str | None:
        """Return the value of the first field called ``name``, if any."""
        for f in self.fields:
            if f.name == name:
                return f.value
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation, one key per header component."""
        h = self.header
        return {
            "timestamp": h.timestamp.isoformat(timespec="milliseconds"),
            "level": str(h.level),
            "file": h.file,
            "line": h.line,
            "message": self.message,
            "fields": [{"name": f.name, "value": f.value} for f in self.fields],
        }
