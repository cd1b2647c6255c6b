"""Whole-input convenience wrappers around :class:`StreamParser`.

The list-returning helpers drive the stream parser until the end-of-input
sentinel and either return every record or raise the first error; records
collected before a failure are discarded.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import IO, AnyStr, Iterator

from ..models import LogEntry
from .stream import StreamParser

logger = logging.getLogger(__name__)


def parse_from_reader(stream: IO[AnyStr]) -> list[LogEntry]:
    """Parse every record from ``stream`` until it is exhausted."""
    entries = list(StreamParser(stream))
    logger.debug("Parsed %d entries", len(entries))
    return entries


def parse_from_bytes(data: bytes) -> list[LogEntry]:
    return parse_from_reader(io.BytesIO(data))


def parse_from_string(text: str) -> list[LogEntry]:
    return parse_from_reader(io.BytesIO(text.encode("utf-8")))


def parse_file(path: str | Path) -> Iterator[LogEntry]:
    """Stream-parse a log file. Memory usage: one record at a time."""
    with open(path, "rb") as fh:
        yield from StreamParser(fh)
