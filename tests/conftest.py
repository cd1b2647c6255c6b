"""Shared pytest fixtures for ulfparser tests."""
from __future__ import annotations

import io
from pathlib import Path

import pytest

from ulfparser.parsers.reader import RuneReader
from ulfparser.parsers.stream import StreamParser

WELCOME = '[2021/08/04 12:00:43.128 +08:00] [INFO] [lib.rs:81] ["Welcome to TiKV"]'
DEBUG_FIELDS = (
    "[2021/08/04 12:00:43.129 +08:00] [DEBUG] [<unknown>] [test_message] "
    '[test_k1=test_v1] ["test k2"="test v2"]'
)
RELEASE = '[2021/08/04 12:00:43.129 +08:00] [INFO] [lib.rs:86] ["Release Version:   5.1.0-alpha"]'


def read_rest(reader: RuneReader) -> str:
    """Consume everything left in the reader."""
    chars = []
    while True:
        try:
            chars.append(reader.read())
        except EOFError:
            return "".join(chars)


@pytest.fixture()
def make_parser():
    """Return a factory building a StreamParser over an in-memory string."""

    def _make(text: str, chunk_size: int | None = None) -> StreamParser:
        return StreamParser(io.BytesIO(text.encode("utf-8")), chunk_size=chunk_size)

    return _make


@pytest.fixture()
def ulf_lines() -> list[str]:
    return [WELCOME, DEBUG_FIELDS, RELEASE]


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary log files."""

    def _make(lines: list[str], name: str = "test.log") -> Path:
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _make
