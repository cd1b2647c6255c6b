"""Buffered rune cursor over a byte stream.

The reader pulls fixed-size chunks from the underlying stream, decodes them
incrementally as UTF-8 and hands out one character at a time. Exactly one
character can be pushed back after a read, which is all the lookahead the
grammar needs.
"""
from __future__ import annotations

import codecs
from typing import IO, AnyStr


class RuneReader:
    """Read characters one by one from a binary (or text) stream.

    Invalid UTF-8 sequences decode to U+FFFD. The stream is never closed
    by the reader.
    """

    def __init__(self, stream: IO[AnyStr], chunk_size: int = 4096) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._stream = stream
        self._chunk_size = chunk_size
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buf = ""
        self._pos = 0
        self._eof = False
        self._can_unread = False

    def _fill(self) -> bool:
        """Refill the buffer. Returns False once the stream is exhausted."""
        while self._pos >= len(self._buf):
            if self._eof:
                return False
            chunk = self._stream.read(self._chunk_size)
            if isinstance(chunk, bytes):
                text = self._decoder.decode(chunk, final=not chunk)
            else:
                text = chunk
            if not chunk:
                self._eof = True
            self._buf = text
            self._pos = 0
        return True

    def read(self) -> str:
        """Consume and return the next character.

        Raises:
            EOFError: the stream is exhausted.
        """
        if not self._fill():
            self._can_unread = False
            raise EOFError
        c = self._buf[self._pos]
        self._pos += 1
        self._can_unread = True
        return c

    def unread(self) -> None:
        """Push back the character returned by the last :meth:`read`."""
        if not self._can_unread:
            raise RuntimeError("unread without a preceding read")
        self._pos -= 1
        self._can_unread = False

    def peek(self) -> str:
        """Return the next character without consuming it."""
        c = self.read()
        self.unread()
        return c
