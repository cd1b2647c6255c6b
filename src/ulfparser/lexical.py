"""Character classes for each position of the Unified Log Format grammar.

Every predicate takes a single character and only decides accept/stop while
scanning; none of them has side effects.
"""
from __future__ import annotations


def is_datetime_char(c: str) -> bool:
    return "0" <= c <= "9" or c in "/ :.+-"


def is_level_char(c: str) -> bool:
    return "A" <= c <= "Z"


def is_filename_char(c: str) -> bool:
    return (
        "a" <= c <= "z"
        or "A" <= c <= "Z"
        or "0" <= c <= "9"
        or c in ".-_"
    )


def is_line_number_char(c: str) -> bool:
    return "0" <= c <= "9"


def is_unknown_location_char(c: str) -> bool:
    """Characters allowed inside the ``<unknown>`` location marker."""
    return "a" <= c <= "z" or c in "<>"


def is_string_literal_char(c: str) -> bool:
    """Characters allowed in a bare (unquoted) string literal.

    Control characters and space (code points <= 0x20) are excluded, as are
    the structural characters ``"``, ``=``, ``[`` and ``]``.
    """
    return ord(c) > 0x20 and c not in '"=[]'
