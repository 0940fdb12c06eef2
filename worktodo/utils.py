"""Shared string and filesystem helpers.

This module centralizes the splitting primitives used by the line decoder and
the small file helpers used by the queue manager.
"""

from __future__ import annotations

from contextlib import suppress
from pathlib import Path


def split(text: str, delimiter: str) -> list[str]:
    """Split ``text`` on every ``delimiter``.

    An empty string yields an empty list rather than ``[""]``.
    """

    if not text:
        return []
    return text.split(delimiter)


def split_respecting_quotes(text: str, delimiter: str = ",") -> list[str]:
    """Split ``text`` on ``delimiter`` except inside double-quoted spans.

    Quote characters are kept in the resulting tokens. A trailing empty token
    (e.g. from a trailing delimiter) is dropped; interior empty tokens are
    kept.

    >>> split_respecting_quotes('1,2,"3,5",7')
    ['1', '2', '"3,5"', '7']
    """

    tokens: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in text:
        if ch == '"':
            in_quotes = not in_quotes
            current.append(ch)
        elif ch == delimiter and not in_quotes:
            tokens.append("".join(current))
            current = []
        else:
            current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


def strip_line_ending(line: str) -> str:
    """Return ``line`` without its trailing line terminator."""

    return line.rstrip("\r\n")


def is_blank(line: str) -> bool:
    """Return True if ``line`` holds nothing but whitespace."""

    return not line.strip()


def discard_file(path: Path) -> None:
    """Remove ``path`` if it exists."""

    with suppress(FileNotFoundError):
        path.unlink()
