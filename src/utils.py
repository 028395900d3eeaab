"""Shared text utilities for phpimpl-core."""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contract.models import Position

_IDENTIFIER = re.compile(r"[^\W\d]\w*")
_VALID_SYMBOL = re.compile(r"^[A-Z]")


def line_starts(text: str) -> list[int]:
    """Return the offset of the first character of every line in ``text``."""
    starts = [0]
    starts.extend(match.end() for match in re.finditer("\n", text))
    return starts


def line_text(text: str, line: int) -> str | None:
    """Return the 1-based ``line`` of ``text`` without its line terminator.

    Returns None when the line lies outside the text.
    """
    if line < 1:
        return None
    lines = text.split("\n")
    if line > len(lines):
        return None
    return lines[line - 1].rstrip("\r")


def offset_to_position(starts: list[int], offset: int) -> tuple[int, int]:
    """Convert a character offset to a 1-based (line, column) pair.

    Args:
        starts: Line start offsets as returned by :func:`line_starts`
        offset: Character offset into the text

    Examples:
        >>> offset_to_position(line_starts("ab\\ncd"), 4)
        (2, 2)
    """
    index = bisect_right(starts, offset) - 1
    return index + 1, offset - starts[index] + 1


def word_at(text: str, position: Position) -> str | None:
    """Return the identifier under ``position``, or None.

    A cursor placed directly after the last character of a word still
    selects that word.
    """
    current = line_text(text, position.line)
    if current is None:
        return None

    index = position.column - 1
    for match in _IDENTIFIER.finditer(current):
        if match.start() <= index <= match.end():
            return match.group()
        if match.start() > index:
            break
    return None


def is_valid_symbol(word: str | None) -> bool:
    """Return True when ``word`` looks like a type name (leading capital)."""
    return bool(word) and _VALID_SYMBOL.match(word) is not None
