"""Find the line span of a transaction block around an editing cursor.

All functions are pure: they classify lines and return indices, never touching
the document. The host re-runs :func:`locate_block` against a fresh snapshot of
its lines before every rewrite.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from .grammar import HEADER_RE, match_posting


class BlockRange(NamedTuple):
    """Inclusive ``[first_line, last_line]`` span of one transaction block."""

    first_line: int
    last_line: int


def is_header_line(line: str) -> bool:
    return HEADER_RE.match(line) is not None


def is_part_line(line: str, currency: str | None = None) -> bool:
    return match_posting(line, currency) is not None


def locate_block(
    lines: Sequence[str],
    cursor_line: int,
    currency: str | None = None,
) -> BlockRange | None:
    """Return the block containing ``cursor_line``, or ``None`` if there is none.

    The cursor may sit on the header or on any posting line. A posting run that
    is not directly preceded by a header, or a header not directly followed by
    at least one posting, is not a block.

    Raises
    ------
    IndexError
        When ``cursor_line`` is outside ``lines``.
    """

    if not 0 <= cursor_line < len(lines):
        raise IndexError(f"cursor line {cursor_line} out of range (0..{len(lines) - 1})")

    first = cursor_line
    if not is_header_line(lines[first]):
        if not is_part_line(lines[first], currency):
            return None
        while first >= 0 and is_part_line(lines[first], currency):
            first -= 1
        if first < 0 or not is_header_line(lines[first]):
            return None

    last = first + 1
    if last >= len(lines) or not is_part_line(lines[last], currency):
        return None
    while last + 1 < len(lines) and is_part_line(lines[last + 1], currency):
        last += 1
    return BlockRange(first, last)


def block_text(lines: Sequence[str], block: BlockRange) -> str:
    """Return the block's text including the newline after its last line."""

    return "".join(f"{line}\n" for line in lines[block.first_line : block.last_line + 1])


def replace_block(lines: Sequence[str], block: BlockRange, text: str) -> list[str]:
    """Return a new line list with ``block`` replaced by newline-terminated ``text``."""

    new_lines = text.split("\n")
    if text.endswith("\n"):
        new_lines.pop()
    return [*lines[: block.first_line], *new_lines, *lines[block.last_line + 1 :]]


__all__ = [
    "BlockRange",
    "block_text",
    "is_header_line",
    "is_part_line",
    "locate_block",
    "replace_block",
]
