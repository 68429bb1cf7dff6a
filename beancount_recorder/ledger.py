"""File-level operations on ledger notes: append and rewrite in place.

These functions sit between the pure codec/locator and the file system. They
read the whole note into memory, work on a snapshot of its lines, and write it
back; the located span is recomputed on every call.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from .codec import DEFAULT_CURRENCY, parse_transaction, render_transaction
from .errors import TransactionNotFoundError, TransactionParseError
from .locator import BlockRange, block_text, locate_block, replace_block
from .models import Transaction

_logger = logging.getLogger(__name__)


def _separator_for(content: str) -> str:
    # Exactly one blank line between existing content and the new block.
    if not content.strip():
        return ""
    trailing = len(content) - len(content.rstrip("\n"))
    return "\n" * max(0, 2 - trailing)


def append_transaction(
    path: str | os.PathLike[str],
    transaction: Transaction,
    currency: str = DEFAULT_CURRENCY,
) -> Path:
    """Append ``transaction`` to the note at ``path``, creating it if needed."""

    p = Path(path)
    if not p.exists():
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("", encoding="utf-8")
        _logger.info("created ledger file %s", p)

    content = p.read_text(encoding="utf-8")
    with p.open("a", encoding="utf-8", newline="") as f:
        f.write(_separator_for(content) + render_transaction(transaction, currency))
    _logger.info("appended transaction dated %s to %s", transaction.date_iso_str, p)
    return p


def _read_lines(path: Path) -> list[str]:
    # No newline translation: CRLF lines keep their trailing "\r".
    with path.open(encoding="utf-8", newline="") as f:
        return f.read().split("\n")


def _locate_and_parse(
    lines: list[str], path: Path, line: int, currency: str | None
) -> tuple[BlockRange, Transaction]:
    block = locate_block(lines, line, currency)
    if block is None:
        raise TransactionNotFoundError(path, line)
    transaction = parse_transaction(block_text(lines, block), currency)
    if transaction is None:
        raise TransactionParseError(path, line)
    return block, transaction


def read_transaction_at(
    path: str | os.PathLike[str], line: int, currency: str | None = None
) -> tuple[BlockRange, Transaction]:
    """Return the block around 0-based ``line`` and its parsed transaction.

    Raises
    ------
    TransactionNotFoundError
        When no transaction block surrounds ``line``.
    TransactionParseError
        When the located block cannot be parsed.
    IndexError
        When ``line`` is outside the file.
    """

    p = Path(path)
    return _locate_and_parse(_read_lines(p), p, line, currency)


def rewrite_transaction_at(
    path: str | os.PathLike[str],
    line: int,
    edit: Callable[[Transaction], Transaction],
    currency: str = DEFAULT_CURRENCY,
) -> Transaction:
    """Replace the transaction around ``line`` with ``edit(transaction)``.

    Only the located span changes; every other byte of the note is kept. The
    block is located among postings in ``currency`` so that the re-rendered
    text covers exactly what was parsed.
    """

    p = Path(path)
    lines = _read_lines(p)
    block, existing = _locate_and_parse(lines, p, line, currency)
    updated = edit(existing)
    eol = "\r\n" if lines[block.first_line].endswith("\r") else "\n"
    text = render_transaction(updated, currency).replace("\n", eol)
    new_lines = replace_block(lines, block, text)
    p.write_text("\n".join(new_lines), encoding="utf-8", newline="")
    _logger.info(
        "rewrote transaction at lines %d-%d of %s", block.first_line + 1, block.last_line + 1, p
    )
    return updated


__all__ = ["append_transaction", "read_transaction_at", "rewrite_transaction_at"]
