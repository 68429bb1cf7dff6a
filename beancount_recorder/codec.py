"""Render a :class:`Transaction` to ledger text and parse it back.

The text block is byte-stable for previously written ledger files::

    2024-01-01 * "Blub" "Test"
      A:B:C -1.25 EUR
      D:E 1.25 EUR

Parsing is deliberately lenient: a header mismatch yields ``None`` ("not a
transaction"), while unrecognized lines after the header are skipped.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from .grammar import HEADER_RE, match_posting
from .models import Transaction, TransactionPart

DEFAULT_CURRENCY = "EUR"

_logger = logging.getLogger(__name__)


def format_amount(amount: Decimal | int | float) -> str:
    """Format ``amount`` fixed-point with exactly two decimals (half up)."""

    d = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    if not d.is_finite():
        # Rendered as-is (Infinity, NaN); the renderer does not validate.
        return f"{d:.2f}"
    with localcontext() as ctx:
        # Enough precision for every integer digit plus two decimals.
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        ctx.rounding = ROUND_HALF_UP
        q = d.quantize(Decimal("0.01"))
    return f"{q:.2f}"


def render_transaction(transaction: Transaction, currency: str = DEFAULT_CURRENCY) -> str:
    """Return the text block for ``transaction``; every line ends with ``\\n``.

    No validation happens here: quotes inside the labels or unbalanced legs
    produce text that is malformed but still rendered.
    """

    t = transaction
    lines = [f'{t.date_iso_str} * "{t.other_party_name}" "{t.description}"\n']
    for part in t.from_parts:
        lines.append(f"  {part.account} -{format_amount(part.amount)} {currency}\n")
    for part in t.to_parts:
        lines.append(f"  {part.account} {format_amount(part.amount)} {currency}\n")
    return "".join(lines)


def parse_transaction(text: str, currency: str | None = None) -> Transaction | None:
    """Parse a transaction block, or return ``None`` when the header is missing.

    Parameters
    ----------
    text:
        The block text; the first line must be the transaction header.
    currency:
        When given, only postings in this currency are accepted. Postings in
        other currencies are skipped like any other unrecognized line.
    """

    lines = text.split("\n")
    header = HEADER_RE.match(lines[0])
    if header is None:
        return None

    from_parts: list[TransactionPart] = []
    to_parts: list[TransactionPart] = []
    next_id = 0
    for line in lines[1:]:
        if not line:
            continue
        m = match_posting(line, currency)
        if m is None:
            _logger.debug("skipping non-posting line: %r", line)
            continue
        account, raw_amount = m.group(1), m.group(2)
        try:
            amount = Decimal(raw_amount)
        except InvalidOperation:  # pragma: no cover - grammar only admits decimals
            _logger.debug("skipping posting with invalid amount: %r", line)
            continue
        part = TransactionPart(id=next_id, account=account, amount=amount.copy_abs())
        if amount < 0:
            from_parts.append(part)
        else:
            to_parts.append(part)
        next_id += 1

    return Transaction(
        date_iso_str=header.group(1),
        other_party_name=header.group(2),
        description=header.group(3),
        from_parts=from_parts,
        to_parts=to_parts,
    )


__all__ = ["DEFAULT_CURRENCY", "format_amount", "parse_transaction", "render_transaction"]
