"""Data model for a single double-entry ledger transaction.

A :class:`Transaction` is a plain, fully-owned value: it is either built fresh
(:func:`new_transaction`) or produced by :func:`beancount_recorder.codec.parse_transaction`,
edited by the caller, and handed back to the renderer.

Notes
-----
- ``date_iso_str`` stays a string (``YYYY-MM-DD``) to avoid any timezone or
  locale conversion between parse and render.
- Amounts are stored as non-negative :class:`~decimal.Decimal` magnitudes. The
  sign lives in the structure: ``from_parts`` render negative, ``to_parts``
  positive.
- Balance (sum of ``from_parts`` == sum of ``to_parts``) is not validated.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal


@dataclass(slots=True)
class TransactionPart:
    """One leg (posting) of a transaction.

    Attributes
    ----------
    id:
        Ordinal position among all parts of the parent transaction, in text
        order across ``from_parts`` then ``to_parts``. Transient: recomputed on
        every parse, never a persistent key.
    account:
        Colon-separated account name (e.g. ``Assets:Bank:Checking``).
    amount:
        Non-negative magnitude of the posting.
    """

    id: int
    account: str
    amount: Decimal


@dataclass(slots=True)
class Transaction:
    """A dated transaction with a counterparty, a description and its legs."""

    date_iso_str: str
    other_party_name: str
    description: str
    from_parts: list[TransactionPart] = field(default_factory=list)
    to_parts: list[TransactionPart] = field(default_factory=list)

    def renumbered(self) -> Transaction:
        """Return a copy whose part ids follow render order (0..N-1)."""

        counter = 0
        from_parts: list[TransactionPart] = []
        to_parts: list[TransactionPart] = []
        for src, dst in ((self.from_parts, from_parts), (self.to_parts, to_parts)):
            for part in src:
                dst.append(replace(part, id=counter))
                counter += 1
        return replace(self, from_parts=from_parts, to_parts=to_parts)


def new_transaction(today: date | None = None) -> Transaction:
    """Return an empty transaction dated ``today`` with one blank leg per side."""

    day = today or date.today()
    return Transaction(
        date_iso_str=day.isoformat(),
        other_party_name="",
        description="",
        from_parts=[TransactionPart(id=0, account="", amount=Decimal("0"))],
        to_parts=[TransactionPart(id=1, account="", amount=Decimal("0"))],
    )


__all__ = ["Transaction", "TransactionPart", "new_transaction"]
