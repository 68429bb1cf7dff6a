"""Public interface for the ``beancount_recorder`` package.

Re-exports the transaction model, the text codec and the block locator: the
three pure operations a host calls (``render_transaction``,
``parse_transaction``, ``locate_block``). File, settings and CLI helpers live in
their own modules.
"""

import logging

from .codec import DEFAULT_CURRENCY, format_amount, parse_transaction, render_transaction
from .errors import LedgerError, TransactionNotFoundError, TransactionParseError
from .locator import (
    BlockRange,
    block_text,
    is_header_line,
    is_part_line,
    locate_block,
    replace_block,
)
from .models import Transaction, TransactionPart, new_transaction

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Codec
    "DEFAULT_CURRENCY",
    "format_amount",
    "parse_transaction",
    "render_transaction",
    # Locator
    "BlockRange",
    "block_text",
    "is_header_line",
    "is_part_line",
    "locate_block",
    "replace_block",
    # Models
    "Transaction",
    "TransactionPart",
    "new_transaction",
    # Errors
    "LedgerError",
    "TransactionNotFoundError",
    "TransactionParseError",
]
