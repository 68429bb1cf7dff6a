"""Line grammar shared by the codec and the block locator.

Header line::

    2024-01-01 * "Other party" "Description"

Posting line (two-space indent, greedy account, rightmost amount/currency)::

      Assets:Bank:Checking -12.50 EUR
"""

from __future__ import annotations

import re
from functools import lru_cache

# Anchored at the start of the line; text after the quoted pair is tolerated.
HEADER_RE = re.compile(r'^([0-9]{4}-[0-9]{1,2}-[0-9]{1,2}) [*?] "(.*)" "(.*)"')

# Beancount commodity names: uppercase start, then uppercase/digits/'._-
_CURRENCY = r"[A-Z][A-Z0-9'._\-]*"
_AMOUNT = r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)"

POSTING_RE = re.compile(rf"^  (.*) ({_AMOUNT}) ({_CURRENCY})\s*$")


@lru_cache(maxsize=32)
def _posting_re_for(currency: str) -> re.Pattern[str]:
    # A configured currency is matched literally, whatever its spelling.
    return re.compile(rf"^  (.*) ({_AMOUNT}) ({re.escape(currency)})\s*$")


def match_posting(line: str, currency: str | None = None) -> re.Match[str] | None:
    """Match ``line`` as a posting, optionally restricted to ``currency``.

    Without ``currency`` only Beancount-style commodity names are recognized;
    with it, exactly that token (``eur``, ``€`` ...) is.
    """

    pattern = POSTING_RE if currency is None else _posting_re_for(currency)
    return pattern.match(line)
