"""Known accounts for autocomplete, read from Beancount ``open`` directives."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from .paths import normalize_vault_path
from .settings import RecorderSettings

_OPEN_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2} open (\S+)")

_logger = logging.getLogger(__name__)


def parse_open_accounts(text: str) -> list[str]:
    """Return the account of every ``YYYY-MM-DD open <account>`` line, in order.

    Only the account token is kept; constraint currencies or booking methods
    after it are dropped.
    """

    accounts: list[str] = []
    for line in text.split("\n"):
        m = _OPEN_RE.match(line)
        if m is not None:
            accounts.append(m.group(1))
    return accounts


def load_accounts(vault_root: str | os.PathLike[str], settings: RecorderSettings) -> list[str]:
    """Read the accounts file configured in ``settings``; ``[]`` when unavailable."""

    rel = settings.beancount_file_for_accounts.strip()
    if not rel:
        return []
    path = Path(vault_root) / normalize_vault_path(rel + ".md")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        _logger.warning("cannot read accounts file %s: %s", path, e)
        return []
    accounts = parse_open_accounts(text)
    _logger.debug("loaded %d accounts from %s", len(accounts), path)
    return accounts


def rank_accounts(accounts: Iterable[str], last_uses: Mapping[str, int]) -> list[str]:
    """Most recently used first; never-used accounts keep their original order."""

    return sorted(accounts, key=lambda a: last_uses.get(a, 0), reverse=True)


__all__ = ["load_accounts", "parse_open_accounts", "rank_accounts"]
