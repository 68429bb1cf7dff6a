"""Resolve the ledger file a transaction is saved to from a path template."""

from __future__ import annotations

import re

_DATE_RE = re.compile(r"^([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})$")


def normalize_vault_path(path: str) -> str:
    """Normalize a vault-relative path: ``/`` separators, no empty segments."""

    path = path.replace("\\", "/")
    path = re.sub(r"/+", "/", path)
    return path.strip("/")


def resolve_save_path(pattern: str, date_iso_str: str) -> str:
    """Substitute ``{YYYY}``, ``{MM}``, ``{DD}`` in ``pattern`` and append ``.md``.

    Other text in the pattern is left alone. Month and day are zero-padded, so a
    hand-written ``2024-1-5`` lands in the same file as ``2024-01-05``.
    """

    m = _DATE_RE.match(date_iso_str.strip())
    if m is None:
        raise ValueError(f"invalid ISO date: {date_iso_str!r}")
    year, month, day = m.group(1), m.group(2).zfill(2), m.group(3).zfill(2)
    path = pattern.replace("{YYYY}", year).replace("{MM}", month).replace("{DD}", day)
    return normalize_vault_path(path + ".md")


__all__ = ["normalize_vault_path", "resolve_save_path"]
