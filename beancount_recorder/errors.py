"""Exceptions raised by the host-facing layer (files, settings, CLI).

The codec and the locator never raise for malformed text; they return ``None``.
These exceptions turn those ``None`` results into messages for the user.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for recoverable, user-facing failures."""


class TransactionNotFoundError(LedgerError):
    def __init__(self, path: object, line: int) -> None:
        super().__init__(f"Cannot find transaction here ({path}, line {line + 1})")
        self.path = path
        self.line = line


class TransactionParseError(LedgerError):
    def __init__(self, path: object, line: int) -> None:
        super().__init__(f"Cannot parse transaction ({path}, line {line + 1})")
        self.path = path
        self.line = line


class SettingsError(LedgerError):
    """The settings file exists but cannot be read or validated."""


__all__ = ["LedgerError", "SettingsError", "TransactionNotFoundError", "TransactionParseError"]
