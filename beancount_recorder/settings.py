"""User settings: where transactions are saved, which currency, account usage.

Settings are a small JSON document validated with pydantic. Stored keys are
merged over the defaults, so files written by older versions keep loading.

Environment overrides (applied on load, after ``.env`` has been read by the
CLI):

- ``BEANCOUNT_RECORDER_SETTINGS``: settings file path (default
  ``./.beancount-recorder.json``).
- ``BEANCOUNT_RECORDER_CURRENCY``: currency code used for rendering.
- ``BEANCOUNT_RECORDER_SAVE_PATTERN``: save path template.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import time
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SettingsError
from .models import Transaction

DEFAULT_SAVE_FILE_PATTERN = "Finances/Books/{YYYY}/{MM}/{YYYY}-{MM}"
DEFAULT_SETTINGS_FILENAME = ".beancount-recorder.json"

_logger = logging.getLogger(__name__)


class RecorderSettings(BaseModel):
    """Persisted user configuration.

    Attributes
    ----------
    save_file_pattern:
        Vault-relative path template (without ``.md``); ``{YYYY}``, ``{MM}``
        and ``{DD}`` are replaced from the transaction date.
    currency_iso_code:
        Currency written after every amount.
    beancount_file_for_accounts:
        Vault-relative path (without ``.md``) of the file holding the ``open``
        directives that list known accounts.
    from_account_last_uses / to_account_last_uses:
        Epoch milliseconds of the last use of an account on each side; used to
        rank autocomplete suggestions.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    save_file_pattern: str = DEFAULT_SAVE_FILE_PATTERN
    currency_iso_code: str = "EUR"
    beancount_file_for_accounts: str = ""
    from_account_last_uses: dict[str, int] = Field(default_factory=dict)
    to_account_last_uses: dict[str, int] = Field(default_factory=dict)

    @field_validator("currency_iso_code")
    @classmethod
    def _currency_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v or any(c.isspace() for c in v):
            raise ValueError("currency_iso_code must be a single non-empty token")
        return v


def default_settings_path() -> Path:
    raw = os.getenv("BEANCOUNT_RECORDER_SETTINGS")
    if raw and raw.strip():
        return Path(raw).expanduser()
    return Path.cwd() / DEFAULT_SETTINGS_FILENAME


def _apply_env_overrides(data: dict[str, object]) -> dict[str, object]:
    currency = os.getenv("BEANCOUNT_RECORDER_CURRENCY")
    if currency and currency.strip():
        data["currency_iso_code"] = currency.strip()
    pattern = os.getenv("BEANCOUNT_RECORDER_SAVE_PATTERN")
    if pattern and pattern.strip():
        data["save_file_pattern"] = pattern.strip()
    return data


def load_settings(path: str | os.PathLike[str] | None = None) -> RecorderSettings:
    """Load settings from ``path``; a missing file yields the defaults."""

    p = Path(path) if path is not None else default_settings_path()
    data: dict[str, object] = {}
    try:
        raw = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        _logger.debug("settings file %s not found; using defaults", p)
    except OSError as e:
        raise SettingsError(f"cannot read settings file {p}: {e}") from e
    else:
        try:
            stored = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            raise SettingsError(f"settings file {p} is not valid JSON: {e}") from e
        if not isinstance(stored, dict):
            raise SettingsError(f"settings file {p} must contain a JSON object")
        data.update(stored)

    try:
        return RecorderSettings.model_validate(_apply_env_overrides(data))
    except ValidationError as e:
        raise SettingsError(f"invalid settings in {p}: {e}") from e


def save_settings(settings: RecorderSettings, path: str | os.PathLike[str] | None = None) -> Path:
    """Write ``settings`` atomically (temp file, then ``os.replace``)."""

    p = Path(path) if path is not None else default_settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")
    try:
        tmp.write_text(
            json.dumps(settings.model_dump(mode="json"), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        os.replace(tmp, p)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise
    _logger.debug("saved settings to %s", p)
    return p


def record_account_uses(
    settings: RecorderSettings, transaction: Transaction, now_ms: int | None = None
) -> None:
    """Stamp every account used by ``transaction`` with ``now_ms`` (in place)."""

    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    for part in transaction.from_parts:
        settings.from_account_last_uses[part.account] = stamp
    for part in transaction.to_parts:
        settings.to_account_last_uses[part.account] = stamp


__all__ = [
    "DEFAULT_SAVE_FILE_PATTERN",
    "RecorderSettings",
    "default_settings_path",
    "load_settings",
    "record_account_uses",
    "save_settings",
]
