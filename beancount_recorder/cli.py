"""CLI for the ``beancount_recorder`` package.

A thin Typer adapter over the codec, locator and ledger helpers. Environment
variables are loaded from a local ``.env`` (``python-dotenv``) before any
command runs, so settings overrides like ``BEANCOUNT_RECORDER_CURRENCY`` can
live next to the vault.

Commands
--------
- ``record``: append a new transaction to the file derived from its date.
- ``modify FILE --line N``: edit the transaction around line ``N`` in place.
- ``show FILE --line N``: print the transaction around line ``N``.
- ``accounts``: list known accounts, most recently used first.

Without ``--from``/``--to`` legs, ``record`` and ``modify`` fall back to
interactive prompts with account completion.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo, OptionInfo

from .accounts import load_accounts, rank_accounts
from .codec import render_transaction
from .errors import LedgerError
from .ledger import append_transaction, read_transaction_at, rewrite_transaction_at
from .logging_setup import configure_logging
from .models import Transaction, TransactionPart, new_transaction
from .paths import resolve_save_path
from .settings import RecorderSettings, load_settings, record_account_uses, save_settings

# ---- Small module-level helpers used by CLI commands -------------------------


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def parse_part_spec(spec: str) -> TransactionPart:
    """Parse ``ACCOUNT=AMOUNT`` into a part (id assigned later).

    The split happens at the last ``=`` so account names stay untouched.
    """

    account, sep, raw_amount = spec.rpartition("=")
    account = account.strip()
    if not sep or not account:
        raise ValueError(f"expected ACCOUNT=AMOUNT, got {spec!r}")
    try:
        amount = Decimal(raw_amount.strip())
    except InvalidOperation as e:
        raise ValueError(f"invalid amount in {spec!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"amount must be a non-negative number in {spec!r}")
    return TransactionPart(id=0, account=account, amount=amount)


def _parts(specs: Sequence[str]) -> list[TransactionPart]:
    return [parse_part_spec(s) for s in specs]


def _check_label(name: str, value: str | None) -> None:
    if value is not None and '"' in value:
        raise ValueError(f"{name} must not contain double quotes")


def _apply_overrides(
    transaction: Transaction,
    *,
    date_iso_str: str | None,
    payee: str | None,
    description: str | None,
    from_specs: Sequence[str],
    to_specs: Sequence[str],
) -> Transaction:
    _check_label("payee", payee)
    _check_label("description", description)
    if date_iso_str is not None:
        # Validates the date shape early.
        resolve_save_path("{YYYY}", date_iso_str)
    updated = replace(
        transaction,
        date_iso_str=date_iso_str if date_iso_str is not None else transaction.date_iso_str,
        other_party_name=payee if payee is not None else transaction.other_party_name,
        description=description if description is not None else transaction.description,
        from_parts=_parts(from_specs) if from_specs else transaction.from_parts,
        to_parts=_parts(to_specs) if to_specs else transaction.to_parts,
    )
    return updated.renumbered()


def _prompt(existing: Transaction, vault: Path, settings: RecorderSettings) -> Transaction:
    # Deferred import keeps prompt_toolkit off the non-interactive path.
    from .term_ui import prompt_transaction

    accounts = load_accounts(vault, settings)
    return prompt_transaction(
        existing,
        from_accounts=rank_accounts(accounts, settings.from_account_last_uses),
        to_accounts=rank_accounts(accounts, settings.to_account_last_uses),
    )


def _load(settings_path: Path | None) -> RecorderSettings:
    try:
        return load_settings(settings_path)
    except LedgerError as e:
        raise _fail(str(e)) from e


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Record and edit Beancount transactions inside a Markdown note vault.",
)


# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
SETTINGS_OPTION: OptionInfo = typer.Option(
    None,
    "--settings",
    help="Settings JSON file (default: $BEANCOUNT_RECORDER_SETTINGS).",
    dir_okay=False,
)
VAULT_OPTION: OptionInfo = typer.Option(
    None, "--vault", help="Vault root directory (default: current directory).", file_okay=False
)
FROM_OPTION: OptionInfo = typer.Option(
    None, "--from", help="Debit leg as ACCOUNT=AMOUNT (repeatable)."
)
TO_OPTION: OptionInfo = typer.Option(
    None, "--to", help="Credit leg as ACCOUNT=AMOUNT (repeatable)."
)
LINE_OPTION: OptionInfo = typer.Option(
    ..., "--line", "-l", min=1, help="1-based line number inside the transaction."
)
FILE_ARGUMENT: ArgumentInfo = typer.Argument(
    help="Ledger note containing the transaction.", dir_okay=False
)


@app.command("record")
def record_cmd(
    *,
    date_iso_str: str | None = typer.Option(
        None, "--date", help="Date as YYYY-MM-DD (default: today)."
    ),
    payee: str | None = typer.Option(None, "--payee", help="Other party name."),
    description: str | None = typer.Option(None, "--description", help="Description."),
    from_specs: list[str] | None = FROM_OPTION,
    to_specs: list[str] | None = TO_OPTION,
    vault: Path | None = VAULT_OPTION,
    settings_path: Path | None = SETTINGS_OPTION,
) -> None:
    """Append a new transaction to the ledger file for its date."""

    vault_root = vault or Path.cwd()
    settings = _load(settings_path)
    interactive = not from_specs and not to_specs
    base = new_transaction(date.today())
    if not interactive:
        base = replace(base, from_parts=[], to_parts=[])

    try:
        transaction = _apply_overrides(
            base,
            date_iso_str=date_iso_str,
            payee=payee,
            description=description,
            from_specs=from_specs or [],
            to_specs=to_specs or [],
        )
        if interactive:
            transaction = _prompt(transaction, vault_root, settings)
        rel_path = resolve_save_path(settings.save_file_pattern, transaction.date_iso_str)
        path = append_transaction(vault_root / rel_path, transaction, settings.currency_iso_code)
        record_account_uses(settings, transaction)
        save_settings(settings, settings_path)
    except (LedgerError, ValueError, ArithmeticError, OSError) as e:
        raise _fail(str(e)) from e

    typer.echo(str(path))


@app.command("modify")
def modify_cmd(
    file: Annotated[Path, FILE_ARGUMENT],
    *,
    line: Annotated[int, LINE_OPTION],
    date_iso_str: str | None = typer.Option(None, "--date", help="New date as YYYY-MM-DD."),
    payee: str | None = typer.Option(None, "--payee", help="New other party name."),
    description: str | None = typer.Option(None, "--description", help="New description."),
    from_specs: list[str] | None = FROM_OPTION,
    to_specs: list[str] | None = TO_OPTION,
    vault: Path | None = VAULT_OPTION,
    settings_path: Path | None = SETTINGS_OPTION,
) -> None:
    """Edit the transaction around ``--line`` and rewrite it in place."""

    vault_root = vault or Path.cwd()
    settings = _load(settings_path)
    overrides_given = (
        any(v is not None for v in (date_iso_str, payee, description))
        or bool(from_specs)
        or bool(to_specs)
    )

    def edit(existing: Transaction) -> Transaction:
        if overrides_given:
            return _apply_overrides(
                existing,
                date_iso_str=date_iso_str,
                payee=payee,
                description=description,
                from_specs=from_specs or [],
                to_specs=to_specs or [],
            )
        return _prompt(existing, vault_root, settings)

    try:
        updated = rewrite_transaction_at(file, line - 1, edit, settings.currency_iso_code)
        record_account_uses(settings, updated)
        save_settings(settings, settings_path)
    except IndexError as e:
        raise _fail(f"line {line} is outside {file}") from e
    except (LedgerError, ValueError, ArithmeticError, OSError) as e:
        raise _fail(str(e)) from e

    typer.echo(render_transaction(updated, settings.currency_iso_code), nl=False)


@app.command("show")
def show_cmd(
    file: Annotated[Path, FILE_ARGUMENT],
    *,
    line: Annotated[int, LINE_OPTION],
    settings_path: Path | None = SETTINGS_OPTION,
) -> None:
    """Print the line range and canonical text of the transaction around ``--line``."""

    settings = _load(settings_path)
    try:
        block, transaction = read_transaction_at(file, line - 1, settings.currency_iso_code)
    except IndexError as e:
        raise _fail(f"line {line} is outside {file}") from e
    except (LedgerError, OSError) as e:
        raise _fail(str(e)) from e

    typer.echo(f"# lines {block.first_line + 1}-{block.last_line + 1}")
    typer.echo(render_transaction(transaction, settings.currency_iso_code), nl=False)


@app.command("accounts")
def accounts_cmd(
    *,
    side: str = typer.Option("from", "--side", help="Rank by last use on the 'from' or 'to' side."),
    vault: Path | None = VAULT_OPTION,
    settings_path: Path | None = SETTINGS_OPTION,
) -> None:
    """List accounts from the configured accounts file, most recently used first."""

    side = side.strip().lower()
    if side not in {"from", "to"}:
        raise _fail(f"--side must be 'from' or 'to', got {side!r}")
    settings = _load(settings_path)
    last_uses = settings.from_account_last_uses if side == "from" else settings.to_account_last_uses
    for account in rank_accounts(load_accounts(vault or Path.cwd(), settings), last_uses):
        typer.echo(account)


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (default: $BEANCOUNT_RECORDER_LOG_LEVEL or WARNING)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging once.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise _fail(str(e)) from e


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
