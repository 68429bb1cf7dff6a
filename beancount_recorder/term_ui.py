"""Terminal prompts for entering or editing a transaction (prompt_toolkit).

Kept apart from the codec so the interactive pieces can be tested with a pipe
input. Every helper accepts an optional ``session`` whose ``input``/``output``
are reused; tests pass a session over ``create_pipe_input()``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator

from .codec import format_amount
from .models import Transaction, TransactionPart

_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{1,2}-[0-9]{1,2}$")


def _session(session: PromptSession | None) -> PromptSession:
    if session is None:
        return PromptSession()
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
    )


class _DateValidator(Validator):
    def validate(self, document: Document) -> None:
        if _DATE_RE.match(document.text.strip()) is None:
            raise ValidationError(message="Use YYYY-MM-DD", cursor_position=len(document.text))


class _NoQuoteValidator(Validator):
    def validate(self, document: Document) -> None:
        if '"' in document.text:
            raise ValidationError(
                message='Double quotes are not allowed', cursor_position=document.text.index('"')
            )


class _AmountValidator(Validator):
    def validate(self, document: Document) -> None:
        text = document.text.strip()
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ValidationError(
                message="Enter a decimal amount", cursor_position=len(text)
            ) from None
        if not value.is_finite() or value < 0:
            raise ValidationError(message="Amount must be >= 0", cursor_position=len(text))


def prompt_text(
    message: str,
    *,
    default: str = "",
    session: PromptSession | None = None,
) -> str:
    """Prompt for a free-text label (no double quotes)."""

    sess = _session(session)
    return sess.prompt(message, default=default, validator=_NoQuoteValidator()).strip()


def prompt_account(
    accounts: Sequence[str],
    *,
    default: str = "",
    message: str = "Account: ",
    session: PromptSession | None = None,
) -> str:
    """Prompt for an account with completion over ``accounts`` (ranked order)."""

    completer = WordCompleter(list(accounts), ignore_case=True, match_middle=True, sentence=True)
    sess = _session(session)
    return sess.prompt(message, default=default, completer=completer).strip()


def prompt_amount(
    *,
    default: Decimal | None = None,
    message: str = "Amount: ",
    session: PromptSession | None = None,
) -> Decimal:
    """Prompt for a non-negative decimal amount."""

    sess = _session(session)
    text = sess.prompt(
        message,
        default=format_amount(default) if default is not None else "",
        validator=_AmountValidator(),
    )
    return Decimal(text.strip())


def _prompt_side(
    label: str,
    parts: Sequence[TransactionPart],
    accounts: Sequence[str],
    session: PromptSession | None,
) -> list[TransactionPart]:
    # Existing legs are offered first; a blank account drops or ends the side.
    result: list[TransactionPart] = []
    for part in parts:
        account = prompt_account(
            accounts, default=part.account, message=f"{label} account: ", session=session
        )
        if not account:
            continue
        amount = prompt_amount(default=part.amount, message=f"{label} amount: ", session=session)
        result.append(TransactionPart(id=0, account=account, amount=amount))
    while True:
        account = prompt_account(
            accounts, message=f"{label} account (blank to finish): ", session=session
        )
        if not account:
            return result
        amount = prompt_amount(message=f"{label} amount: ", session=session)
        result.append(TransactionPart(id=0, account=account, amount=amount))


def prompt_transaction(
    existing: Transaction,
    *,
    from_accounts: Sequence[str] = (),
    to_accounts: Sequence[str] = (),
    session: PromptSession | None = None,
) -> Transaction:
    """Walk through every field of ``existing`` and return the edited copy.

    Fields are pre-filled, so pressing Enter keeps the current value. Part ids
    of the result follow render order.
    """

    sess = _session(session)
    date_iso_str = sess.prompt(
        "Date: ", default=existing.date_iso_str, validator=_DateValidator()
    ).strip()
    other_party_name = prompt_text("Payee: ", default=existing.other_party_name, session=session)
    description = prompt_text("Description: ", default=existing.description, session=session)
    from_parts = _prompt_side(
        "From", [p for p in existing.from_parts if p.account], from_accounts, session
    )
    to_parts = _prompt_side(
        "To", [p for p in existing.to_parts if p.account], to_accounts, session
    )
    return Transaction(
        date_iso_str=date_iso_str,
        other_party_name=other_party_name,
        description=description,
        from_parts=from_parts,
        to_parts=to_parts,
    ).renumbered()


__all__ = ["prompt_account", "prompt_amount", "prompt_text", "prompt_transaction"]
