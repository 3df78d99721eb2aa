"""Decode expense documents (decimal amounts) into ledger records.

Document shape:

    {
      "expenses": [
        {"id": "e1", "description": "Dinner", "payer": "alice", "amount": "80.00",
         "shares": [{"account": "alice", "amount": "26.67"}, ...]},
        {"payer": "bob", "amount": 30, "split": {"type": "equal",
         "accounts": ["alice", "bob", "carol"]}},
        {"payer": "carol", "amount": 50, "split": {"type": "percentage",
         "percentages": {"alice": 60, "carol": 40}}},
        {"payer": 1, "amount": 20, "split": {"type": "percentage",
         "percentages": [{"account": 1, "percentage": 25},
                         {"account": 2, "percentage": 75}]}}
      ],
      "payments": [{"payer": "bob", "recipient": "alice", "amount": "10.00"}]
    }
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from .exceptions import InvalidExpenseError, LoaderError
from .models import AccountId, ExpenseRecord, ExpenseShare, RecordedPayment
from .money import (
    MINOR_UNIT_DIGITS,
    split_by_percentage,
    split_equally,
    to_minor_units,
)

logger = logging.getLogger(__name__)


def account_lookup(ids: Iterable[AccountId]) -> dict[str, AccountId]:
    """
    Map the string form of each account id back to the id itself.

    A string id wins over an integer id with the same text.
    """
    lookup: dict[str, AccountId] = {}
    for account in ids:
        if isinstance(account, str):
            lookup[account] = account
        else:
            lookup.setdefault(str(account), account)
    return lookup


class ShareInput(BaseModel):
    """An explicit share with a decimal amount."""

    account: AccountId
    amount: Decimal


class PercentageInput(BaseModel):
    """One account's percentage in a percentage split."""

    account: AccountId
    percentage: Decimal


class SplitInput(BaseModel):
    """A computed split: equal across accounts, or by percentage.

    Percentages may be a list of {account, percentage} objects or an object
    keyed by account. Object keys are always strings in JSON, so they are
    matched back to the document's account ids when building records.
    """

    type: Literal["equal", "percentage"]
    accounts: list[AccountId] = Field(default_factory=list)
    percentages: dict[str, Decimal] | list[PercentageInput] = Field(
        default_factory=dict
    )

    def account_ids(self) -> list[AccountId]:
        """Accounts named with their JSON type (excludes object keys)."""
        ids = list(self.accounts)
        if isinstance(self.percentages, list):
            ids.extend(p.account for p in self.percentages)
        return ids

    def resolved_percentages(
        self, known: Mapping[str, AccountId], integer_ids: bool = False
    ) -> dict[AccountId, Decimal]:
        """
        Percentages keyed by account id, in document order.

        Object keys are looked up in `known`. A key that matches no id is kept
        as text, unless `integer_ids` is set and the key is an integer literal.
        """
        if isinstance(self.percentages, list):
            return {p.account: p.percentage for p in self.percentages}

        resolved = {}
        for key, pct in self.percentages.items():
            if key in known:
                account = known[key]
            elif integer_ids and key.lstrip("-").isdigit():
                account = int(key)
            else:
                account = key
            resolved[account] = pct
        return resolved


class ExpenseInput(BaseModel):
    """An expense as it appears in a document."""

    id: str | int | None = None
    description: str | None = None
    payer: AccountId
    amount: Decimal
    shares: list[ShareInput] | None = None
    split: SplitInput | None = None

    def account_ids(self) -> list[AccountId]:
        """Every account id this expense names with its JSON type."""
        ids = [self.payer]
        if self.shares is not None:
            ids.extend(s.account for s in self.shares)
        if self.split is not None:
            ids.extend(self.split.account_ids())
        return ids

    def to_record(
        self,
        digits: int = MINOR_UNIT_DIGITS,
        known_accounts: Mapping[str, AccountId] | None = None,
    ) -> ExpenseRecord:
        """
        Convert to an ExpenseRecord in minor units.

        Args:
            digits: Fractional digits of the currency
            known_accounts: str(id) -> id for the whole document, used to match
                            percentage object keys back to integer ids

        Raises:
            InvalidExpenseError: If the split is missing, ambiguous or invalid
        """
        expense_id = None if self.id is None else str(self.id)
        total = to_minor_units(self.amount, digits)

        if self.shares is not None and self.split is not None:
            raise InvalidExpenseError(
                "Expense has both 'shares' and 'split'", expense_id=expense_id
            )

        if self.shares is not None:
            shares = [
                ExpenseShare(account=s.account, amount=to_minor_units(s.amount, digits))
                for s in self.shares
            ]
        elif self.split is None:
            raise InvalidExpenseError(
                "Expense needs either 'shares' or 'split'", expense_id=expense_id
            )
        elif self.split.type == "equal":
            shares = split_equally(total, self.split.accounts)
        else:
            known = account_lookup(self.account_ids())
            if known_accounts is not None:
                known = {**known_accounts, **known}
            percentages = self.split.resolved_percentages(
                known, integer_ids=isinstance(self.payer, int)
            )
            shares = split_by_percentage(total, percentages)

        return ExpenseRecord(
            id=expense_id,
            description=self.description,
            payer=self.payer,
            total_amount=total,
            shares=shares,
        )


class PaymentInput(BaseModel):
    """A recorded payment as it appears in a document."""

    payer: AccountId
    recipient: AccountId
    amount: Decimal

    def to_payment(self, digits: int = MINOR_UNIT_DIGITS) -> RecordedPayment:
        return RecordedPayment(
            payer=self.payer,
            recipient=self.recipient,
            amount=to_minor_units(self.amount, digits),
        )


class LedgerDocument(BaseModel):
    """Top-level document: expenses plus optional recorded payments."""

    expenses: list[ExpenseInput] = Field(default_factory=list)
    payments: list[PaymentInput] = Field(default_factory=list)


def parse_document(
    raw: str | bytes, digits: int = MINOR_UNIT_DIGITS
) -> tuple[list[ExpenseRecord], list[RecordedPayment]]:
    """
    Parse a JSON document into expense records and recorded payments.

    Args:
        raw: JSON text
        digits: Fractional digits of the currency

    Returns:
        Tuple of (expenses, payments), both in document order

    Raises:
        LoaderError: If the document is not valid JSON or has the wrong shape
        InvalidExpenseError: If a computed split cannot be built
    """
    try:
        document = LedgerDocument.model_validate_json(raw)
    except ValidationError as e:
        raise LoaderError(f"Invalid expense document:\n{e}") from e

    ids: list[AccountId] = []
    for expense in document.expenses:
        ids.extend(expense.account_ids())
    for payment in document.payments:
        ids.extend([payment.payer, payment.recipient])
    known = account_lookup(ids)

    expenses = [expense.to_record(digits, known) for expense in document.expenses]
    payments = [payment.to_payment(digits) for payment in document.payments]

    logger.info(f"Loaded {len(expenses)} expenses and {len(payments)} payments")
    return expenses, payments


def load_document(
    path: Path, digits: int = MINOR_UNIT_DIGITS
) -> tuple[list[ExpenseRecord], list[RecordedPayment]]:
    """Read and parse an expense document from disk."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoaderError(f"Cannot read {path}: {e}") from e
    return parse_document(raw, digits)
