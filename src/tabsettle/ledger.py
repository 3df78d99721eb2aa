"""Ledger accumulator: turns expense records into per-account balances."""

import logging
from collections.abc import Iterable

from .exceptions import (
    InvalidExpenseError,
    InvalidPaymentError,
    MismatchedSplitTotalError,
)
from .models import AccountId, ExpenseRecord, RecordedPayment

logger = logging.getLogger(__name__)


def validate_expense(expense: ExpenseRecord, split_tolerance: int = 0) -> None:
    """
    Check that an expense can be ingested without breaking the zero-sum ledger.

    Args:
        expense: The expense to check
        split_tolerance: Allowed |shares - total| in minor units

    Raises:
        InvalidExpenseError: If total is not positive, shares are empty,
                             or a share is negative
        MismatchedSplitTotalError: If shares don't sum to the total
    """
    if expense.total_amount <= 0:
        raise InvalidExpenseError(
            f"Total must be positive, got {expense.total_amount}",
            expense_id=expense.id,
        )
    if not expense.shares:
        raise InvalidExpenseError("Expense has no shares", expense_id=expense.id)
    for share in expense.shares:
        if share.amount < 0:
            raise InvalidExpenseError(
                f"Share for {share.account} is negative ({share.amount})",
                expense_id=expense.id,
            )

    actual = expense.shares_total
    if abs(actual - expense.total_amount) > split_tolerance:
        raise MismatchedSplitTotalError(
            expected=expense.total_amount, actual=actual, expense_id=expense.id
        )


class LedgerAccumulator:
    """
    Accumulates signed balances per account.

    Positive balance means others owe the account; negative means it owes.
    Accounts keep the order in which they were first seen, which the
    settlement planner relies on for deterministic output.

    Not thread-safe: callers sharing an instance must serialize ingest/reset.
    """

    def __init__(self, validate: bool = True, split_tolerance: int = 0):
        """Initialize an empty ledger."""
        self.validate = validate
        self.split_tolerance = split_tolerance
        self._balances: dict[AccountId, int] = {}
        self._total_expenses = 0
        self._expense_count = 0

    def _register(self, account: AccountId) -> None:
        if account not in self._balances:
            self._balances[account] = 0

    def ingest(self, expense: ExpenseRecord) -> None:
        """
        Apply one expense to the ledger.

        The payer is credited the full total and every share (including the
        payer's own) is debited, so the payer nets total - own share.
        A split mismatch accepted through split_tolerance or validate=False is
        logged, since the ledger stops summing to zero.

        Raises:
            InvalidExpenseError: If validation is enabled and the expense is malformed
        """
        if self.validate:
            validate_expense(expense, self.split_tolerance)
        if expense.shares_total != expense.total_amount:
            logger.warning(
                f"Ingesting expense {expense.id} with mismatched split "
                f"({expense.shares_total} != {expense.total_amount}); "
                f"ledger will no longer sum to zero"
            )

        self._register(expense.payer)
        for share in expense.shares:
            self._register(share.account)

        self._balances[expense.payer] += expense.total_amount
        for share in expense.shares:
            self._balances[share.account] -= share.amount

        self._total_expenses += expense.total_amount
        self._expense_count += 1

        logger.debug(
            f"Ingested expense {expense.id}: {expense.payer} paid "
            f"{expense.total_amount} across {len(expense.shares)} shares"
        )

    def ingest_payment(self, payment: RecordedPayment) -> None:
        """
        Apply a settle-up payment that already happened.

        The payer's debt shrinks (credit) and the recipient's claim shrinks
        (debit), keeping the ledger zero-sum.

        Raises:
            InvalidPaymentError: If amount is not positive or payer pays themselves
        """
        if payment.amount <= 0:
            raise InvalidPaymentError(
                f"Payment amount must be positive, got {payment.amount}"
            )
        if payment.payer == payment.recipient:
            raise InvalidPaymentError(f"{payment.payer} cannot pay themselves")

        self._register(payment.payer)
        self._register(payment.recipient)
        self._balances[payment.payer] += payment.amount
        self._balances[payment.recipient] -= payment.amount

        logger.debug(
            f"Recorded payment {payment.payer} -> {payment.recipient}: {payment.amount}"
        )

    def ingest_all(
        self,
        expenses: Iterable[ExpenseRecord],
        payments: Iterable[RecordedPayment] = (),
    ) -> None:
        """Ingest expenses in order, then recorded payments in order."""
        for expense in expenses:
            self.ingest(expense)
        for payment in payments:
            self.ingest_payment(payment)

    def balance_of(self, account: AccountId) -> int:
        """Get an account's balance (0 for accounts never seen)."""
        return self._balances.get(account, 0)

    def all_balances(self) -> dict[AccountId, int]:
        """Snapshot of all balances in first-seen order."""
        return dict(self._balances)

    @property
    def total_expenses(self) -> int:
        """Gross total of all ingested expenses."""
        return self._total_expenses

    @property
    def expense_count(self) -> int:
        return self._expense_count

    def reset(self) -> None:
        """Clear all state."""
        self._balances.clear()
        self._total_expenses = 0
        self._expense_count = 0


def compute_balances(
    expenses: Iterable[ExpenseRecord],
    payments: Iterable[RecordedPayment] = (),
    validate: bool = True,
    split_tolerance: int = 0,
) -> dict[AccountId, int]:
    """
    Compute balances from a full expense history.

    This is a pure function: it builds a fresh ledger for each call.
    """
    ledger = LedgerAccumulator(validate=validate, split_tolerance=split_tolerance)
    ledger.ingest_all(expenses, payments)
    return ledger.all_balances()
