"""Service layer that composes the ledger, planner and summaries.

Every call replays the full expense history into a fresh ledger, so a service
instance holds no balance state and can be shared across requests.
"""

import logging
from collections.abc import Iterable

from .config import Settings
from .ledger import LedgerAccumulator
from .models import (
    AccountId,
    ExpenseRecord,
    GroupSummary,
    RecordedPayment,
    Transaction,
    UserSummary,
)
from .planner import plan_settlement
from .summary import group_summary, user_summary

logger = logging.getLogger(__name__)


class SettlementService:
    """Service for turning expense histories into balances and settlement plans."""

    def __init__(self, settings: Settings):
        """Initialize the settlement service."""
        self.settings = settings

    def _build_ledger(
        self,
        expenses: Iterable[ExpenseRecord],
        payments: Iterable[RecordedPayment] = (),
    ) -> LedgerAccumulator:
        ledger = LedgerAccumulator(
            validate=self.settings.validate_splits,
            split_tolerance=self.settings.split_tolerance,
        )
        ledger.ingest_all(expenses, payments)

        logger.info(
            f"Built ledger from {ledger.expense_count} expenses "
            f"({len(ledger.all_balances())} accounts)"
        )
        return ledger

    def compute_balances(
        self,
        expenses: Iterable[ExpenseRecord],
        payments: Iterable[RecordedPayment] = (),
    ) -> dict[AccountId, int]:
        """Compute balances for an expense history."""
        return self._build_ledger(expenses, payments).all_balances()

    def plan(
        self,
        expenses: Iterable[ExpenseRecord],
        payments: Iterable[RecordedPayment] = (),
    ) -> list[Transaction]:
        """Compute the settlement plan for an expense history."""
        balances = self.compute_balances(expenses, payments)
        transactions = plan_settlement(balances, self.settings.settlement_strategy)

        logger.info(f"Planned {len(transactions)} settlement transactions")
        return transactions

    def summarize_group(
        self,
        expenses: Iterable[ExpenseRecord],
        payments: Iterable[RecordedPayment] = (),
    ) -> GroupSummary:
        """
        Summarize a group's balances and settlement plan.

        Args:
            expenses: Full expense history, in order
            payments: Settle-up payments already made

        Returns:
            Group summary with gross spend and settlement plan
        """
        ledger = self._build_ledger(expenses, payments)
        return group_summary(
            ledger.all_balances(),
            strategy=self.settings.settlement_strategy,
            total_expenses=ledger.total_expenses,
        )

    def summarize_user(
        self,
        expenses: Iterable[ExpenseRecord],
        account: AccountId,
        payments: Iterable[RecordedPayment] = (),
    ) -> UserSummary:
        """Summarize one account's part in the settlement plan."""
        balances = self.compute_balances(expenses, payments)
        return user_summary(balances, account, self.settings.settlement_strategy)
