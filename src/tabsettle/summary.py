"""Group and per-account summaries derived from balances and the settlement plan."""

from collections.abc import Mapping

from .models import AccountId, BalanceEntry, GroupSummary, UserSummary
from .planner import SettlementStrategy, plan_settlement


def group_summary(
    balances: Mapping[AccountId, int],
    strategy: SettlementStrategy = SettlementStrategy.GREEDY_INSERTION_ORDER,
    total_expenses: int | None = None,
) -> GroupSummary:
    """
    Summarize a group's balances and settlement plan.

    Args:
        balances: Account balances in minor units
        strategy: Settlement strategy
        total_expenses: Gross spend, if the caller tracked it; None otherwise

    Returns:
        Group summary
    """
    transactions = plan_settlement(balances, strategy)
    total_credited = sum(balance for balance in balances.values() if balance > 0)

    return GroupSummary(
        total_credited=total_credited,
        total_expenses=total_expenses,
        total_transactions=len(transactions),
        balances=[
            BalanceEntry(account=account, balance=balance)
            for account, balance in balances.items()
        ],
        transactions=transactions,
    )


def user_summary(
    balances: Mapping[AccountId, int],
    account: AccountId,
    strategy: SettlementStrategy = SettlementStrategy.GREEDY_INSERTION_ORDER,
) -> UserSummary:
    """Summarize what one account pays and receives under the settlement plan."""
    transactions = plan_settlement(balances, strategy)

    return UserSummary(
        account=account,
        balance=balances.get(account, 0),
        owes=[t for t in transactions if t.from_account == account],
        owed_by=[t for t in transactions if t.to_account == account],
    )
