"""Settlement planner: turns balances into pairwise transfers.

The default strategy walks creditors and debtors in the order accounts were
first seen. It always produces a valid plan with at most
creditors + debtors - 1 transfers, but not necessarily the fewest possible.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from .models import AccountId, Transaction
from .money import TOLERANCE

logger = logging.getLogger(__name__)


class SettlementStrategy(str, Enum):
    """How creditors and debtors are ordered before the greedy sweep."""

    GREEDY_INSERTION_ORDER = "greedy_insertion_order"
    GREEDY_SORTED_BY_MAGNITUDE = "greedy_sorted_by_magnitude"


@dataclass
class _Position:
    """Working copy of an account's outstanding amount (always positive)."""

    account: AccountId
    remaining: int


def _partition(
    balances: Mapping[AccountId, int],
) -> tuple[list[_Position], list[_Position]]:
    """Split accounts into creditors and debtors, dropping settled ones."""
    creditors = []
    debtors = []
    for account, balance in balances.items():
        if balance >= TOLERANCE:
            creditors.append(_Position(account, balance))
        elif balance <= -TOLERANCE:
            debtors.append(_Position(account, -balance))
    return creditors, debtors


def plan_settlement(
    balances: Mapping[AccountId, int],
    strategy: SettlementStrategy = SettlementStrategy.GREEDY_INSERTION_ORDER,
) -> list[Transaction]:
    """
    Compute transfers that settle every balance.

    Steps:
    1. Partition accounts (in mapping order) into creditors and debtors
    2. Optionally sort both lists by amount, largest first (stable)
    3. Two-pointer sweep: the current debtor pays the current creditor the
       smaller of their outstanding amounts; move past whoever is settled
    4. Stop when either list runs out

    Args:
        balances: Account balances in minor units (not mutated)
        strategy: Ordering strategy for the sweep

    Returns:
        Transactions in emission order
    """
    creditors, debtors = _partition(balances)

    if strategy == SettlementStrategy.GREEDY_SORTED_BY_MAGNITUDE:
        creditors.sort(key=lambda p: p.remaining, reverse=True)
        debtors.sort(key=lambda p: p.remaining, reverse=True)

    transactions = []
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        settle_amount = min(creditor.remaining, debtor.remaining)
        if settle_amount >= TOLERANCE:
            transactions.append(
                Transaction(
                    from_account=debtor.account,
                    to_account=creditor.account,
                    amount=settle_amount,
                )
            )

        creditor.remaining -= settle_amount
        debtor.remaining -= settle_amount

        if creditor.remaining < TOLERANCE:
            i += 1
        if debtor.remaining < TOLERANCE:
            j += 1

    logger.debug(
        f"Planned {len(transactions)} transactions for {len(creditors)} creditors "
        f"and {len(debtors)} debtors ({strategy.value})"
    )

    return transactions


def apply_transactions(
    balances: Mapping[AccountId, int], transactions: Iterable[Transaction]
) -> dict[AccountId, int]:
    """
    Apply transfers to a copy of the balances.

    The payer's balance rises (debt paid off) and the receiver's falls (claim
    collected). A complete plan leaves every balance at zero.
    """
    result = dict(balances)
    for transaction in transactions:
        result[transaction.from_account] = (
            result.get(transaction.from_account, 0) + transaction.amount
        )
        result[transaction.to_account] = (
            result.get(transaction.to_account, 0) - transaction.amount
        )
    return result
