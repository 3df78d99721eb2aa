"""Money helpers: minor-unit conversion, tolerance and split computation.

All amounts inside tabsettle are integers counting minor units (cents for a
two-digit currency). Decimals only appear at the boundary, when reading
documents or rendering output.
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

from .exceptions import InvalidExpenseError
from .models import AccountId, ExpenseShare

logger = logging.getLogger(__name__)

MINOR_UNIT_DIGITS = 2

# Amounts strictly below one minor unit are treated as zero.
TOLERANCE = 1

# Percentages may miss 100 by this much (e.g. 33.33 x 3).
PERCENTAGE_SLACK = Decimal("0.1")


def to_minor_units(
    amount: Decimal | str | int | float, digits: int = MINOR_UNIT_DIGITS
) -> int:
    """
    Convert a decimal currency amount to integer minor units.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Currency amount; floats go through str() to avoid binary noise
        digits: Number of fractional digits of the currency

    Returns:
        Amount in minor units (integer)
    """
    if isinstance(amount, float):
        amount = str(amount)
    scaled = Decimal(amount).scaleb(digits)
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int, digits: int = MINOR_UNIT_DIGITS) -> Decimal:
    """Convert integer minor units back to a Decimal with `digits` places."""
    return Decimal(amount).scaleb(-digits).quantize(Decimal(1).scaleb(-digits))


def is_negligible(amount: int) -> bool:
    """True when the amount is within tolerance of zero."""
    return abs(amount) < TOLERANCE


def split_equally(total: int, accounts: Sequence[AccountId]) -> list[ExpenseShare]:
    """
    Split a total equally, giving the remainder to the last account.

    Example:
        1000 over three accounts -> 333, 333, 334

    Raises:
        InvalidExpenseError: If no accounts are given or total is negative
    """
    if not accounts:
        raise InvalidExpenseError("Cannot split an expense between zero accounts")
    if total < 0:
        raise InvalidExpenseError(f"Cannot split a negative total ({total})")

    base_share = total // len(accounts)
    amounts = [base_share] * len(accounts)
    amounts[-1] += total - base_share * len(accounts)

    return [
        ExpenseShare(account=account, amount=amount)
        for account, amount in zip(accounts, amounts, strict=True)
    ]


def split_by_percentage(
    total: int, percentages: Mapping[AccountId, Decimal]
) -> list[ExpenseShare]:
    """
    Split a total by percentage, adjusting the last share for rounding.

    Each share is rounded half-up independently, then the residual between the
    total and the rounded sum is added to the last account so the shares sum
    to the total exactly.

    Args:
        total: Total amount in minor units
        percentages: Ordered mapping of account to percentage (0-100)

    Returns:
        Shares in the mapping's order

    Raises:
        InvalidExpenseError: If percentages are out of range, don't total 100,
                             or rounding leaves the last share negative
    """
    if not percentages:
        raise InvalidExpenseError("Cannot split an expense between zero accounts")

    pct_total = sum((Decimal(p) for p in percentages.values()), Decimal("0"))
    if abs(pct_total - 100) > PERCENTAGE_SLACK:
        raise InvalidExpenseError(f"Percentages total {pct_total}, expected 100")

    shares = []
    for account, pct in percentages.items():
        pct = Decimal(pct)
        if pct < 0 or pct > 100:
            raise InvalidExpenseError(f"Percentage for {account} out of range: {pct}")
        amount = int(
            (pct * total / 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )
        shares.append(ExpenseShare(account=account, amount=amount))

    residual = total - sum(share.amount for share in shares)
    if residual != 0:
        shares[-1].amount += residual
        logger.debug(
            f"Applied percentage rounding adjustment: {residual} minor units "
            f"to {shares[-1].account}"
        )
        if shares[-1].amount < 0:
            raise InvalidExpenseError("Invalid splits after rounding")

    return shares
