"""Pydantic domain models for tabsettle.

All money fields are integer minor units (e.g. cents).
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

# Opaque participant identifier; only equality and hashing are relied on.
AccountId = str | int

# ============================================================================
# Ledger Inputs
# ============================================================================


class ExpenseShare(BaseModel):
    """One participant's share of an expense."""

    account: AccountId
    amount: int


class ExpenseRecord(BaseModel):
    """A shared expense paid by one account and split across several.

    The shares are expected to sum to total_amount. The payer usually appears
    among the shares with their own consumption.
    """

    payer: AccountId
    total_amount: int
    shares: list[ExpenseShare]
    id: str | None = None
    description: str | None = None

    @property
    def shares_total(self) -> int:
        """Sum of all share amounts."""
        return sum(share.amount for share in self.shares)

    def share_of(self, account: AccountId) -> int:
        """Get the amount owed by an account (0 if not in the split)."""
        return sum(share.amount for share in self.shares if share.account == account)


class RecordedPayment(BaseModel):
    """A settle-up payment already made outside the system: payer paid recipient."""

    payer: AccountId
    recipient: AccountId
    amount: int


# ============================================================================
# Settlement Outputs
# ============================================================================


class Transaction(BaseModel):
    """A proposed transfer: from_account pays to_account."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_account: AccountId = Field(alias="from")
    to_account: AccountId = Field(alias="to")
    amount: int = Field(gt=0)


class BalanceEntry(BaseModel):
    """An account's net position (positive = owed money, negative = owes)."""

    account: AccountId
    balance: int

    @computed_field
    @property
    def owes(self) -> int:
        return max(-self.balance, 0)

    @computed_field
    @property
    def owed(self) -> int:
        return max(self.balance, 0)


class GroupSummary(BaseModel):
    """Balances and settlement plan for a whole group.

    total_credited is the sum of positive balances. It differs from
    total_expenses (gross spend) because each payer's own share is netted out.
    total_expenses is None when only balances were available.
    """

    total_credited: int
    total_expenses: int | None = None
    total_transactions: int
    balances: list[BalanceEntry]
    transactions: list[Transaction]


class UserSummary(BaseModel):
    """One account's view of the settlement plan."""

    account: AccountId
    balance: int
    owes: list[Transaction] = Field(default_factory=list)
    owed_by: list[Transaction] = Field(default_factory=list)

    @computed_field
    @property
    def total_owes(self) -> int:
        return sum(t.amount for t in self.owes)

    @computed_field
    @property
    def total_owed_by(self) -> int:
        return sum(t.amount for t in self.owed_by)
