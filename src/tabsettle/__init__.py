"""tabsettle - Group expense balances and settle-up planning."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .ledger import LedgerAccumulator, compute_balances
from .models import (
    ExpenseRecord,
    ExpenseShare,
    GroupSummary,
    RecordedPayment,
    Transaction,
    UserSummary,
)
from .planner import SettlementStrategy, apply_transactions, plan_settlement
from .service import SettlementService
from .summary import group_summary, user_summary

__all__ = [
    "Settings",
    "load_settings",
    "LedgerAccumulator",
    "compute_balances",
    "ExpenseRecord",
    "ExpenseShare",
    "GroupSummary",
    "RecordedPayment",
    "Transaction",
    "UserSummary",
    "SettlementStrategy",
    "apply_transactions",
    "plan_settlement",
    "SettlementService",
    "group_summary",
    "user_summary",
]
