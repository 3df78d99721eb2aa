"""Shared fixtures for tabsettle tests."""

import random

import pytest

from tabsettle.models import ExpenseRecord, ExpenseShare
from tabsettle.money import split_equally


def _make_expense(payer, total, shares, id=None) -> ExpenseRecord:
    return ExpenseRecord(
        id=id,
        payer=payer,
        total_amount=total,
        shares=[ExpenseShare(account=a, amount=amt) for a, amt in shares],
    )


@pytest.fixture
def make_expense():
    """Factory for ExpenseRecords from (account, amount) pairs."""
    return _make_expense


@pytest.fixture
def equal_three_way():
    """A pays 300.00 split equally between A, B and C."""
    return [_make_expense("A", 30000, [("A", 10000), ("B", 10000), ("C", 10000)])]


@pytest.fixture
def uneven_rounding():
    """A pays 80.00 split 26.67 / 26.67 / 26.66."""
    return [_make_expense("A", 8000, [("A", 2667), ("B", 2667), ("C", 2666)])]


@pytest.fixture
def two_pairs():
    """A and B share 50.00 paid by A; C and D share 40.00 paid by C."""
    return [
        _make_expense("A", 5000, [("A", 2500), ("B", 2500)]),
        _make_expense("C", 4000, [("C", 2000), ("D", 2000)]),
    ]


def _random_history(seed: int, accounts: int = 6, expenses: int = 25):
    rng = random.Random(seed)
    names = [f"user{n}" for n in range(accounts)]
    history = []
    for n in range(expenses):
        participants = rng.sample(names, rng.randint(1, accounts))
        total = rng.randint(1, 50000)
        history.append(
            ExpenseRecord(
                id=f"exp{n}",
                payer=rng.choice(names),
                total_amount=total,
                shares=split_equally(total, participants),
            )
        )
    return history


@pytest.fixture
def random_history():
    """Factory for reproducible expense histories with well-formed splits."""
    return _random_history
