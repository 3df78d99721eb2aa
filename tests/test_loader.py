"""Tests for decoding expense documents."""

import json

import pytest

from tabsettle.exceptions import InvalidExpenseError, LoaderError
from tabsettle.ledger import compute_balances
from tabsettle.loader import load_document, parse_document


def document(**kwargs) -> str:
    return json.dumps(kwargs)


class TestParseDocument:
    """Test JSON decoding into ledger records."""

    def test_explicit_shares(self):
        raw = document(
            expenses=[
                {
                    "id": "e1",
                    "description": "Dinner",
                    "payer": "A",
                    "amount": "80.00",
                    "shares": [
                        {"account": "A", "amount": "26.67"},
                        {"account": "B", "amount": "26.67"},
                        {"account": "C", "amount": "26.66"},
                    ],
                }
            ]
        )

        expenses, payments = parse_document(raw)

        assert payments == []
        assert len(expenses) == 1
        expense = expenses[0]
        assert expense.id == "e1"
        assert expense.description == "Dinner"
        assert expense.total_amount == 8000
        assert [(s.account, s.amount) for s in expense.shares] == [
            ("A", 2667),
            ("B", 2667),
            ("C", 2666),
        ]

    def test_equal_split(self):
        raw = document(
            expenses=[
                {
                    "payer": "A",
                    "amount": 10,
                    "split": {"type": "equal", "accounts": ["A", "B", "C"]},
                }
            ]
        )

        expenses, _ = parse_document(raw)

        assert [s.amount for s in expenses[0].shares] == [333, 333, 334]

    def test_percentage_split(self):
        raw = document(
            expenses=[
                {
                    "payer": "C",
                    "amount": "50.00",
                    "split": {"type": "percentage", "percentages": {"A": 60, "C": 40}},
                }
            ]
        )

        expenses, _ = parse_document(raw)

        assert [(s.account, s.amount) for s in expenses[0].shares] == [
            ("A", 3000),
            ("C", 2000),
        ]

    def test_percentage_split_with_integer_ids(self):
        """Object keys are strings in JSON but must match integer ids."""
        raw = document(
            expenses=[
                {
                    "payer": 1,
                    "amount": "50.00",
                    "split": {"type": "percentage", "percentages": {"1": 60, "2": 40}},
                }
            ]
        )

        expenses, _ = parse_document(raw)

        assert [(s.account, s.amount) for s in expenses[0].shares] == [
            (1, 3000),
            (2, 2000),
        ]
        assert compute_balances(expenses) == {1: 2000, 2: -2000}

    def test_percentage_keys_match_ids_from_other_expenses(self):
        raw = document(
            expenses=[
                {"payer": 2, "amount": "1", "shares": [{"account": 3, "amount": "1"}]},
                {
                    "payer": 1,
                    "amount": "10",
                    "split": {"type": "percentage", "percentages": {"2": 50, "3": 50}},
                },
            ]
        )

        expenses, _ = parse_document(raw)

        assert [s.account for s in expenses[1].shares] == [2, 3]

    def test_string_ids_stay_strings(self):
        raw = document(
            expenses=[
                {
                    "payer": "1",
                    "amount": "10",
                    "split": {"type": "percentage", "percentages": {"1": 50, "2": 50}},
                }
            ]
        )

        expenses, _ = parse_document(raw)

        assert [s.account for s in expenses[0].shares] == ["1", "2"]

    def test_percentage_split_as_list(self):
        raw = document(
            expenses=[
                {
                    "payer": 1,
                    "amount": "20",
                    "split": {
                        "type": "percentage",
                        "percentages": [
                            {"account": 1, "percentage": 25},
                            {"account": 2, "percentage": 75},
                        ],
                    },
                }
            ]
        )

        expenses, _ = parse_document(raw)

        assert [(s.account, s.amount) for s in expenses[0].shares] == [
            (1, 500),
            (2, 1500),
        ]

    def test_payments(self):
        raw = document(payments=[{"payer": "B", "recipient": "A", "amount": "10.00"}])

        _, payments = parse_document(raw)

        assert [(p.payer, p.recipient, p.amount) for p in payments] == [
            ("B", "A", 1000)
        ]

    def test_numeric_ids(self):
        raw = document(
            expenses=[
                {"id": 7, "payer": 1, "amount": "5", "shares": [{"account": 2, "amount": "5"}]}
            ]
        )

        expenses, _ = parse_document(raw)

        assert expenses[0].id == "7"
        assert expenses[0].payer == 1
        assert expenses[0].shares[0].account == 2

    def test_empty_document(self):
        assert parse_document("{}") == ([], [])

    def test_missing_shares_and_split(self):
        raw = document(expenses=[{"id": "e2", "payer": "A", "amount": "5"}])

        with pytest.raises(InvalidExpenseError, match="Expense e2"):
            parse_document(raw)

    def test_shares_and_split_together(self):
        raw = document(
            expenses=[
                {
                    "id": "e3",
                    "payer": "A",
                    "amount": "5",
                    "shares": [{"account": "A", "amount": "5"}],
                    "split": {"type": "equal", "accounts": ["A", "B"]},
                }
            ]
        )

        with pytest.raises(InvalidExpenseError, match="both 'shares' and 'split'"):
            parse_document(raw)

    def test_invalid_json(self):
        with pytest.raises(LoaderError, match="Invalid expense document"):
            parse_document("{not json")

    def test_wrong_shape(self):
        raw = document(expenses=[{"amount": "5", "shares": []}])

        with pytest.raises(LoaderError):
            parse_document(raw)

    def test_unknown_split_type(self):
        raw = document(
            expenses=[{"payer": "A", "amount": "5", "split": {"type": "shares"}}]
        )

        with pytest.raises(LoaderError):
            parse_document(raw)


class TestLoadDocument:
    """Test reading documents from disk."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "expenses.json"
        path.write_text(
            document(
                expenses=[
                    {"payer": "A", "amount": "1", "shares": [{"account": "B", "amount": "1"}]}
                ]
            )
        )

        expenses, _ = load_document(path)

        assert expenses[0].total_amount == 100

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoaderError, match="Cannot read"):
            load_document(tmp_path / "missing.json")
