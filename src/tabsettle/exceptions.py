"""Custom exceptions for tabsettle."""


class TabSettleError(Exception):
    """Base exception for all tabsettle errors."""

    pass


class ConfigurationError(TabSettleError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidExpenseError(TabSettleError):
    """Raised when an expense record cannot be ingested."""

    def __init__(self, message: str, expense_id: str | None = None):
        self.expense_id = expense_id
        if expense_id is not None:
            message = f"Expense {expense_id}: {message}"
        super().__init__(message)


class MismatchedSplitTotalError(InvalidExpenseError):
    """Raised when an expense's shares don't sum to its total."""

    def __init__(self, expected: int, actual: int, expense_id: str | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Shares sum to {actual} minor units but total is {expected} "
            f"(residual {expected - actual})",
            expense_id=expense_id,
        )


class InvalidPaymentError(TabSettleError):
    """Raised when a recorded payment cannot be ingested."""

    pass


class LoaderError(TabSettleError):
    """Raised when an expense document is malformed."""

    pass


class UnknownAccountError(TabSettleError):
    """Raised when an account doesn't appear in the expense history."""

    pass
