from __future__ import annotations


class CustomerError(Exception):
    """Base for customer module failures. `operation` names the failing call."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class ValidationError(CustomerError):
    """Caller-supplied prefix filter is empty or has a blank segment."""


class QueryError(CustomerError):
    """Read failed: connectivity, bad statement or an undecodable row."""


class TransactionError(CustomerError):
    """Delete transaction failed and was rolled back."""
