"""Typed exceptions for invoice operations."""

from typing import Any


class InvoiceError(Exception):
    """Base class for invoice errors."""


class InvoiceValidationError(InvoiceError, ValueError):
    """
    Invoice data failed validation. Nothing was written.

    `errors` holds per-field details in pydantic's error format where available.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.errors = errors or []
        super().__init__(message)


class InvoiceNotFoundError(InvoiceError, ValueError):
    """No invoice with the given id."""

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} not found")


class PersistenceError(InvoiceError):
    """
    Writing the collection failed after all retries.

    The in-memory change is kept; the next mutation or persist() retries.
    """

    def __init__(self, attempts: int, cause: Exception):
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"Failed to persist invoices after {attempts} attempt(s): {cause}")
