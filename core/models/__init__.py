"""Core domain models."""

from core.models.invoice import (
    ALLOWED_PAYMENT_TERMS,
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceUpdate,
    InvoiceView,
    PaymentTerms,
    SortKey,
    StatusFilter,
)
from core.models.summary import (
    DashboardSummary,
    InvoicePage,
    InvoiceQuery,
    StatusAmounts,
    StatusCounts,
)

__all__ = [
    # Invoice
    "Invoice", "InvoiceCreate", "InvoiceUpdate", "InvoiceView",
    "InvoiceStatus", "PaymentTerms", "ALLOWED_PAYMENT_TERMS",
    # Listing
    "SortKey", "StatusFilter", "InvoiceQuery", "InvoicePage",
    # Dashboard
    "DashboardSummary", "StatusCounts", "StatusAmounts",
]
