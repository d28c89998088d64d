"""
Domain events for the invoice store.

Immutable event objects that represent changes to the invoice collection.
Presentation layers subscribe to refresh their views after a mutation
without the store knowing who is listening.

Events carry the invoice as it was right after the change (or right before,
for deletions) so handlers never need to read the store back.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class InvoiceEvent:
    """Base class for all invoice events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


@dataclass(frozen=True)
class InvoiceCreated(InvoiceEvent):
    """A new invoice was added."""
    invoice: Any = None  # Invoice; Any avoids a models import cycle

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceCreated":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceUpdated(InvoiceEvent):
    """Invoice fields were edited."""
    invoice: Any = None
    changes: dict = field(default_factory=dict)

    @classmethod
    def create(cls, invoice: Any, changes: dict) -> "InvoiceUpdated":
        return cls(invoice=invoice, changes=changes)


@dataclass(frozen=True)
class InvoiceDeleted(InvoiceEvent):
    """Invoice was removed. Carries the last state."""
    invoice: Any = None

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceDeleted":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoicePaid(InvoiceEvent):
    """A payment date was recorded on an invoice."""
    invoice: Any = None

    @classmethod
    def create(cls, invoice: Any) -> "InvoicePaid":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceUnpaid(InvoiceEvent):
    """The payment date was cleared."""
    invoice: Any = None

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceUnpaid":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoicesBulkPaid(InvoiceEvent):
    """Several invoices were marked paid in one write."""
    invoices: tuple = ()
    payment_date: date | None = None

    @classmethod
    def create(cls, invoices: list, payment_date: date) -> "InvoicesBulkPaid":
        return cls(invoices=tuple(invoices), payment_date=payment_date)
