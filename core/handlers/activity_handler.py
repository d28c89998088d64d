"""
Handler that feeds the dashboard's recent-activity list.

Subscribed to every invoice event. Each event becomes one short line
("Marked INV-2024-003 paid on 2024-02-05"); only the newest entries are kept.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from core.events import (
    InvoiceCreated,
    InvoiceDeleted,
    InvoiceEvent,
    InvoicePaid,
    InvoicesBulkPaid,
    InvoiceUnpaid,
    InvoiceUpdated,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityEntry:
    event_id: str
    occurred_at: datetime
    kind: str
    invoice_ids: tuple[str, ...]
    message: str

    def to_dict(self) -> dict:
        return {
            "eventId": self.event_id,
            "occurredAt": self.occurred_at.isoformat(),
            "kind": self.kind,
            "invoiceIds": list(self.invoice_ids),
            "message": self.message,
        }


class ActivityFeed:
    """Newest-first list of recent invoice activity, capped at max_entries."""

    def __init__(self, max_entries: int = 50):
        self._entries: deque[ActivityEntry] = deque(maxlen=max_entries)

    def record(self, entry: ActivityEntry) -> None:
        self._entries.append(entry)

    def latest(self, limit: int | None = None) -> list[ActivityEntry]:
        entries = list(reversed(self._entries))
        if limit is None:
            return entries
        return entries[:limit]


def describe_event(event: InvoiceEvent) -> str:
    """One-line summary of an invoice event."""
    if isinstance(event, InvoicesBulkPaid):
        return f"Marked {len(event.invoices)} invoices paid on {event.payment_date.isoformat()}"

    invoice = event.invoice
    if isinstance(event, InvoiceCreated):
        return f"Created {invoice.id} for {invoice.customer_name}"
    if isinstance(event, InvoiceUpdated):
        return f"Updated {invoice.id} ({', '.join(event.changes)})"
    if isinstance(event, InvoiceDeleted):
        return f"Deleted {invoice.id}"
    if isinstance(event, InvoicePaid):
        return f"Marked {invoice.id} paid on {invoice.payment_date.isoformat()}"
    if isinstance(event, InvoiceUnpaid):
        return f"Marked {invoice.id} unpaid"
    return f"{type(event).__name__} on {invoice.id}"


def handle_invoice_event(feed: ActivityFeed) -> Callable:
    """
    Factory that returns a handler recording every invoice event in the feed.

    Args:
        feed: ActivityFeed instance

    Returns:
        Handler callable for EventBus.subscribe(ALL_EVENTS, ...)
    """

    def handler(event: InvoiceEvent):
        if isinstance(event, InvoicesBulkPaid):
            invoice_ids = tuple(inv.id for inv in event.invoices)
        else:
            invoice_ids = (event.invoice.id,)

        entry = ActivityEntry(
            event_id=event.event_id,
            occurred_at=event.occurred_at,
            kind=type(event).__name__,
            invoice_ids=invoice_ids,
            message=describe_event(event),
        )
        feed.record(entry)
        logger.debug("Activity: %s", entry.message)

    return handler
