"""
Dashboard aggregates.

Everything is recomputed from the store's view on each call; there is no
cache to go stale. The module-level functions work on any list of
InvoiceView so they can be reused on filtered subsets.
"""

import logging
import math
from datetime import date
from decimal import Decimal

from core.derivation import payment_delay
from core.models import DashboardSummary, InvoiceStatus, InvoiceView, StatusAmounts, StatusCounts
from utils.timezone import same_month

logger = logging.getLogger(__name__)

_OUTSTANDING = {InvoiceStatus.PENDING, InvoiceStatus.OVERDUE}


def total_outstanding(invoices: list[InvoiceView]) -> Decimal:
    """Sum of pending and overdue amounts."""
    return sum((inv.amount for inv in invoices if inv.status in _OUTSTANDING), Decimal(0))


def total_overdue(invoices: list[InvoiceView]) -> Decimal:
    return sum((inv.amount for inv in invoices if inv.status == InvoiceStatus.OVERDUE), Decimal(0))


def total_paid_this_month(invoices: list[InvoiceView], today: date) -> Decimal:
    """Sum of amounts whose payment date falls in today's calendar month."""
    return sum(
        (inv.amount for inv in invoices
         if inv.payment_date is not None and same_month(inv.payment_date, today)),
        Decimal(0),
    )


def avg_payment_delay(invoices: list[InvoiceView]) -> int:
    """
    Mean payment delay in days over paid invoices.

    Rounded half up (2.5 -> 3, -2.5 -> -2). Zero when nothing is paid.
    """
    delays = [
        payment_delay(inv.due_date, inv.payment_date)
        for inv in invoices if inv.payment_date is not None
    ]
    if not delays:
        return 0
    return math.floor(Decimal(sum(delays)) / Decimal(len(delays)) + Decimal("0.5"))


def status_counts(invoices: list[InvoiceView]) -> StatusCounts:
    counts = {status.value: 0 for status in InvoiceStatus}
    for inv in invoices:
        counts[inv.status.value] += 1
    return StatusCounts(**counts)


def amount_by_status(invoices: list[InvoiceView]) -> StatusAmounts:
    amounts = {status.value: Decimal(0) for status in InvoiceStatus}
    for inv in invoices:
        amounts[inv.status.value] += inv.amount
    return StatusAmounts(**amounts)


def recent_invoices(invoices: list[InvoiceView], limit: int) -> list[InvoiceView]:
    """Most recent by invoice date; equal dates keep collection order."""
    return sorted(invoices, key=lambda inv: inv.invoice_date, reverse=True)[:limit]


class SummaryService:
    """Dashboard metrics over the current invoice collection."""

    def __init__(self, invoice_service):
        self.invoices = invoice_service

    def summarize(self, today: date | None = None, recent_limit: int | None = None) -> DashboardSummary:
        """
        Compute all dashboard metrics for `today`.

        Args:
            today: Reference date (defaults to the store's clock)
            recent_limit: How many recent invoices to include (defaults to config)
        """
        today = today or self.invoices.today()
        limit = self.invoices.config.recent_invoices_limit if recent_limit is None else recent_limit
        views = self.invoices.view(today)

        summary = DashboardSummary(
            total_outstanding=total_outstanding(views),
            total_overdue=total_overdue(views),
            total_paid_this_month=total_paid_this_month(views, today),
            avg_payment_delay=avg_payment_delay(views),
            total_count=len(views),
            status_counts=status_counts(views),
            amount_by_status=amount_by_status(views),
            recent_invoices=recent_invoices(views, limit),
        )
        logger.debug("Summarized %d invoices for %s", len(views), today)
        return summary

    def recent_invoices(self, limit: int | None = None, today: date | None = None) -> list[InvoiceView]:
        if limit is None:
            limit = self.invoices.config.recent_invoices_limit
        return recent_invoices(self.invoices.view(today), limit)
