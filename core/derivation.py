"""
Date-derived invoice values.

Pure functions. The current date is always passed in, never read from the
clock, so the same inputs always give the same answer.
"""

from datetime import date, timedelta

from core.models import Invoice, InvoiceStatus, InvoiceView


def compute_due_date(invoice_date: date, payment_terms: int) -> date:
    """Due date is the invoice date plus the payment terms in days."""
    return invoice_date + timedelta(days=payment_terms)


def compute_status(due_date: date, payment_date: date | None, today: date) -> InvoiceStatus:
    """
    Derive payment status.

    Any recorded payment date means paid, even one in the future. Unpaid
    invoices become overdue the day after the due date; on the due date
    itself they are still pending.
    """
    if payment_date is not None:
        return InvoiceStatus.PAID
    if today > due_date:
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.PENDING


def payment_delay(due_date: date, payment_date: date) -> int:
    """Days paid after the due date. Negative when paid early."""
    return (payment_date - due_date).days


def with_status(invoice: Invoice, today: date) -> InvoiceView:
    """Attach the status for `today` to an invoice."""
    status = compute_status(invoice.due_date, invoice.payment_date, today)
    return InvoiceView(**invoice.model_dump(), status=status)


def describe_timing(invoice: Invoice, today: date) -> str:
    """
    Short human description of where an invoice stands.

    Examples: "Paid 3 days late", "Paid on time", "Overdue by 12 days",
    "Due in 5 days".
    """
    if invoice.payment_date is not None:
        delay = payment_delay(invoice.due_date, invoice.payment_date)
        if delay > 0:
            return f"Paid {delay} days late"
        if delay < 0:
            return f"Paid {abs(delay)} days early"
        return "Paid on time"

    remaining = (invoice.due_date - today).days
    if remaining < 0:
        return f"Overdue by {abs(remaining)} days"
    return f"Due in {remaining} days"
