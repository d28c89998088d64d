"""CSV export of invoice listings."""

import csv
import io
from datetime import date

from core.models import InvoiceView, StatusFilter

CSV_HEADERS = (
    "Invoice Number",
    "Customer Name",
    "Company Name",
    "Invoice Date",
    "Due Date",
    "Amount",
    "Status",
    "Payment Date",
)

MISSING_PAYMENT_DATE = "N/A"


def _row(inv: InvoiceView) -> list[str]:
    return [
        inv.id,
        inv.customer_name,
        inv.company_name,
        inv.invoice_date.isoformat(),
        inv.due_date.isoformat(),
        str(inv.amount),
        inv.status.value,
        inv.payment_date.isoformat() if inv.payment_date else MISSING_PAYMENT_DATE,
    ]


def export_csv(invoices: list[InvoiceView]) -> str:
    """Render invoices as CSV, every field double-quoted, one row per invoice."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(_row(inv) for inv in invoices)
    return buffer.getvalue()


def export_filename(status_filter: StatusFilter, today: date) -> str:
    """e.g. invoices_overdue_2024-02-01.csv"""
    return f"invoices_{status_filter.value}_{today.isoformat()}.csv"
