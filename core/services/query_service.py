"""
Invoice listing: search, status filter, sort, paginate.

Stateless and recomputed per call over the store's view. Fine for the
tens-to-thousands of rows a single user keeps.
"""

import math
from datetime import date

from core.models import InvoicePage, InvoiceQuery, InvoiceView, SortKey, StatusFilter

_SORT_FIELDS = {
    SortKey.AMOUNT: "amount",
    SortKey.INVOICE_DATE: "invoice_date",
    SortKey.DUE_DATE: "due_date",
}


def filter_invoices(
    invoices: list[InvoiceView],
    term: str = "",
    status_filter: StatusFilter = StatusFilter.ALL,
) -> list[InvoiceView]:
    """
    Keep invoices matching both the search term and the status filter.

    The term is a case-insensitive substring of the id or customer name;
    an empty term matches everything. The term is not trimmed.
    """
    needle = term.lower()
    result = []
    for inv in invoices:
        if needle and needle not in inv.id.lower() and needle not in inv.customer_name.lower():
            continue
        if status_filter != StatusFilter.ALL and inv.status.value != status_filter.value:
            continue
        result.append(inv)
    return result


def sort_invoices(invoices: list[InvoiceView], key: SortKey = SortKey.INVOICE_DATE) -> list[InvoiceView]:
    """Sort descending by key. Stable: ties keep their input order."""
    attr = _SORT_FIELDS[key]
    return sorted(invoices, key=lambda inv: getattr(inv, attr), reverse=True)


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size)


def paginate(invoices: list[InvoiceView], page_size: int, page: int) -> list[InvoiceView]:
    """
    One 1-based page of rows.

    Pages outside 1..total_pages are empty.
    """
    if page < 1 or page > total_pages(len(invoices), page_size):
        return []
    start = (page - 1) * page_size
    return invoices[start:start + page_size]


class QueryService:
    """Invoice listing queries over the current collection."""

    def __init__(self, invoice_service):
        self.invoices = invoice_service

    def matching(self, query: InvoiceQuery, today: date | None = None) -> list[InvoiceView]:
        """Every invoice matching the query's filters, in sort order (no paging)."""
        views = self.invoices.view(today)
        return sort_invoices(filter_invoices(views, query.search, query.status), query.sort)

    def search(self, query: InvoiceQuery, today: date | None = None) -> InvoicePage:
        """Filter, sort and return the requested page."""
        page_size = self.invoices.config.page_size
        rows = self.matching(query, today)

        return InvoicePage(
            items=paginate(rows, page_size, query.page),
            page=query.page,
            page_size=page_size,
            total_count=len(rows),
            total_pages=total_pages(len(rows), page_size),
        )
