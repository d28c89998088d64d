"""Read-side models: dashboard summaries and paginated listings."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from core.models.invoice import InvoiceStatus, InvoiceView, SortKey, StatusFilter, json_number

_MODEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusCounts(BaseModel):
    """Invoice count per status. Every status is always present."""

    paid: int = 0
    pending: int = 0
    overdue: int = 0

    def get(self, status: InvoiceStatus) -> int:
        return getattr(self, status.value)


class StatusAmounts(BaseModel):
    """Summed invoice amount per status. Every status is always present."""

    paid: Decimal = Decimal(0)
    pending: Decimal = Decimal(0)
    overdue: Decimal = Decimal(0)

    @field_serializer("paid", "pending", "overdue", when_used="json")
    def serialize_amounts(self, value: Decimal) -> int | float:
        return json_number(value)

    def get(self, status: InvoiceStatus) -> Decimal:
        return getattr(self, status.value)


class DashboardSummary(BaseModel):
    """Headline metrics and chart data for the dashboard."""

    model_config = _MODEL_CONFIG

    total_outstanding: Decimal
    total_overdue: Decimal
    total_paid_this_month: Decimal
    avg_payment_delay: int
    total_count: int
    status_counts: StatusCounts
    amount_by_status: StatusAmounts
    recent_invoices: list[InvoiceView]

    @field_serializer("total_outstanding", "total_overdue", "total_paid_this_month", when_used="json")
    def serialize_totals(self, value: Decimal) -> int | float:
        return json_number(value)


class InvoiceQuery(BaseModel):
    """Search term, status filter, sort key and page for the invoice listing."""

    model_config = _MODEL_CONFIG

    search: str = ""
    status: StatusFilter = StatusFilter.ALL
    sort: SortKey = SortKey.INVOICE_DATE
    page: int = Field(1, ge=1)


class InvoicePage(BaseModel):
    """One page of the invoice listing."""

    model_config = _MODEL_CONFIG

    items: list[InvoiceView]
    page: int
    page_size: int
    total_count: int
    total_pages: int
