"""Invoice domain models.

Python code uses snake_case field names; the stored JSON and the HTTP
surface use camelCase (customerName, invoiceDate, ...). Amounts are
Decimal in memory and plain JSON numbers on the wire.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

PaymentTerms = Literal[7, 15, 30, 45, 60]
ALLOWED_PAYMENT_TERMS: tuple[int, ...] = (7, 15, 30, 45, 60)


class InvoiceStatus(str, Enum):
    """Payment status. Derived from dates, never stored."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class StatusFilter(str, Enum):
    """Status filter for invoice listings. ALL disables status filtering."""

    ALL = "all"
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class SortKey(str, Enum):
    """Listing sort keys. All sort descending."""

    AMOUNT = "amount"
    INVOICE_DATE = "invoiceDate"
    DUE_DATE = "dueDate"


_MODEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def json_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _require_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


class InvoiceCreate(BaseModel):
    """Data required to create an invoice. Id and due date are assigned by the store."""

    model_config = _MODEL_CONFIG

    customer_name: str = Field(..., max_length=255)
    company_name: str = Field(..., max_length=255)
    amount: Decimal = Field(..., gt=0)
    invoice_date: date
    payment_terms: PaymentTerms

    @field_validator("customer_name", "company_name")
    @classmethod
    def strip_names(cls, value: str) -> str:
        return _require_text(value)


class InvoiceUpdate(BaseModel):
    """
    Fields that can be changed on an invoice. All optional.

    Only fields explicitly provided are applied, so `payment_date=None`
    clears the payment while omitting it leaves the payment untouched.
    """

    model_config = _MODEL_CONFIG

    customer_name: str | None = Field(None, max_length=255)
    company_name: str | None = Field(None, max_length=255)
    amount: Decimal | None = Field(None, gt=0)
    invoice_date: date | None = None
    payment_terms: PaymentTerms | None = None
    payment_date: date | None = None

    @field_validator("customer_name", "company_name")
    @classmethod
    def strip_names(cls, value: str | None) -> str | None:
        return _require_text(value)

    @field_validator("customer_name", "company_name", "amount", "invoice_date", "payment_terms")
    @classmethod
    def reject_explicit_null(cls, value):
        """Required fields may be omitted but never cleared."""
        if value is None:
            raise ValueError("cannot be cleared")
        return value

    def changes(self) -> dict:
        """Explicitly provided fields, keyed by Python field name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class Invoice(BaseModel):
    """Full invoice entity as stored."""

    model_config = _MODEL_CONFIG

    id: str
    customer_name: str
    company_name: str
    amount: Decimal = Field(..., gt=0)
    invoice_date: date
    payment_terms: PaymentTerms
    due_date: date
    payment_date: date | None = None

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, value: Decimal) -> int | float:
        return json_number(value)

    @property
    def is_paid(self) -> bool:
        """Whether a payment date is recorded."""
        return self.payment_date is not None

    def to_storage(self) -> dict:
        """JSON-compatible dict in the persisted camelCase format."""
        return self.model_dump(mode="json", by_alias=True)


class InvoiceView(Invoice):
    """Invoice with its status attached for a particular day. Read-only."""

    status: InvoiceStatus
