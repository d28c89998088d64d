"""Shared test fixtures for the invoice dashboard test suite."""

import random
from datetime import date
from decimal import Decimal

import pytest

from clients.local_store import LocalStore
from core.audit import AuditLogger
from core.config import InvoiceConfig
from core.event_bus import EventBus, ALL_EVENTS
from core.models import Invoice, InvoiceCreate
from core.services.invoice_service import InvoiceService


# =============================================================================
# CLOCK
# =============================================================================

# Fixed "today" for every test that doesn't choose its own
TODAY = date(2024, 2, 1)


class FixedClock:
    """Callable clock whose date tests can move."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "invoices.json"


@pytest.fixture
def local_store(store_path) -> LocalStore:
    return LocalStore(store_path)


@pytest.fixture
def config(store_path) -> InvoiceConfig:
    """Config pointing at a temp file, no sample seeding."""
    return InvoiceConfig(storage_path=store_path, seed_sample_data=False)


@pytest.fixture
def audit() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def published(event_bus) -> list:
    """Every event published on the bus, in order."""
    events = []
    event_bus.subscribe(ALL_EVENTS, events.append)
    return events


@pytest.fixture
def invoice_service(local_store, audit, event_bus, config, clock) -> InvoiceService:
    """Loaded InvoiceService over an empty temp store."""
    service = InvoiceService(local_store, audit, event_bus, config=config, clock=clock, rng=random.Random(7))
    service.load()
    return service


# =============================================================================
# DATA HELPERS
# =============================================================================


def _make_draft(**overrides) -> InvoiceCreate:
    values = {
        "customer_name": "Asha Rao",
        "company_name": "Rao Textiles",
        "amount": Decimal("1000"),
        "invoice_date": date(2024, 1, 1),
        "payment_terms": 30,
    }
    values.update(overrides)
    return InvoiceCreate(**values)


def _make_invoice(**overrides) -> Invoice:
    values = {
        "id": "INV-2024-001",
        "customer_name": "Asha Rao",
        "company_name": "Rao Textiles",
        "amount": Decimal("1000"),
        "invoice_date": date(2024, 1, 1),
        "payment_terms": 30,
        "due_date": date(2024, 1, 31),
        "payment_date": None,
    }
    values.update(overrides)
    return Invoice(**values)


@pytest.fixture
def make_draft():
    """Factory for valid InvoiceCreate drafts; keyword overrides replace defaults."""
    return _make_draft


@pytest.fixture
def make_invoice():
    """Factory for stored Invoice records; keyword overrides replace defaults."""
    return _make_invoice
