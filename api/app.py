"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from api.actions import create_actions_router
from api.data import create_data_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from clients import create_store
from core.audit import AuditLogger
from core.config import InvoiceConfig
from core.event_bus import ALL_EVENTS, EventBus
from core.handlers.activity_handler import ActivityFeed, handle_invoice_event
from core.services.invoice_service import InvoiceService
from core.services.query_service import QueryService
from core.services.summary_service import SummaryService
from utils.logs import configure_logging

logger = logging.getLogger(__name__)


def build_services(config: InvoiceConfig, store=None, clock=None) -> dict:
    """
    Wire the store, audit log, event bus, activity feed and read services together.

    The invoice collection is loaded immediately so a broken store fails at
    startup rather than on the first request.
    """
    store = store if store is not None else create_store(config)

    event_bus = EventBus()
    activity = ActivityFeed(max_entries=config.activity_feed_limit)
    event_bus.subscribe(ALL_EVENTS, handle_invoice_event(activity))

    audit = AuditLogger(max_entries=config.audit_history_limit)
    invoice_svc = InvoiceService(store, audit, event_bus, config=config, clock=clock)
    invoice_svc.load()

    return {
        "invoice": invoice_svc,
        "query": QueryService(invoice_svc),
        "summary": SummaryService(invoice_svc),
        "audit": audit,
        "activity": activity,
    }


def create_app(config: InvoiceConfig | None = None, services: dict | None = None) -> FastAPI:
    """
    Build the API app.

    Args:
        config: Settings (read from the environment if omitted)
        services: Pre-built services (tests pass their own)
    """
    config = config or InvoiceConfig.from_env()
    configure_logging(config.log_level)
    services = services or build_services(config)

    app = FastAPI(title="Invoice Dashboard")
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")
    app.state.services = services

    logger.info("Invoice dashboard API ready (backend=%s)", config.storage_backend)
    return app
