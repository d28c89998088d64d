"""Tests for EventBus."""

import logging

from core.event_bus import ALL_EVENTS, EventBus
from core.events import InvoiceCreated, InvoicePaid


# =============================================================================
# SUBSCRIBE AND PUBLISH
# =============================================================================


class TestSubscribeAndPublish:

    def test_single_handler_receives_the_exact_event_object(self, make_invoice):
        bus = EventBus()
        received = []
        bus.subscribe("InvoiceCreated", received.append)

        event = InvoiceCreated.create(make_invoice())
        bus.publish(event)

        assert len(received) == 1
        assert received[0] is event

    def test_handler_can_read_payload_fields(self, make_invoice):
        bus = EventBus()
        ids = []
        bus.subscribe("InvoicePaid", lambda e: ids.append(e.invoice.id))

        bus.publish(InvoicePaid.create(make_invoice()))

        assert ids == ["INV-2024-001"]

    def test_other_event_types_are_not_delivered(self, make_invoice):
        bus = EventBus()
        received = []
        bus.subscribe("InvoicePaid", received.append)

        bus.publish(InvoiceCreated.create(make_invoice()))

        assert received == []

    def test_publish_without_subscribers_is_a_noop(self, make_invoice):
        EventBus().publish(InvoiceCreated.create(make_invoice()))

    def test_handlers_run_in_subscription_order(self, make_invoice):
        bus = EventBus()
        order = []
        bus.subscribe("InvoiceCreated", lambda e: order.append("first"))
        bus.subscribe("InvoiceCreated", lambda e: order.append("second"))

        bus.publish(InvoiceCreated.create(make_invoice()))

        assert order == ["first", "second"]


# =============================================================================
# WILDCARD
# =============================================================================


class TestWildcard:

    def test_wildcard_receives_every_type(self, make_invoice):
        bus = EventBus()
        received = []
        bus.subscribe(ALL_EVENTS, received.append)

        bus.publish(InvoiceCreated.create(make_invoice()))
        bus.publish(InvoicePaid.create(make_invoice()))

        assert [type(e).__name__ for e in received] == ["InvoiceCreated", "InvoicePaid"]

    def test_wildcard_runs_after_specific_handlers(self, make_invoice):
        bus = EventBus()
        order = []
        bus.subscribe(ALL_EVENTS, lambda e: order.append("wildcard"))
        bus.subscribe("InvoiceCreated", lambda e: order.append("specific"))

        bus.publish(InvoiceCreated.create(make_invoice()))

        assert order == ["specific", "wildcard"]


# =============================================================================
# ERROR ISOLATION
# =============================================================================


class TestErrorIsolation:

    def test_failing_handler_does_not_stop_others(self, make_invoice):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe("InvoiceCreated", broken)
        bus.subscribe("InvoiceCreated", received.append)

        bus.publish(InvoiceCreated.create(make_invoice()))

        assert len(received) == 1

    def test_failing_handler_is_logged(self, make_invoice, caplog):
        bus = EventBus()

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe("InvoiceCreated", broken)

        with caplog.at_level(logging.ERROR, logger="core.event_bus"):
            bus.publish(InvoiceCreated.create(make_invoice()))

        assert "broken" in caplog.text
        assert "InvoiceCreated" in caplog.text
