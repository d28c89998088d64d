"""
Event bus for invoice events.

Synchronous in-process pub/sub. Handlers execute immediately in the same
thread as the publisher. Handler errors are logged but never propagate;
the mutation has already been applied and persisted.
"""

import logging
from typing import Callable, Dict, List

from core.events import InvoiceEvent

logger = logging.getLogger(__name__)

# Subscribing under this name receives every event.
ALL_EVENTS = "*"


class EventBus:
    """
    In-process event bus for invoice events.

    Subscribe by event class name (string) or ALL_EVENTS, publish by event
    instance. Handlers are called synchronously in subscription order,
    type-specific subscribers first.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable):
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Name of event class (e.g. 'InvoicePaid') or ALL_EVENTS
            callback: Function to call when event is published
        """
        self._subscribers.setdefault(event_type, []).append(callback)

    def publish(self, event: InvoiceEvent):
        """
        Publish an event to all subscribers of that type.

        Args:
            event: InvoiceEvent instance to publish
        """
        event_type = event.__class__.__name__
        callbacks = self._subscribers.get(event_type, []) + self._subscribers.get(ALL_EVENTS, [])

        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event_type,
                    event.event_id,
                )
