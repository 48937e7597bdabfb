"""In-process publish/subscribe for change notifications.

Handlers publish a topic after a successful commit; live queries and
other listeners subscribe to the topics they care about. Delivery is
synchronous and in subscription order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

INVENTORY = "inventory"
ORDERS = "orders"
QUANTITY_REQUESTS = "quantity_requests"
DISPLAY_REQUESTS = "display_requests"
NOTIFICATIONS = "notifications"
SHIPMENTS = "shipments"

TOPICS = frozenset({
    INVENTORY, ORDERS, QUANTITY_REQUESTS, DISPLAY_REQUESTS, NOTIFICATIONS, SHIPMENTS,
})


@dataclass(frozen=True)
class Event:
    topic: str
    payload: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[Event], None]


class Subscription:
    """Handle returned by ``EventBus.subscribe``.

    ``unsubscribe()`` is idempotent. Using the subscription as a context
    manager unsubscribes on exit.
    """

    def __init__(self, bus: EventBus, topic: str, listener: Listener) -> None:
        self._bus = bus
        self.topic = topic
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._bus._remove(self)
            self.active = False

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class EventBus:

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, topic: str, listener: Listener) -> Subscription:
        if topic not in TOPICS:
            raise ValueError(f"Unknown topic '{topic}'")
        subscription = Subscription(self, topic, listener)
        self._subscriptions.setdefault(topic, []).append(subscription)
        return subscription

    def publish(self, topic: str, **payload: Any) -> None:
        event = Event(topic, payload)
        # Copy: a listener may unsubscribe while being notified.
        for subscription in list(self._subscriptions.get(topic, [])):
            try:
                subscription._listener(event)
            except Exception:
                logger.exception("Subscriber for '%s' failed", topic)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, []))

    def _remove(self, subscription: Subscription) -> None:
        listeners = self._subscriptions.get(subscription.topic, [])
        if subscription in listeners:
            listeners.remove(subscription)
