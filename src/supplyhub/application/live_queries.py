"""Live queries: a result set pushed to a callback whenever it may change.

Each ``watch_*`` call delivers the current results right away, then
re-runs the query and delivers again every time a relevant topic is
published. The returned ``Subscription`` stops the updates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from supplyhub.application.dto import (
    InventoryItemDTO,
    OrderDTO,
    QuantityRequestDTO,
    ShipmentDTO,
    inventory_to_dto,
    order_to_dto,
    quantity_request_to_dto,
    shipment_to_dto,
)
from supplyhub.application.events import (
    INVENTORY,
    ORDERS,
    QUANTITY_REQUESTS,
    SHIPMENTS,
    Event,
    EventBus,
    Subscription,
)
from supplyhub.application.list_quantity_requests import filter_quantity_requests
from supplyhub.application.shipments import filter_shipments
from supplyhub.application.show_inventory import published_catalog
from supplyhub.application.show_order import filter_orders
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveQueries:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus) -> None:
        self._uow = uow
        self._events = events

    def watch_orders(
        self,
        callback: Callable[[list[OrderDTO]], None],
        status: str | None = None,
        requested_by: str | None = None,
    ) -> Subscription:
        def query() -> list[OrderDTO]:
            with self._uow:
                orders = self._uow.orders.list_all()
            return [order_to_dto(o) for o in filter_orders(orders, status, requested_by)]

        return self._watch(ORDERS, query, callback)

    def watch_catalog(self, callback: Callable[[list[InventoryItemDTO]], None]) -> Subscription:
        def query() -> list[InventoryItemDTO]:
            with self._uow:
                items = self._uow.inventory.list_all()
            return [inventory_to_dto(i) for i in published_catalog(items)]

        return self._watch(INVENTORY, query, callback)

    def watch_quantity_requests(
        self,
        callback: Callable[[list[QuantityRequestDTO]], None],
        supplier_id: str | None = None,
        requested_by: str | None = None,
        pending_only: bool = False,
    ) -> Subscription:
        def query() -> list[QuantityRequestDTO]:
            with self._uow:
                requests = self._uow.quantity_requests.list_all()
            return [
                quantity_request_to_dto(r)
                for r in filter_quantity_requests(requests, supplier_id, requested_by, pending_only)
            ]

        return self._watch(QUANTITY_REQUESTS, query, callback)

    def watch_shipments(
        self,
        callback: Callable[[list[ShipmentDTO]], None],
        type: str | None = None,
    ) -> Subscription:
        def query() -> list[ShipmentDTO]:
            with self._uow:
                shipments = self._uow.shipments.list_all()
            return [shipment_to_dto(s) for s in filter_shipments(shipments, type)]

        return self._watch(SHIPMENTS, query, callback)

    def _watch(
        self,
        topic: str,
        query: Callable[[], list[T]],
        callback: Callable[[list[T]], None],
    ) -> Subscription:
        def on_change(event: Event) -> None:
            callback(query())

        callback(query())
        logger.debug("Live query on '%s' subscribed", topic)
        return self._events.subscribe(topic, on_change)
