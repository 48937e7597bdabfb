"""Transactional boundary over every repository.

Handlers open a unit of work, mutate aggregates through its repositories,
and call ``commit()``. Leaving the ``with`` block without committing, or
because of an exception, rolls everything back, so multi-document writes
(an order plus its reservations, a request response plus the inventory it
creates) land together or not at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from supplyhub.domain.repository.inventory_repository import (
    InventoryRepository,
    StockMovementRepository,
)
from supplyhub.domain.repository.notification_repository import NotificationRepository
from supplyhub.domain.repository.order_repository import OrderRepository
from supplyhub.domain.repository.product_repository import ProductRepository
from supplyhub.domain.repository.request_repository import (
    DisplayRequestRepository,
    QuantityRequestRepository,
)
from supplyhub.domain.repository.shipment_repository import ShipmentRepository


class AbstractUnitOfWork(ABC):

    inventory: InventoryRepository
    movements: StockMovementRepository
    orders: OrderRepository
    quantity_requests: QuantityRequestRepository
    display_requests: DisplayRequestRepository
    products: ProductRepository
    notifications: NotificationRepository
    shipments: ShipmentRepository

    _committed: bool = False

    def __enter__(self) -> AbstractUnitOfWork:
        self._committed = False
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._committed:
            self.rollback()

    def commit(self) -> None:
        self._commit()
        self._committed = True

    @abstractmethod
    def _begin(self) -> None:
        """Load or snapshot state so a later rollback can restore it."""

    @abstractmethod
    def _commit(self) -> None:
        """Make every staged change durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every change staged since ``_begin``."""
