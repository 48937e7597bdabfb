"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supplyhub.domain.exceptions import EntityNotFoundError
from supplyhub.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order, assigning an ID if needed."""

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove an order row."""

    def get_by_number(self, order_number: str) -> Order | None:
        for order in self.list_all():
            if order.order_number == order_number:
                return order
        return None

    def require(self, reference: str) -> Order:
        """Look an order up by ID or order number; raise if neither matches."""
        order = self.get_by_id(reference) or self.get_by_number(reference)
        if order is None:
            raise EntityNotFoundError(f"Order '{reference}' not found")
        return order

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        return [o for o in self.list_all() if o.status == status]
