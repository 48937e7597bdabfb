"""Abstract repositories for quantity and display requests."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supplyhub.domain.exceptions import EntityNotFoundError
from supplyhub.domain.model.display_request import DisplayRequest
from supplyhub.domain.model.quantity_request import QuantityRequest


class QuantityRequestRepository(ABC):

    @abstractmethod
    def get_by_id(self, request_id: str) -> QuantityRequest | None:
        """Return a quantity request by its ID, or None."""

    @abstractmethod
    def list_all(self) -> list[QuantityRequest]:
        """Return every quantity request."""

    @abstractmethod
    def save(self, request: QuantityRequest) -> None:
        """Persist a new or updated request, assigning an ID if needed."""

    @abstractmethod
    def delete(self, request_id: str) -> None:
        """Remove a request row."""

    def require(self, request_id: str) -> QuantityRequest:
        request = self.get_by_id(request_id)
        if request is None:
            raise EntityNotFoundError(f"Quantity request '{request_id}' not found")
        return request

    def find_pending(
        self, product_id: str, supplier_id: str | None = None
    ) -> list[QuantityRequest]:
        """Pending requests for a product, optionally scoped to one supplier."""
        return [
            r for r in self.list_all()
            if r.is_pending
            and r.product_id == product_id
            and (supplier_id is None or r.supplier_id == supplier_id)
        ]


class DisplayRequestRepository(ABC):

    @abstractmethod
    def get_by_id(self, request_id: str) -> DisplayRequest | None:
        """Return a display request by its ID, or None."""

    @abstractmethod
    def list_all(self) -> list[DisplayRequest]:
        """Return every display request."""

    @abstractmethod
    def save(self, request: DisplayRequest) -> None:
        """Persist a new or updated request, assigning an ID if needed."""

    @abstractmethod
    def delete(self, request_id: str) -> None:
        """Remove a request row."""

    def require(self, request_id: str) -> DisplayRequest:
        request = self.get_by_id(request_id)
        if request is None:
            raise EntityNotFoundError(f"Display request '{request_id}' not found")
        return request
