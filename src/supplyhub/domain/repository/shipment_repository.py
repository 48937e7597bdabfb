"""Abstract repository for the Shipment aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supplyhub.domain.exceptions import EntityNotFoundError
from supplyhub.domain.model.shipment import Shipment


class ShipmentRepository(ABC):

    @abstractmethod
    def get_by_id(self, shipment_id: str) -> Shipment | None:
        """Return a shipment by its ID, or None."""

    @abstractmethod
    def list_all(self) -> list[Shipment]:
        """Return every shipment."""

    @abstractmethod
    def save(self, shipment: Shipment) -> None:
        """Persist a new or updated shipment, assigning an ID if needed."""

    @abstractmethod
    def delete(self, shipment_id: str) -> None:
        """Remove a shipment row."""

    def require(self, shipment_id: str) -> Shipment:
        shipment = self.get_by_id(shipment_id)
        if shipment is None:
            raise EntityNotFoundError(f"Shipment '{shipment_id}' not found")
        return shipment
