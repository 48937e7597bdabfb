"""Abstract repositories for the InventoryItem aggregate and its movements."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supplyhub.domain.model.inventory import InventoryItem, StockMovement


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> InventoryItem | None:
        """Return an inventory record by its ID, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every inventory record."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated record, assigning an ID if needed."""

    @abstractmethod
    def delete(self, item_id: str) -> None:
        """Remove a record. Deleting a missing ID is a no-op."""

    # --- Queries built on the primitives above --------------------------------

    def find_by_supplier(self, supplier_id: str) -> list[InventoryItem]:
        return [i for i in self.list_all() if i.supplier_id == supplier_id]


class StockMovementRepository(ABC):

    @abstractmethod
    def add(self, movement: StockMovement) -> StockMovement:
        """Append a movement and return it with its assigned ID."""

    @abstractmethod
    def list_all(self) -> list[StockMovement]:
        """Return every movement, in insertion order."""

    @abstractmethod
    def delete_for_item(self, item_id: str) -> int:
        """Remove an item's history; return how many records were removed."""

    def list_for_item(self, item_id: str) -> list[StockMovement]:
        return [m for m in self.list_all() if m.item_id == item_id]
