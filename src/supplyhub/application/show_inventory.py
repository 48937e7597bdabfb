"""Application services: inventory queries."""

from __future__ import annotations

from supplyhub.application.dto import (
    InventoryItemDTO,
    StockMovementDTO,
    inventory_to_dto,
    movement_to_dto,
)
from supplyhub.domain.model.inventory import InventoryItem, StockStatus
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

_ORDERABLE_STATUSES = (StockStatus.IN_STOCK, StockStatus.LOW_STOCK)


def search_items(items: list[InventoryItem], term: str) -> list[InventoryItem]:
    """Case-insensitive substring match on name, SKU or category."""
    needle = term.strip().lower()
    if not needle:
        return list(items)
    return [
        i for i in items
        if needle in i.name.lower() or needle in i.sku.lower() or needle in i.category.lower()
    ]


def published_catalog(items: list[InventoryItem]) -> list[InventoryItem]:
    """Items an internal user can currently order."""
    return sorted(
        (
            i for i in items
            if i.is_published and i.status in _ORDERABLE_STATUSES and i.available_quantity > 0
        ),
        key=lambda i: i.name.lower(),
    )


class ShowInventoryItemHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self, item_id: str) -> InventoryItemDTO:
        with self._uow:
            item = InventoryLedger(self._uow.inventory, self._uow.movements).get_item(item_id)
        return inventory_to_dto(item)


class ListInventoryHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(
        self, search: str | None = None, supplier_id: str | None = None
    ) -> list[InventoryItemDTO]:
        with self._uow:
            if supplier_id:
                items = self._uow.inventory.find_by_supplier(supplier_id)
            else:
                items = self._uow.inventory.list_all()
        if search:
            items = search_items(items, search)
        return [inventory_to_dto(i) for i in sorted(items, key=lambda i: i.name.lower())]


class LowStockReportHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[InventoryItemDTO]:
        with self._uow:
            items = InventoryLedger(self._uow.inventory, self._uow.movements).low_stock_items()
        return [inventory_to_dto(i) for i in sorted(items, key=lambda i: i.quantity)]


class PublishedCatalogHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[InventoryItemDTO]:
        with self._uow:
            items = self._uow.inventory.list_all()
        return [inventory_to_dto(i) for i in published_catalog(items)]


class StockMovementsHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self, item_id: str | None = None, limit: int | None = None) -> list[StockMovementDTO]:
        """Movement history, newest first, for one item or all of them."""
        with self._uow:
            movements = InventoryLedger(self._uow.inventory, self._uow.movements).movements(item_id)
        if limit is not None:
            movements = movements[:limit]
        return [movement_to_dto(m) for m in movements]
