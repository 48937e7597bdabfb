"""Application service: Update Inventory Item use case (manual edits)."""

from __future__ import annotations

import logging

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import InventoryItemDTO, inventory_to_dto
from supplyhub.application.events import INVENTORY, EventBus
from supplyhub.domain.exceptions import DomainException
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class UpdateInventoryItemHandler:
    """Edit an item's details and thresholds; ``None`` leaves a field as is.

    Changing ``min_stock_level`` re-derives the stock status, except for
    discontinued items, which keep their status.
    """

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(
        self,
        actor: Actor,
        item_id: str,
        name: str | None = None,
        sku: str | None = None,
        category: str | None = None,
        description: str | None = None,
        location: str | None = None,
        unit_price: str | None = None,
        min_stock_level: int | None = None,
        max_stock_level: int | None = None,
        supplier_name: str | None = None,
    ) -> InventoryItemDTO:
        try:
            require_staff(actor, "edit inventory items")
            price = Money.of(unit_price) if unit_price is not None else None
            with self._uow:
                item = InventoryLedger(self._uow.inventory, self._uow.movements).get_item(item_id)
                before = item.status
                status_changed = item.update_details(
                    name=name,
                    sku=sku,
                    category=category,
                    description=description,
                    location=location,
                    unit_price=price,
                    min_stock_level=min_stock_level,
                    max_stock_level=max_stock_level,
                    supplier_name=supplier_name,
                )
                item.touch(actor.user_id)
                self._uow.inventory.save(item)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Editing inventory item %s rejected: %s", item_id, exc)
            raise

        if status_changed:
            logger.info(
                "Item %s status %s -> %s after edit",
                item_id, before.value, item.status.value,  # type: ignore[union-attr]
            )
        logger.info("Updated inventory item %s by %s", item_id, actor.user_id)
        if self._events is not None:
            self._events.publish(INVENTORY, item_id=item_id)
        return inventory_to_dto(item)
