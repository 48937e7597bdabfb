"""Application service: Add Inventory Item use case (manual entry by staff)."""

from __future__ import annotations

import logging

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import InventoryItemDTO, inventory_to_dto
from supplyhub.application.events import INVENTORY, EventBus
from supplyhub.domain.exceptions import DomainException, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.inventory import InventoryItem
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger
from supplyhub.domain.service.request_workflow import InventoryDefaults

logger = logging.getLogger(__name__)


class AddInventoryItemHandler:

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        events: EventBus | None = None,
        defaults: InventoryDefaults | None = None,
    ) -> None:
        self._uow = uow
        self._events = events
        self._defaults = defaults or InventoryDefaults()

    def handle(
        self,
        actor: Actor,
        name: str,
        quantity: int,
        unit_price: str,
        sku: str = "",
        category: str | None = None,
        description: str = "",
        location: str | None = None,
        min_stock_level: int = 0,
        max_stock_level: int = 0,
        supplier_id: str = "",
        supplier_name: str = "",
    ) -> InventoryItemDTO:
        try:
            require_staff(actor, "add inventory items")
            self._validate(name, quantity, min_stock_level, max_stock_level)
            item = InventoryItem(
                id=None,
                name=name.strip(),
                sku=sku.strip(),
                category=(category or self._defaults.category).strip(),
                description=description,
                location=(location or self._defaults.location).strip(),
                quantity=quantity,
                min_stock_level=min_stock_level,
                max_stock_level=max_stock_level,
                unit_price=Money.of(unit_price),
                supplier_id=supplier_id,
                supplier_name=supplier_name,
            )
            with self._uow:
                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                ledger.register_item(item, actor.user_id)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Adding inventory item '%s' rejected: %s", name, exc)
            raise

        if self._events is not None:
            self._events.publish(INVENTORY, item_id=item.id)
        return inventory_to_dto(item)

    @staticmethod
    def _validate(name: str, quantity: int, min_level: int, max_level: int) -> None:
        if not name or not name.strip():
            raise ValidationError("Item name is required")
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        if min_level < 0 or max_level < 0:
            raise ValidationError("Stock levels cannot be negative")
        if max_level and max_level < min_level:
            raise ValidationError("Maximum stock level cannot be below the minimum")
