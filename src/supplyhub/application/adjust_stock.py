"""Application service: Adjust Stock use case.

Wraps ``InventoryLedger.adjust_stock`` in a unit of work so the item
update and its movement record are committed together.
"""

from __future__ import annotations

import logging

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import InventoryItemDTO, inventory_to_dto
from supplyhub.application.events import INVENTORY, EventBus
from supplyhub.domain.exceptions import DomainException, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.inventory import MovementType
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class AdjustStockHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(
        self,
        actor: Actor,
        item_id: str,
        quantity: int,
        movement_type: MovementType | str,
        reason: str,
        notes: str | None = None,
    ) -> InventoryItemDTO:
        try:
            require_staff(actor, "adjust stock")
            movement_type = _parse_movement_type(movement_type)
            if not reason or not reason.strip():
                raise ValidationError("A reason is required for stock adjustments")
            with self._uow:
                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                item = ledger.adjust_stock(
                    item_id, quantity, movement_type, reason.strip(), actor.user_id, notes
                )
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Stock adjustment on %s rejected: %s", item_id, exc)
            raise

        if self._events is not None:
            self._events.publish(INVENTORY, item_id=item_id)
        return inventory_to_dto(item)


def _parse_movement_type(value: MovementType | str) -> MovementType:
    if isinstance(value, MovementType):
        return value
    try:
        return MovementType(value.lower())
    except ValueError:
        raise ValidationError(
            f"Unknown movement type '{value}' (expected in, out or adjustment)"
        ) from None
