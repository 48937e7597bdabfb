"""Application service: Delete Inventory Item use case.

An item cannot be deleted while suppliers still owe stock for it
(pending quantity requests) or while open orders reference it. Deleting
removes the movement history with the row; the stored image is removed
afterwards on a best-effort basis.
"""

from __future__ import annotations

import logging

from supplyhub.application.authorization import require_staff
from supplyhub.application.events import INVENTORY, EventBus
from supplyhub.domain.exceptions import DomainException, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.ports import ObjectStore
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class DeleteInventoryItemHandler:

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        object_store: ObjectStore | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._uow = uow
        self._object_store = object_store
        self._events = events

    def handle(self, actor: Actor, item_id: str) -> None:
        try:
            require_staff(actor, "delete inventory items")
            with self._uow:
                item = InventoryLedger(self._uow.inventory, self._uow.movements).get_item(item_id)

                if item.product_id and self._uow.quantity_requests.find_pending(item.product_id):
                    raise ValidationError(
                        f"Cannot delete {item.name}: it has pending quantity requests"
                    )
                open_orders = [
                    o.order_number for o in self._uow.orders.list_all()
                    if o.is_open and o.references(item_id)
                ]
                if open_orders:
                    raise ValidationError(
                        f"Cannot delete {item.name}: referenced by open orders "
                        f"{', '.join(sorted(open_orders))}"
                    )

                removed = self._uow.movements.delete_for_item(item_id)
                self._uow.inventory.delete(item_id)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Deleting inventory item %s rejected: %s", item_id, exc)
            raise

        logger.info("Deleted inventory item %s and %d movement records", item_id, removed)
        if item.image_path and self._object_store is not None:
            try:
                self._object_store.delete(item.image_path)
            except Exception as exc:
                logger.warning("Could not delete image %s for %s: %s", item.image_path, item_id, exc)

        if self._events is not None:
            self._events.publish(INVENTORY, item_id=item_id, deleted=True)
