"""Application services: catalog curation and visibility.

Staff curate an item's customer-facing details, then publish it. An
item can only reach the catalog once its details are saved and it has a
positive price; discontinuing an item also pulls it from the catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import InventoryItemDTO, inventory_to_dto
from supplyhub.application.events import INVENTORY, EventBus
from supplyhub.domain.exceptions import DomainException
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.inventory import InventoryItem
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class _ItemCommandHandler:
    """Load one item, apply a change, save and commit."""

    action = "update inventory items"

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def _run(
        self, actor: Actor, item_id: str, change: Callable[[InventoryItem], None]
    ) -> InventoryItemDTO:
        try:
            require_staff(actor, self.action)
            with self._uow:
                item = InventoryLedger(self._uow.inventory, self._uow.movements).get_item(item_id)
                change(item)
                item.touch(actor.user_id)
                self._uow.inventory.save(item)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Cannot %s (%s): %s", self.action, item_id, exc)
            raise

        logger.info("%s: %s by %s", type(self).__name__, item_id, actor.user_id)
        if self._events is not None:
            self._events.publish(INVENTORY, item_id=item_id)
        return inventory_to_dto(item)


class CurateInventoryItemHandler(_ItemCommandHandler):
    action = "curate catalog details"

    def handle(
        self,
        actor: Actor,
        item_id: str,
        customer_description: str,
        sale_price: str | None = None,
        tags: list[str] | None = None,
    ) -> InventoryItemDTO:
        price = Money.of(sale_price) if sale_price not in (None, "") else None
        return self._run(
            actor, item_id, lambda item: item.curate(price, customer_description, tags)
        )


class PublishInventoryItemHandler(_ItemCommandHandler):
    action = "publish items"

    def handle(self, actor: Actor, item_id: str) -> InventoryItemDTO:
        return self._run(actor, item_id, InventoryItem.publish)


class UnpublishInventoryItemHandler(_ItemCommandHandler):
    action = "unpublish items"

    def handle(self, actor: Actor, item_id: str) -> InventoryItemDTO:
        return self._run(actor, item_id, InventoryItem.unpublish)


class DiscontinueInventoryItemHandler(_ItemCommandHandler):
    action = "discontinue items"

    def handle(self, actor: Actor, item_id: str) -> InventoryItemDTO:
        return self._run(actor, item_id, InventoryItem.discontinue)


class ReinstateInventoryItemHandler(_ItemCommandHandler):
    action = "reinstate items"

    def handle(self, actor: Actor, item_id: str) -> InventoryItemDTO:
        return self._run(actor, item_id, InventoryItem.reinstate)
