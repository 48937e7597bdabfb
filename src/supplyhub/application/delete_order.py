"""Application service: Delete Order use case (pending orders only)."""

from __future__ import annotations

import logging

from supplyhub.application.events import INVENTORY, ORDERS, EventBus
from supplyhub.domain.exceptions import DomainException, UnauthorizedError, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.order import OrderStatus
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class DeleteOrderHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(self, order_id: str, actor: Actor) -> None:
        try:
            with self._uow:
                order = self._uow.orders.require(order_id)
                if order.requested_by != actor.user_id and not actor.is_staff:
                    raise UnauthorizedError("You can only delete your own orders")
                if order.status != OrderStatus.PENDING:
                    raise ValidationError(
                        f"Order {order.order_number} is {order.status.value}; "
                        "only pending orders can be deleted"
                    )
                # Release first so the reserved units are not stranded.
                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                ledger.release_for_order(order, actor.user_id)
                self._uow.orders.delete(order.id)  # type: ignore[arg-type]
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Deleting order %s rejected: %s", order_id, exc)
            raise

        logger.info("Deleted order %s by %s", order.order_number, actor.user_id)
        if self._events is not None:
            self._events.publish(ORDERS, order_id=order.id, deleted=True)
            self._events.publish(INVENTORY)
