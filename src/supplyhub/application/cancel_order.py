"""Application service: Cancel Order use case.

This is the administrative cancellation path, separate from the strict
status table:

* an owner may cancel their own order while it is pending, which
  releases the reservation;
* staff may also cancel approved or shipped orders, which puts the
  deducted stock back on hand;
* delivered and cancelled orders cannot be cancelled.
"""

from __future__ import annotations

import logging

from supplyhub.application.dto import OrderDTO, order_to_dto
from supplyhub.application.events import EventBus
from supplyhub.application.notifications import NotificationService
from supplyhub.application.update_order_status import (
    notify_status_change,
    publish_order_change,
)
from supplyhub.domain.exceptions import (
    DomainException,
    InvalidTransitionError,
    UnauthorizedError,
)
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.order import OrderStatus
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger
from supplyhub.domain.service.order_lifecycle import apply_transition_effects

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        events: EventBus | None = None,
        notifier: NotificationService | None = None,
    ) -> None:
        self._uow = uow
        self._events = events
        self._notifier = notifier or NotificationService()

    def handle(self, order_id: str, actor: Actor, reason: str | None) -> OrderDTO:
        try:
            with self._uow:
                order = self._uow.orders.require(order_id)
                if order.status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
                    raise InvalidTransitionError(
                        f"Order {order.order_number} is already {order.status.value}"
                    )
                if not actor.is_staff:
                    if order.requested_by != actor.user_id:
                        raise UnauthorizedError("You can only cancel your own orders")
                    if order.status != OrderStatus.PENDING:
                        raise UnauthorizedError(
                            f"Order {order.order_number} is already being processed; "
                            "contact warehouse staff to cancel it"
                        )

                previous = order.cancel(actor.user_id, reason)
                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                apply_transition_effects(
                    ledger, order, previous, OrderStatus.CANCELLED, actor.user_id
                )
                self._uow.orders.save(order)
                if order.requested_by != actor.user_id:
                    notify_status_change(self._notifier, self._uow, order)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Cancelling order %s rejected: %s", order_id, exc)
            raise

        logger.info(
            "Order %s cancelled from %s by %s", order.order_number, previous.value, actor.user_id
        )
        publish_order_change(self._events, order)
        return order_to_dto(order)
