"""Application service: replace the items of a pending order.

The old reservation is released and the new items are reserved
all-or-nothing. If the new reservation fails, the unit of work rolls
back and the original reservation stands.
"""

from __future__ import annotations

import logging

from supplyhub.application.create_order import build_line_items
from supplyhub.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from supplyhub.application.events import INVENTORY, ORDERS, EventBus
from supplyhub.domain.exceptions import DomainException, UnauthorizedError, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.order import OrderStatus
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class UpdateOrderItemsHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(self, order_id: str, item_specs: list[OrderItemSpec], actor: Actor) -> OrderDTO:
        try:
            with self._uow:
                order = self._uow.orders.require(order_id)
                if order.requested_by != actor.user_id and not actor.is_staff:
                    raise UnauthorizedError("You can only edit your own orders")
                if order.status != OrderStatus.PENDING:
                    raise ValidationError(
                        f"Order {order.order_number} can only be edited while pending"
                    )

                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                current_ids = {line.product_id for line in order.items}
                lines = build_line_items(ledger, item_specs, already_ordered=current_ids)

                ledger.release_for_order(order, actor.user_id)
                order.replace_items(lines)
                ledger.reserve_for_order(order, actor.user_id)
                self._uow.orders.save(order)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Editing order %s rejected: %s", order_id, exc)
            raise

        logger.info("Order %s items replaced (%d lines)", order.order_number, len(order.items))
        if self._events is not None:
            self._events.publish(ORDERS, order_id=order.id)
            self._events.publish(INVENTORY)
        return order_to_dto(order)
