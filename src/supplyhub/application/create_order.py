"""Application service: Create Order use case.

Resolves each requested inventory item, snapshots its customer-facing
price, and reserves stock for every line before the order is saved. The
order and its reservations commit together in one unit of work.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from supplyhub.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from supplyhub.application.events import INVENTORY, ORDERS, EventBus
from supplyhub.domain.exceptions import DomainException, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.order import Order, OrderLineItem
from supplyhub.domain.model.value_objects import Quantity
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


def build_line_items(
    ledger: InventoryLedger,
    specs: list[OrderItemSpec],
    already_ordered: Collection[str] = (),
) -> list[OrderLineItem]:
    """Turn item specs into line items with a price snapshot.

    Items must be published, unless they are in ``already_ordered``
    (lines being kept when a pending order is edited).
    """
    lines: list[OrderLineItem] = []
    for spec in specs:
        item = ledger.get_item(spec.item_id)
        if not item.is_published and item.id not in already_ordered:
            raise ValidationError(f"{item.name} is not available in the catalog")
        lines.append(
            OrderLineItem(
                product_id=item.id,  # type: ignore[arg-type]
                product_name=item.name,
                quantity=Quantity(spec.quantity),
                unit_price=item.effective_price,  # <-- price snapshot
                supplier=item.supplier_id,
            )
        )
    return lines


class CreateOrderHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(
        self, actor: Actor, item_specs: list[OrderItemSpec], notes: str = ""
    ) -> OrderDTO:
        """Create an order and reserve its stock.

        Steps:
        1. Resolve each item (must exist and be published).
        2. Let the Order aggregate validate the line items.
        3. Reserve stock for every line; a failure releases earlier lines.
        4. Save the order and commit.
        """
        try:
            with self._uow:
                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                lines = build_line_items(ledger, item_specs)
                order = Order.create(
                    requested_by=actor.user_id,
                    items=lines,
                    requester_name=actor.name,
                    notes=notes,
                )
                ledger.reserve_for_order(order, actor.user_id)
                self._uow.orders.save(order)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Order creation for %s rejected: %s", actor.user_id, exc)
            raise

        logger.info(
            "Created order %s for %s (%d lines, %s)",
            order.order_number, actor.user_id, len(order.items), order.total_amount,
        )
        if self._events is not None:
            self._events.publish(ORDERS, order_id=order.id)
            self._events.publish(INVENTORY, order_id=order.id)
        return order_to_dto(order)
