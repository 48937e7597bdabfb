"""Domain service: inventory side effects of order status changes.

The Order aggregate decides whether a transition is legal; this module
decides what it means for stock:

  pending  -> approved/shipped/delivered   confirm the reserved units
  pending  -> cancelled                    release the reservation
  approved/shipped -> cancelled            put the deducted units back
  anything else                            no stock change
"""

from __future__ import annotations

import logging

from supplyhub.domain.model.order import Order, OrderStatus
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

_FULFILMENT_STATUSES = frozenset({
    OrderStatus.APPROVED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
})
_PROCESSED_STATUSES = frozenset({OrderStatus.APPROVED, OrderStatus.SHIPPED})


def apply_transition_effects(
    ledger: InventoryLedger,
    order: Order,
    previous: OrderStatus,
    target: OrderStatus,
    actor_id: str,
) -> None:
    if previous == OrderStatus.PENDING and target in _FULFILMENT_STATUSES:
        ledger.confirm_for_order(order, actor_id)
    elif previous == OrderStatus.PENDING and target == OrderStatus.CANCELLED:
        ledger.release_for_order(order, actor_id)
    elif previous in _PROCESSED_STATUSES and target == OrderStatus.CANCELLED:
        ledger.restore_for_order(order, actor_id)
    else:
        return
    logger.info(
        "Order %s %s -> %s: inventory updated for %d lines",
        order.order_number, previous.value, target.value, len(order.items),
    )
