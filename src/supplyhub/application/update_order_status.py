"""Application services: staff status updates, single and bulk.

Both follow the valid-next table strictly; the administrative
cancellation of processed orders lives in ``cancel_order``.
"""

from __future__ import annotations

import logging

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import OrderDTO, order_to_dto
from supplyhub.application.events import INVENTORY, NOTIFICATIONS, ORDERS, EventBus
from supplyhub.application.notifications import NotificationService
from supplyhub.domain.exceptions import (
    DomainException,
    InvalidTransitionError,
    MissingCancellationReasonError,
    ValidationError,
)
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.notification import NotificationType
from supplyhub.domain.model.order import Order, OrderStatus
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger
from supplyhub.domain.service.order_lifecycle import apply_transition_effects

logger = logging.getLogger(__name__)

_NOTIFICATION_TYPES = {
    OrderStatus.APPROVED: NotificationType.SUCCESS,
    OrderStatus.SHIPPED: NotificationType.INFO,
    OrderStatus.DELIVERED: NotificationType.SUCCESS,
    OrderStatus.CANCELLED: NotificationType.WARNING,
}


def parse_order_status(value: OrderStatus | str) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value.lower())
    except ValueError:
        raise ValidationError(f"Unknown order status '{value}'") from None


def notify_status_change(
    notifier: NotificationService, uow: AbstractUnitOfWork, order: Order
) -> None:
    """Tell the order's owner about its new status (staged in ``uow``)."""
    message = f"Your order {order.order_number} has been {order.status.value}."
    if order.status == OrderStatus.CANCELLED and order.cancellation_reason:
        message += f" Reason: {order.cancellation_reason}"
    notifier.notify(
        uow.notifications,
        order.requested_by,
        f"Order {order.status.value.capitalize()}",
        message,
        _NOTIFICATION_TYPES.get(order.status, NotificationType.INFO),
        order_id=order.id,
        order_number=order.order_number,
    )


def publish_order_change(events: EventBus | None, *orders: Order) -> None:
    if events is None:
        return
    for order in orders:
        events.publish(ORDERS, order_id=order.id, status=order.status.value)
    events.publish(INVENTORY)
    events.publish(NOTIFICATIONS)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        events: EventBus | None = None,
        notifier: NotificationService | None = None,
    ) -> None:
        self._uow = uow
        self._events = events
        self._notifier = notifier or NotificationService()

    def handle(
        self,
        order_id: str,
        new_status: OrderStatus | str,
        actor: Actor,
        reason: str | None = None,
    ) -> OrderDTO:
        try:
            require_staff(actor, "change order status")
            target = parse_order_status(new_status)
            with self._uow:
                order = self._uow.orders.require(order_id)
                previous = order.transition_to(target, actor.user_id, reason)
                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                apply_transition_effects(ledger, order, previous, target, actor.user_id)
                self._uow.orders.save(order)
                notify_status_change(self._notifier, self._uow, order)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Status update of order %s rejected: %s", order_id, exc)
            raise

        logger.info(
            "Order %s moved %s -> %s by %s",
            order.order_number, previous.value, target.value, actor.user_id,
        )
        publish_order_change(self._events, order)
        return order_to_dto(order)


class BulkUpdateOrderStatusHandler:
    """Move many orders to one status, all or nothing.

    Every order is checked before any is touched, and the error names all
    offending order numbers at once.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        events: EventBus | None = None,
        notifier: NotificationService | None = None,
    ) -> None:
        self._uow = uow
        self._events = events
        self._notifier = notifier or NotificationService()

    def handle(
        self,
        order_ids: list[str],
        new_status: OrderStatus | str,
        actor: Actor,
        reason: str | None = None,
    ) -> list[OrderDTO]:
        try:
            require_staff(actor, "change order status")
            target = parse_order_status(new_status)
            if not order_ids:
                raise ValidationError("No orders selected")
            if target == OrderStatus.CANCELLED and not (reason and reason.strip()):
                raise MissingCancellationReasonError(
                    "A cancellation reason is required to cancel orders"
                )
            with self._uow:
                # An order may be referenced by both its ID and its number.
                resolved = {}
                for ref in order_ids:
                    order = self._uow.orders.require(ref)
                    resolved.setdefault(order.id, order)
                orders = list(resolved.values())
                invalid = [o for o in orders if not o.can_transition_to(target)]
                if invalid:
                    raise InvalidTransitionError(
                        f"Cannot move orders to {target.value}: "
                        + ", ".join(f"{o.order_number} ({o.status.value})" for o in invalid)
                    )

                ledger = InventoryLedger(self._uow.inventory, self._uow.movements)
                for order in orders:
                    previous = order.transition_to(target, actor.user_id, reason)
                    apply_transition_effects(ledger, order, previous, target, actor.user_id)
                    self._uow.orders.save(order)
                    notify_status_change(self._notifier, self._uow, order)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Bulk status update to %s rejected: %s", new_status, exc)
            raise

        logger.info("Moved %d orders to %s by %s", len(orders), target.value, actor.user_id)
        publish_order_change(self._events, *orders)
        return [order_to_dto(o) for o in orders]
