"""Order aggregate and its status state machine.

The Order owns its line items and knows which status changes are legal.
Inventory side effects of a transition are coordinated elsewhere (see
``supplyhub.domain.service.order_lifecycle``); the aggregate only
validates and records the change.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from supplyhub.domain.exceptions import (
    InvalidTransitionError,
    MissingCancellationReasonError,
    ValidationError,
)
from supplyhub.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


VALID_NEXT_STATUSES: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.APPROVED, OrderStatus.CANCELLED}),
    OrderStatus.APPROVED: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Processed orders may still be cancelled by staff, outside the table above.
ADMIN_CANCELLABLE = frozenset({OrderStatus.APPROVED, OrderStatus.SHIPPED})

MAX_LINE_ITEMS = 50


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_number(now: datetime | None = None) -> str:
    """Time-based order number, e.g. ``ORD-412345678042``."""
    now = now or _now()
    millis = str(int(now.timestamp() * 1000))
    return f"ORD-{millis[-9:]}{random.randint(0, 999):03d}"


@dataclass
class OrderLineItem:
    """Captures the price of an inventory item at order-creation time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    supplier: str = ""

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for internal orders.

    Use ``Order.create()`` for new orders. The plain constructor is kept
    simple so repositories can reconstitute persisted orders as-is.
    """

    id: str | None
    order_number: str
    requested_by: str
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    requester_name: str = ""
    notes: str = ""
    cancellation_reason: str | None = None
    approved_by: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    status_changed_at: dict[str, datetime] = field(default_factory=dict)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        requested_by: str,
        items: list[OrderLineItem],
        requester_name: str = "",
        notes: str = "",
    ) -> Order:
        if not requested_by or not requested_by.strip():
            raise ValidationError("Requesting user is required")
        Order._validate_items(items)
        return Order(
            id=None,
            order_number=generate_order_number(),
            requested_by=requested_by,
            requester_name=requester_name,
            items=list(items),
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in VALID_NEXT_STATUSES[self.status]

    def transition_to(
        self,
        target: OrderStatus,
        actor_id: str,
        cancellation_reason: str | None = None,
    ) -> OrderStatus:
        """Move along the valid-next table and return the previous status."""
        if not self.can_transition_to(target):
            raise InvalidTransitionError(
                f"Order {self.order_number} cannot move from "
                f"{self.status.value} to {target.value}"
            )
        return self._apply(target, actor_id, cancellation_reason)

    def cancel(self, actor_id: str, reason: str | None) -> OrderStatus:
        """Cancel a pending order, or a processed one (administrative path)."""
        if self.status != OrderStatus.PENDING and self.status not in ADMIN_CANCELLABLE:
            raise InvalidTransitionError(
                f"Order {self.order_number} cannot be cancelled "
                f"in {self.status.value} status"
            )
        return self._apply(OrderStatus.CANCELLED, actor_id, reason)

    def replace_items(self, items: list[OrderLineItem]) -> None:
        if self.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Order {self.order_number} can only be edited while pending"
            )
        self._validate_items(items)
        self.items = list(items)
        self.updated_at = _now()

    # --- Computed properties --------------------------------------------------

    @property
    def total_amount(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.total_price
        return result

    @property
    def is_open(self) -> bool:
        return self.status in (OrderStatus.PENDING, OrderStatus.APPROVED, OrderStatus.SHIPPED)

    def references(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)

    # --- Internal helpers -----------------------------------------------------

    def _apply(
        self,
        target: OrderStatus,
        actor_id: str,
        cancellation_reason: str | None,
    ) -> OrderStatus:
        if target == OrderStatus.CANCELLED:
            if not cancellation_reason or not cancellation_reason.strip():
                raise MissingCancellationReasonError(
                    f"A cancellation reason is required to cancel order {self.order_number}"
                )
            self.cancellation_reason = cancellation_reason.strip()
        if target == OrderStatus.APPROVED:
            self.approved_by = actor_id

        previous = self.status
        self.status = target
        self.updated_at = _now()
        self.status_changed_at[target.value] = self.updated_at
        return previous

    @staticmethod
    def _validate_items(items: list[OrderLineItem]) -> None:
        if not items:
            raise ValidationError("Order must contain at least one item")
        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")
        seen: set[str] = set()
        for item in items:
            if item.product_id in seen:
                raise ValidationError(
                    f"'{item.product_name}' appears more than once in the order"
                )
            seen.add(item.product_id)
