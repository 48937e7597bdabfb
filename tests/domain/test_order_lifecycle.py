"""Unit tests for the stock side effects of order status changes."""

import pytest

from supplyhub.domain.model.inventory import InventoryItem, MovementType
from supplyhub.domain.model.order import Order, OrderLineItem, OrderStatus
from supplyhub.domain.model.value_objects import Money, Quantity
from supplyhub.domain.service.inventory_ledger import InventoryLedger
from supplyhub.domain.service.order_lifecycle import apply_transition_effects
from tests.fakes import FakeInventoryRepository, FakeStockMovementRepository


def _setup() -> tuple[InventoryLedger, FakeInventoryRepository, FakeStockMovementRepository, Order]:
    """Item W1 with 10 on hand and a pending order holding 4 of them."""
    inventory = FakeInventoryRepository([
        InventoryItem(id="W1", name="Widget", quantity=10, min_stock_level=3),
    ])
    movements = FakeStockMovementRepository()
    ledger = InventoryLedger(inventory, movements)
    order = Order.create("u1", [
        OrderLineItem("W1", "Widget", Quantity(4), Money.of("2.00")),
    ])
    ledger.reserve_for_order(order, "u1")
    return ledger, inventory, movements, order


def _move(ledger: InventoryLedger, order: Order, target: OrderStatus, reason: str | None = None) -> None:
    previous = order.transition_to(target, "staff-1", reason)
    apply_transition_effects(ledger, order, previous, target, "staff-1")


class TestPendingTransitions:

    def test_approval_confirms_reservation(self):
        ledger, inventory, movements, order = _setup()
        _move(ledger, order, OrderStatus.APPROVED)
        item = inventory.get_by_id("W1")
        assert (item.quantity, item.reserved_quantity, item.available_quantity) == (6, 0, 6)
        assert [m.type for m in movements.list_all()] == [MovementType.OUT]

    def test_cancellation_releases_reservation(self):
        ledger, inventory, movements, order = _setup()
        _move(ledger, order, OrderStatus.CANCELLED, "No longer needed")
        item = inventory.get_by_id("W1")
        assert (item.quantity, item.reserved_quantity) == (10, 0)
        assert movements.list_all() == []

    @pytest.mark.parametrize("target", [OrderStatus.SHIPPED, OrderStatus.DELIVERED])
    def test_direct_jump_from_pending_also_confirms(self, target):
        ledger, inventory, _, order = _setup()
        apply_transition_effects(ledger, order, OrderStatus.PENDING, target, "staff-1")
        assert inventory.get_by_id("W1").quantity == 6


class TestProcessedTransitions:

    def test_shipping_and_delivery_leave_stock_alone(self):
        ledger, inventory, movements, order = _setup()
        _move(ledger, order, OrderStatus.APPROVED)
        _move(ledger, order, OrderStatus.SHIPPED)
        _move(ledger, order, OrderStatus.DELIVERED)
        assert inventory.get_by_id("W1").quantity == 6
        assert len(movements.list_all()) == 1

    @pytest.mark.parametrize("previous", [OrderStatus.APPROVED, OrderStatus.SHIPPED])
    def test_cancelling_processed_order_restores_stock(self, previous):
        ledger, inventory, movements, order = _setup()
        _move(ledger, order, OrderStatus.APPROVED)
        if previous == OrderStatus.SHIPPED:
            _move(ledger, order, OrderStatus.SHIPPED)

        before = order.cancel("staff-1", "Customer refused")
        apply_transition_effects(ledger, order, before, OrderStatus.CANCELLED, "staff-1")

        item = inventory.get_by_id("W1")
        assert (item.quantity, item.reserved_quantity) == (10, 0)
        assert movements.list_all()[-1].type == MovementType.IN
