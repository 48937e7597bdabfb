"""Integration tests for staff status updates, single and bulk."""

import pytest

from supplyhub.application.create_order import CreateOrderHandler
from supplyhub.application.dto import OrderDTO, OrderItemSpec
from supplyhub.application.events import ORDERS, EventBus
from supplyhub.application.update_order_status import (
    BulkUpdateOrderStatusHandler,
    UpdateOrderStatusHandler,
)
from supplyhub.domain.exceptions import (
    InvalidTransitionError,
    MissingCancellationReasonError,
    UnauthorizedError,
    ValidationError,
)
from supplyhub.domain.model.inventory import MovementType
from supplyhub.domain.model.order import OrderStatus
from tests.fakes import STAFF, USER, FakeUnitOfWork, published_item


def _setup() -> tuple[FakeUnitOfWork, EventBus]:
    uow = FakeUnitOfWork(items=[
        published_item("W1", "Widget", 10, "5.00"),
        published_item("G1", "Gadget", 20, "2.00"),
    ])
    return uow, EventBus()


def _place(uow: FakeUnitOfWork, item_id: str = "W1", qty: int = 4) -> OrderDTO:
    return CreateOrderHandler(uow).handle(USER, [OrderItemSpec(item_id, qty)])


class TestUpdateOrderStatus:

    def test_approval_deducts_reserved_stock(self):
        uow, events = _setup()
        order = _place(uow)
        dto = UpdateOrderStatusHandler(uow, events).handle(order.id, "approved", STAFF)

        assert dto.status == "approved"
        widget = uow.inventory.get_by_id("W1")
        assert (widget.quantity, widget.reserved_quantity) == (6, 0)
        [movement] = uow.movements.list_all()
        assert movement.type == MovementType.OUT
        assert uow.orders.get_by_id(order.id).approved_by == "staff-1"

    def test_owner_is_notified(self):
        uow, events = _setup()
        order = _place(uow)
        UpdateOrderStatusHandler(uow, events).handle(order.id, OrderStatus.APPROVED, STAFF)
        [note] = uow.notifications.list_all()
        assert note.user_id == "u1"
        assert note.title == "Order Approved"
        assert order.order_number in note.message

    def test_order_can_be_referenced_by_number(self):
        uow, events = _setup()
        order = _place(uow)
        dto = UpdateOrderStatusHandler(uow, events).handle(order.order_number, "approved", STAFF)
        assert dto.id == order.id

    def test_full_forward_path(self):
        uow, events = _setup()
        order = _place(uow)
        handler = UpdateOrderStatusHandler(uow, events)
        for status in ("approved", "shipped", "delivered"):
            handler.handle(order.id, status, STAFF)
        assert uow.orders.get_by_id(order.id).status == OrderStatus.DELIVERED
        assert uow.inventory.get_by_id("W1").quantity == 6

    def test_cancel_through_table_releases_reservation(self):
        uow, events = _setup()
        order = _place(uow)
        UpdateOrderStatusHandler(uow, events).handle(order.id, "cancelled", STAFF, reason="Duplicate")
        widget = uow.inventory.get_by_id("W1")
        assert (widget.quantity, widget.reserved_quantity) == (10, 0)
        assert uow.orders.get_by_id(order.id).cancellation_reason == "Duplicate"

    def test_cancel_without_reason_changes_nothing(self):
        uow, events = _setup()
        order = _place(uow)
        with pytest.raises(MissingCancellationReasonError):
            UpdateOrderStatusHandler(uow, events).handle(order.id, "cancelled", STAFF)
        assert uow.orders.get_by_id(order.id).status == OrderStatus.PENDING
        assert uow.inventory.get_by_id("W1").reserved_quantity == 4

    def test_skipping_a_step_is_rejected(self):
        uow, events = _setup()
        order = _place(uow)
        with pytest.raises(InvalidTransitionError, match="pending to shipped"):
            UpdateOrderStatusHandler(uow, events).handle(order.id, "shipped", STAFF)
        assert uow.inventory.get_by_id("W1").quantity == 10

    def test_non_staff_cannot_change_status(self):
        uow, events = _setup()
        order = _place(uow)
        with pytest.raises(UnauthorizedError, match="admin or warehouse staff"):
            UpdateOrderStatusHandler(uow, events).handle(order.id, "approved", USER)
        assert uow.orders.get_by_id(order.id).status == OrderStatus.PENDING

    def test_unknown_status_rejected(self):
        uow, events = _setup()
        order = _place(uow)
        with pytest.raises(ValidationError, match="Unknown order status"):
            UpdateOrderStatusHandler(uow, events).handle(order.id, "lost", STAFF)

    def test_publishes_order_change(self):
        uow, events = _setup()
        order = _place(uow)
        seen = []
        events.subscribe(ORDERS, lambda e: seen.append(e.payload))
        UpdateOrderStatusHandler(uow, events).handle(order.id, "approved", STAFF)
        assert seen == [{"order_id": order.id, "status": "approved"}]


class TestBulkUpdateOrderStatus:

    def test_moves_every_order(self):
        uow, events = _setup()
        first = _place(uow, "W1", 4)
        second = _place(uow, "G1", 5)
        dtos = BulkUpdateOrderStatusHandler(uow, events).handle(
            [first.id, second.id], "approved", STAFF
        )
        assert [d.status for d in dtos] == ["approved", "approved"]
        assert uow.inventory.get_by_id("W1").quantity == 6
        assert uow.inventory.get_by_id("G1").quantity == 15
        assert uow.commits == 3
        assert len(uow.notifications.list_all()) == 2

    def test_one_invalid_order_blocks_all_and_is_named(self):
        uow, events = _setup()
        first = _place(uow, "W1", 4)
        second = _place(uow, "G1", 5)
        third = _place(uow, "G1", 1)
        UpdateOrderStatusHandler(uow, events).handle(second.id, "approved", STAFF)

        with pytest.raises(InvalidTransitionError) as exc_info:
            BulkUpdateOrderStatusHandler(uow, events).handle(
                [first.id, second.id, third.id], "approved", STAFF
            )
        message = str(exc_info.value)
        assert f"{second.order_number} (approved)" in message
        assert first.order_number not in message

        assert uow.orders.get_by_id(first.id).status == OrderStatus.PENDING
        assert uow.orders.get_by_id(third.id).status == OrderStatus.PENDING
        assert uow.inventory.get_by_id("W1").reserved_quantity == 4

    def test_empty_selection_rejected(self):
        uow, events = _setup()
        with pytest.raises(ValidationError, match="No orders selected"):
            BulkUpdateOrderStatusHandler(uow, events).handle([], "approved", STAFF)

    def test_bulk_cancel_requires_reason(self):
        uow, events = _setup()
        order = _place(uow)
        with pytest.raises(MissingCancellationReasonError):
            BulkUpdateOrderStatusHandler(uow, events).handle([order.id], "cancelled", STAFF, "  ")

    def test_bulk_cancel_releases_each_order(self):
        uow, events = _setup()
        first = _place(uow, "W1", 4)
        second = _place(uow, "G1", 5)
        BulkUpdateOrderStatusHandler(uow, events).handle(
            [first.id, second.id], "cancelled", STAFF, "Budget freeze"
        )
        assert uow.inventory.get_by_id("W1").reserved_quantity == 0
        assert uow.inventory.get_by_id("G1").reserved_quantity == 0

    def test_non_staff_rejected(self):
        uow, events = _setup()
        order = _place(uow)
        with pytest.raises(UnauthorizedError):
            BulkUpdateOrderStatusHandler(uow, events).handle([order.id], "approved", USER)

    def test_same_order_by_id_and_number_is_applied_once(self):
        uow, events = _setup()
        first = _place(uow, "W1", 2)
        _place(uow, "W1", 3)

        dtos = BulkUpdateOrderStatusHandler(uow, events).handle(
            [first.id, first.order_number], "approved", STAFF
        )

        assert [d.id for d in dtos] == [first.id]
        widget = uow.inventory.get_by_id("W1")
        assert (widget.quantity, widget.reserved_quantity) == (8, 3)
        assert len(uow.movements.list_all()) == 1
        assert len(uow.notifications.list_all()) == 1

    def test_write_failure_midway_leaves_every_order_unchanged(self):
        uow, events = _setup()
        first = _place(uow, "W1", 4)
        second = _place(uow, "G1", 5)
        uow.inventory.fail_saves_for = frozenset({"Gadget"})

        with pytest.raises(ConnectionError):
            BulkUpdateOrderStatusHandler(uow, events).handle(
                [first.id, second.id], "approved", STAFF
            )

        assert uow.orders.get_by_id(first.id).status == OrderStatus.PENDING
        assert uow.orders.get_by_id(second.id).status == OrderStatus.PENDING
        widget = uow.inventory.get_by_id("W1")
        assert (widget.quantity, widget.reserved_quantity) == (10, 4)
        assert uow.movements.list_all() == []
        assert uow.notifications.list_all() == []
