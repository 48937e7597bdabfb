"""Integration tests for cancelling, deleting and editing orders."""

import pytest

from supplyhub.application.cancel_order import CancelOrderHandler
from supplyhub.application.create_order import CreateOrderHandler
from supplyhub.application.delete_order import DeleteOrderHandler
from supplyhub.application.dto import OrderDTO, OrderItemSpec
from supplyhub.application.update_order_items import UpdateOrderItemsHandler
from supplyhub.application.update_order_status import UpdateOrderStatusHandler
from supplyhub.domain.exceptions import (
    InsufficientStockError,
    InvalidTransitionError,
    MissingCancellationReasonError,
    UnauthorizedError,
    ValidationError,
)
from supplyhub.domain.model.inventory import MovementType
from supplyhub.domain.model.order import OrderStatus
from supplyhub.domain.service.inventory_ledger import RESTORATION_REASON
from tests.fakes import ADMIN, OTHER_USER, STAFF, USER, FakeUnitOfWork, published_item


def _setup(qty: int = 4) -> tuple[FakeUnitOfWork, OrderDTO]:
    """A pending order by USER holding ``qty`` of W1 (10 on hand)."""
    uow = FakeUnitOfWork(items=[
        published_item("W1", "Widget", 10, "5.00"),
        published_item("G1", "Gadget", 20, "2.00"),
    ])
    order = CreateOrderHandler(uow).handle(USER, [OrderItemSpec("W1", qty)])
    return uow, order


def _approve(uow: FakeUnitOfWork, order: OrderDTO, *more: str) -> None:
    handler = UpdateOrderStatusHandler(uow)
    for status in ("approved", *more):
        handler.handle(order.id, status, STAFF)


class TestCancelOrder:

    def test_owner_cancels_pending_order(self):
        uow, order = _setup()
        dto = CancelOrderHandler(uow).handle(order.id, USER, "Ordered by mistake")
        assert dto.status == "cancelled"
        assert dto.cancellation_reason == "Ordered by mistake"
        widget = uow.inventory.get_by_id("W1")
        assert (widget.quantity, widget.reserved_quantity) == (10, 0)
        assert uow.notifications.list_all() == []

    def test_owner_cannot_cancel_processed_order(self):
        uow, order = _setup()
        _approve(uow, order)
        with pytest.raises(UnauthorizedError, match="already being processed"):
            CancelOrderHandler(uow).handle(order.id, USER, "Changed my mind")
        assert uow.orders.get_by_id(order.id).status == OrderStatus.APPROVED

    def test_other_user_cannot_cancel(self):
        uow, order = _setup()
        with pytest.raises(UnauthorizedError, match="your own orders"):
            CancelOrderHandler(uow).handle(order.id, OTHER_USER, "Not mine")
        assert uow.inventory.get_by_id("W1").reserved_quantity == 4

    @pytest.mark.parametrize("processed", [(), ("shipped",)])
    def test_staff_cancel_of_processed_order_restores_stock(self, processed):
        uow, order = _setup()
        _approve(uow, order, *processed)
        assert uow.inventory.get_by_id("W1").quantity == 6

        CancelOrderHandler(uow).handle(order.id, ADMIN, "Supplier recall")

        widget = uow.inventory.get_by_id("W1")
        assert (widget.quantity, widget.reserved_quantity) == (10, 0)
        restoration = uow.movements.list_all()[-1]
        assert restoration.type == MovementType.IN
        assert restoration.reason == RESTORATION_REASON

    def test_staff_cancel_notifies_owner_with_reason(self):
        uow, order = _setup()
        CancelOrderHandler(uow).handle(order.id, STAFF, "Out of budget")
        [note] = uow.notifications.list_all()
        assert note.user_id == "u1"
        assert note.title == "Order Cancelled"
        assert "Reason: Out of budget" in note.message

    def test_delivered_order_cannot_be_cancelled(self):
        uow, order = _setup()
        _approve(uow, order, "shipped", "delivered")
        with pytest.raises(InvalidTransitionError, match="already delivered"):
            CancelOrderHandler(uow).handle(order.id, ADMIN, "Too late")
        assert uow.inventory.get_by_id("W1").quantity == 6

    def test_reason_is_required(self):
        uow, order = _setup()
        with pytest.raises(MissingCancellationReasonError):
            CancelOrderHandler(uow).handle(order.id, USER, "")
        assert uow.inventory.get_by_id("W1").reserved_quantity == 4


class TestDeleteOrder:

    def test_owner_deletes_pending_order(self):
        uow, order = _setup()
        DeleteOrderHandler(uow).handle(order.id, USER)
        assert uow.orders.list_all() == []
        assert uow.inventory.get_by_id("W1").reserved_quantity == 0

    def test_processed_order_cannot_be_deleted(self):
        uow, order = _setup()
        _approve(uow, order)
        with pytest.raises(ValidationError, match="only pending orders"):
            DeleteOrderHandler(uow).handle(order.id, ADMIN)
        assert uow.orders.get_by_id(order.id) is not None

    def test_other_user_cannot_delete(self):
        uow, order = _setup()
        with pytest.raises(UnauthorizedError):
            DeleteOrderHandler(uow).handle(order.id, OTHER_USER)


class TestUpdateOrderItems:

    def test_items_replaced_and_reservations_moved(self):
        uow, order = _setup()
        dto = UpdateOrderItemsHandler(uow).handle(
            order.id, [OrderItemSpec("W1", 2), OrderItemSpec("G1", 5)], USER
        )
        assert dto.total == "$20.00"
        assert uow.inventory.get_by_id("W1").reserved_quantity == 2
        assert uow.inventory.get_by_id("G1").reserved_quantity == 5

    def test_failed_reservation_keeps_original_order(self):
        uow, order = _setup()
        with pytest.raises(InsufficientStockError):
            UpdateOrderItemsHandler(uow).handle(order.id, [OrderItemSpec("W1", 11)], USER)
        assert uow.inventory.get_by_id("W1").reserved_quantity == 4
        [line] = uow.orders.get_by_id(order.id).items
        assert line.quantity.value == 4

    def test_kept_line_may_be_unpublished(self):
        uow, order = _setup()
        widget = uow.inventory.get_by_id("W1")
        widget.unpublish()
        uow.inventory.save(widget)

        dto = UpdateOrderItemsHandler(uow).handle(order.id, [OrderItemSpec("W1", 6)], USER)
        assert dto.items[0].quantity == 6
        assert uow.inventory.get_by_id("W1").reserved_quantity == 6

    def test_processed_order_cannot_be_edited(self):
        uow, order = _setup()
        _approve(uow, order)
        with pytest.raises(ValidationError, match="only be edited while pending"):
            UpdateOrderItemsHandler(uow).handle(order.id, [OrderItemSpec("W1", 1)], STAFF)

    def test_other_user_cannot_edit(self):
        uow, order = _setup()
        with pytest.raises(UnauthorizedError):
            UpdateOrderItemsHandler(uow).handle(order.id, [OrderItemSpec("W1", 1)], OTHER_USER)
