"""End-to-end stock walkthrough across reserve, approve and adjust."""

import pytest

from supplyhub.application.adjust_stock import AdjustStockHandler
from supplyhub.application.create_order import CreateOrderHandler
from supplyhub.application.dto import OrderItemSpec
from supplyhub.application.update_order_status import UpdateOrderStatusHandler
from supplyhub.domain.exceptions import InsufficientStockError
from tests.fakes import STAFF, USER, FakeUnitOfWork, published_item


class TestWidgetWalkthrough:
    """10 on hand, 0 reserved, restock threshold 3."""

    def test_reserve_approve_adjust_then_reject(self):
        uow = FakeUnitOfWork(items=[published_item("W1", "Widget", 10, min_stock_level=3)])

        def widget():
            return uow.inventory.get_by_id("W1")

        order = CreateOrderHandler(uow).handle(USER, [OrderItemSpec("W1", 4)])
        assert (widget().quantity, widget().reserved_quantity, widget().available_quantity) == (10, 4, 6)

        UpdateOrderStatusHandler(uow).handle(order.id, "approved", STAFF)
        assert (widget().quantity, widget().reserved_quantity) == (6, 0)
        assert widget().status.value == "in_stock"

        AdjustStockHandler(uow).handle(STAFF, "W1", 5, "out", "Shrinkage")
        assert widget().quantity == 1
        assert widget().status.value == "low_stock"

        with pytest.raises(InsufficientStockError):
            CreateOrderHandler(uow).handle(USER, [OrderItemSpec("W1", 2)])
        assert (widget().quantity, widget().reserved_quantity) == (1, 0)

        reasons = [m.reason for m in uow.movements.list_all()]
        assert reasons == ["Order confirmed - stock deducted", "Shrinkage"]
