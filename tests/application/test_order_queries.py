"""Tests for order listing and statistics."""

from supplyhub.application.create_order import CreateOrderHandler
from supplyhub.application.dto import OrderItemSpec
from supplyhub.application.show_order import (
    ListOrdersHandler,
    OrderStatsHandler,
    ShowOrderHandler,
)
from supplyhub.application.update_order_status import UpdateOrderStatusHandler
from tests.fakes import OTHER_USER, STAFF, USER, FakeUnitOfWork, published_item


def _setup() -> FakeUnitOfWork:
    uow = FakeUnitOfWork(items=[
        published_item("W1", "Widget", 50, "10.00", supplier_id="sup-1"),
        published_item("G1", "Gadget", 50, "2.50", supplier_id="sup-2"),
    ])
    create = CreateOrderHandler(uow)
    first = create.handle(USER, [OrderItemSpec("W1", 3)])
    create.handle(USER, [OrderItemSpec("G1", 2)])
    create.handle(OTHER_USER, [OrderItemSpec("W1", 1), OrderItemSpec("G1", 4)])
    UpdateOrderStatusHandler(uow).handle(first.id, "approved", STAFF)
    return uow


class TestListOrders:

    def test_filters(self):
        handler = ListOrdersHandler(_setup())
        assert len(handler.handle()) == 3
        assert len(handler.handle(requested_by="u1")) == 2
        assert [o.status for o in handler.handle(status="approved")] == ["approved"]
        assert len(handler.handle(supplier_id="sup-2")) == 2

    def test_show_by_number(self):
        uow = _setup()
        order = ListOrdersHandler(uow).handle(requested_by="u2")[0]
        assert ShowOrderHandler(uow).handle(order.order_number).id == order.id


class TestOrderStats:

    def test_counts_and_values(self):
        stats = OrderStatsHandler(_setup()).handle()
        assert stats.total == 3
        assert stats.by_status["pending"] == 2
        assert stats.by_status["approved"] == 1
        assert stats.by_status["cancelled"] == 0
        assert stats.total_value == "$55.00"
        assert stats.average_order_value == "$18.33"

    def test_scoped_to_requester(self):
        stats = OrderStatsHandler(_setup()).handle(requested_by="u1")
        assert stats.total == 2
        assert stats.total_value == "$35.00"

    def test_empty(self):
        stats = OrderStatsHandler(FakeUnitOfWork()).handle()
        assert stats.total == 0
        assert stats.average_order_value == "$0.00"
