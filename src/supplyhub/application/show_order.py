"""Application services: order queries."""

from __future__ import annotations

from supplyhub.application.dto import OrderDTO, OrderStatsDTO, order_to_dto
from supplyhub.application.update_order_status import parse_order_status
from supplyhub.domain.model.order import Order, OrderStatus
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork


def filter_orders(
    orders: list[Order],
    status: OrderStatus | str | None = None,
    requested_by: str | None = None,
    supplier_id: str | None = None,
) -> list[Order]:
    """Apply the optional filters and sort newest first."""
    if status is not None:
        wanted = parse_order_status(status)
        orders = [o for o in orders if o.status == wanted]
    if requested_by is not None:
        orders = [o for o in orders if o.requested_by == requested_by]
    if supplier_id is not None:
        orders = [o for o in orders if any(i.supplier == supplier_id for i in o.items)]
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


class ShowOrderHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: str) -> OrderDTO:
        with self._uow:
            order = self._uow.orders.require(order_id)
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        status: OrderStatus | str | None = None,
        requested_by: str | None = None,
        supplier_id: str | None = None,
    ) -> list[OrderDTO]:
        with self._uow:
            orders = self._uow.orders.list_all()
        return [order_to_dto(o) for o in filter_orders(orders, status, requested_by, supplier_id)]


class OrderStatsHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self, requested_by: str | None = None) -> OrderStatsDTO:
        with self._uow:
            orders = filter_orders(self._uow.orders.list_all(), requested_by=requested_by)

        by_status = {status.value: 0 for status in OrderStatus}
        total_value = Money.zero()
        for order in orders:
            by_status[order.status.value] += 1
            total_value = total_value + order.total_amount
        average = total_value / len(orders) if orders else Money.zero()

        return OrderStatsDTO(
            total=len(orders),
            by_status=by_status,
            total_value=str(total_value),
            average_order_value=str(average),
        )
