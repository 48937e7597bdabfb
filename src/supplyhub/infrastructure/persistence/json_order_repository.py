"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from supplyhub.domain.model.order import Order, OrderLineItem, OrderStatus
from supplyhub.domain.model.value_objects import Quantity
from supplyhub.domain.repository.order_repository import OrderRepository
from supplyhub.infrastructure.persistence.json_collection import (
    JsonCollection,
    dump_datetime,
    dump_money,
    load_datetime,
    load_money,
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._collection.records():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self._collection.next_id()
        self._collection.upsert(self._to_raw(order))

    def delete(self, order_id: str) -> None:
        self._collection.remove(lambda raw: raw["id"] == order_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "requested_by": order.requested_by,
            "requester_name": order.requester_name,
            "status": order.status.value,
            "notes": order.notes,
            "cancellation_reason": order.cancellation_reason,
            "approved_by": order.approved_by,
            "total_amount": dump_money(order.total_amount),
            "created_at": dump_datetime(order.created_at),
            "updated_at": dump_datetime(order.updated_at),
            "status_changed_at": {
                status: dump_datetime(at) for status, at in order.status_changed_at.items()
            },
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": dump_money(item.unit_price),
                    "supplier": item.supplier,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=load_money(i["unit_price"]),  # type: ignore[arg-type]
                supplier=i.get("supplier", ""),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            requested_by=raw["requested_by"],
            requester_name=raw.get("requester_name", ""),
            items=items,
            status=OrderStatus(raw["status"]),
            notes=raw.get("notes", ""),
            cancellation_reason=raw.get("cancellation_reason"),
            approved_by=raw.get("approved_by"),
            created_at=load_datetime(raw["created_at"]),  # type: ignore[arg-type]
            updated_at=load_datetime(raw["updated_at"]),  # type: ignore[arg-type]
            status_changed_at={
                status: load_datetime(at)  # type: ignore[misc]
                for status, at in raw.get("status_changed_at", {}).items()
            },
        )
