"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. The ``*_to_dto``
functions below are the only place that maps aggregates to DTOs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from supplyhub.domain.model.display_request import DisplayRequest
from supplyhub.domain.model.inventory import InventoryItem, StockMovement
from supplyhub.domain.model.order import Order
from supplyhub.domain.model.quantity_request import QuantityRequest
from supplyhub.domain.model.shipment import Shipment

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: which inventory item to order and how many units."""

    item_id: str
    quantity: int


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: str
    order_number: str
    requested_by: str
    requester_name: str
    status: str
    items: list[OrderLineItemDTO]
    total: str
    notes: str
    cancellation_reason: str | None
    created_at: str


@dataclass(frozen=True)
class OrderStatsDTO:
    total: int
    by_status: dict[str, int]
    total_value: str
    average_order_value: str


@dataclass(frozen=True)
class InventoryItemDTO:
    id: str
    name: str
    sku: str
    category: str
    location: str
    quantity: int
    reserved_quantity: int
    available_quantity: int
    min_stock_level: int
    max_stock_level: int
    status: str
    unit_price: str
    price: str  # effective, customer-facing
    is_published: bool
    details_saved: bool
    supplier_id: str
    supplier_name: str
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StockMovementDTO:
    id: str
    item_id: str
    item_name: str
    type: str
    quantity: int
    reason: str
    performed_by: str
    timestamp: str
    notes: str


@dataclass(frozen=True)
class QuantityRequestDTO:
    id: str
    product_id: str
    product_name: str
    supplier_id: str
    requested_by: str
    requested_quantity: int
    approved_quantity: int | None
    status: str
    notes: str | None
    rejection_reason: str | None
    requested_at: str


@dataclass(frozen=True)
class DisplayRequestDTO:
    id: str
    product_id: str
    product_name: str
    supplier_id: str
    product_price: str
    status: str
    quantity_request_id: str | None
    rejection_reason: str | None
    requested_at: str


@dataclass(frozen=True)
class ShipmentDTO:
    id: str
    type: str
    tracking_number: str
    status: str
    items: int
    value: str
    supplier: str
    destination: str
    eta: str | None
    actual_delivery: str | None
    notes: str
    created_at: str


@dataclass(frozen=True)
class ShipmentStatsDTO:
    total: int
    incoming: int
    outgoing: int
    pending: int
    in_transit: int
    total_value: str


# --- Mapping ------------------------------------------------------------------

def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        requested_by=order.requested_by,
        requester_name=order.requester_name,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.total_price),
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        notes=order.notes,
        cancellation_reason=order.cancellation_reason,
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
    )


def inventory_to_dto(item: InventoryItem) -> InventoryItemDTO:
    return InventoryItemDTO(
        id=item.id,  # type: ignore[arg-type]
        name=item.name,
        sku=item.sku,
        category=item.category,
        location=item.location,
        quantity=item.quantity,
        reserved_quantity=item.reserved_quantity,
        available_quantity=item.available_quantity,
        min_stock_level=item.min_stock_level,
        max_stock_level=item.max_stock_level,
        status=item.status.value,  # type: ignore[union-attr]
        unit_price=str(item.unit_price),
        price=str(item.effective_price),
        is_published=item.is_published,
        details_saved=item.details_saved,
        supplier_id=item.supplier_id,
        supplier_name=item.supplier_name,
        tags=list(item.tags),
    )


def movement_to_dto(movement: StockMovement) -> StockMovementDTO:
    return StockMovementDTO(
        id=movement.id,  # type: ignore[arg-type]
        item_id=movement.item_id,
        item_name=movement.item_name,
        type=movement.type.value,
        quantity=movement.quantity,
        reason=movement.reason,
        performed_by=movement.performed_by,
        timestamp=movement.timestamp.strftime(_TIMESTAMP_FORMAT),
        notes=movement.notes,
    )


def quantity_request_to_dto(request: QuantityRequest) -> QuantityRequestDTO:
    return QuantityRequestDTO(
        id=request.id,  # type: ignore[arg-type]
        product_id=request.product_id,
        product_name=request.product_name,
        supplier_id=request.supplier_id,
        requested_by=request.requested_by,
        requested_quantity=request.requested_quantity,
        approved_quantity=request.approved_quantity,
        status=request.status.value,
        notes=request.notes,
        rejection_reason=request.rejection_reason,
        requested_at=request.requested_at.strftime(_TIMESTAMP_FORMAT),
    )


def display_request_to_dto(request: DisplayRequest) -> DisplayRequestDTO:
    return DisplayRequestDTO(
        id=request.id,  # type: ignore[arg-type]
        product_id=request.product_id,
        product_name=request.product_name,
        supplier_id=request.supplier_id,
        product_price=str(request.product_price),
        status=request.status.value,
        quantity_request_id=request.quantity_request_id,
        rejection_reason=request.rejection_reason,
        requested_at=request.requested_at.strftime(_TIMESTAMP_FORMAT),
    )


def shipment_to_dto(shipment: Shipment) -> ShipmentDTO:
    def _fmt(value):
        return value.strftime(_TIMESTAMP_FORMAT) if value is not None else None

    return ShipmentDTO(
        id=shipment.id,  # type: ignore[arg-type]
        type=shipment.type.value,
        tracking_number=shipment.tracking_number,
        status=shipment.status.value,  # type: ignore[union-attr]
        items=shipment.items,
        value=str(shipment.value),
        supplier=shipment.supplier,
        destination=shipment.destination,
        eta=_fmt(shipment.eta),
        actual_delivery=_fmt(shipment.actual_delivery),
        notes=shipment.notes,
        created_at=shipment.created_at.strftime(_TIMESTAMP_FORMAT),
    )
