"""Shipment aggregate: incoming deliveries and outgoing consignments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from supplyhub.domain.exceptions import InvalidTransitionError, ValidationError
from supplyhub.domain.model.value_objects import Money


class ShipmentType(Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


class ShipmentStatus(Enum):
    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    ARRIVING_TODAY = "arriving_today"
    READY_TO_SHIP = "ready_to_ship"
    PROCESSING = "processing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


FINAL_STATUSES = frozenset({ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED})

INITIAL_STATUS = {
    ShipmentType.INCOMING: ShipmentStatus.PENDING,
    ShipmentType.OUTGOING: ShipmentStatus.PROCESSING,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Shipment:
    """A tracked delivery into or out of the warehouse.

    ``items`` is a package count, not a link to inventory rows. Delivered
    and cancelled shipments are final.
    """

    id: str | None
    type: ShipmentType
    tracking_number: str
    items: int = 0
    value: Money = field(default_factory=Money.zero)
    supplier: str = ""
    destination: str = ""
    status: ShipmentStatus | None = None
    eta: datetime | None = None
    actual_delivery: datetime | None = None
    requested_by: str = ""
    notes: str = ""
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if self.status is None:
            self.status = INITIAL_STATUS[self.type]

    @staticmethod
    def create(
        type: ShipmentType,
        tracking_number: str,
        items: int,
        value: Money,
        requested_by: str,
        supplier: str = "",
        destination: str = "",
        eta: datetime | None = None,
        notes: str = "",
    ) -> Shipment:
        shipment = Shipment(
            id=None,
            type=type,
            tracking_number=tracking_number,
            items=items,
            value=value,
            supplier=supplier.strip(),
            destination=destination.strip(),
            eta=eta,
            requested_by=requested_by,
            notes=notes,
        )
        shipment._validate()
        return shipment

    @property
    def is_final(self) -> bool:
        return self.status in FINAL_STATUSES

    def update_details(
        self,
        tracking_number: str | None = None,
        items: int | None = None,
        value: Money | None = None,
        supplier: str | None = None,
        destination: str | None = None,
        eta: datetime | None = None,
        notes: str | None = None,
    ) -> None:
        """Change any subset of the descriptive fields."""
        if tracking_number is not None:
            self.tracking_number = tracking_number
        if items is not None:
            self.items = items
        if value is not None:
            self.value = value
        if supplier is not None:
            self.supplier = supplier.strip()
        if destination is not None:
            self.destination = destination.strip()
        if eta is not None:
            self.eta = eta
        if notes is not None:
            self.notes = notes
        self._validate()
        self.updated_at = _now()

    def set_status(self, status: ShipmentStatus) -> ShipmentStatus:
        """Move to ``status`` and return the previous one."""
        if self.is_final:
            raise InvalidTransitionError(
                f"Shipment {self.tracking_number} is already {self.status.value}"  # type: ignore[union-attr]
            )
        previous = self.status
        self.status = status
        self.updated_at = _now()
        if status == ShipmentStatus.DELIVERED:
            self.actual_delivery = self.updated_at
        return previous  # type: ignore[return-value]

    def _validate(self) -> None:
        self.tracking_number = self.tracking_number.strip()
        if not self.tracking_number:
            raise ValidationError("Tracking number is required")
        if self.items < 0:
            raise ValidationError("Item count cannot be negative")
