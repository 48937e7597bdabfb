"""JSON-file-backed implementation of ShipmentRepository."""

from __future__ import annotations

from supplyhub.domain.model.shipment import Shipment, ShipmentStatus, ShipmentType
from supplyhub.domain.repository.shipment_repository import ShipmentRepository
from supplyhub.infrastructure.persistence.json_collection import (
    JsonCollection,
    dump_datetime,
    dump_money,
    load_datetime,
    load_money,
)


class JsonShipmentRepository(ShipmentRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    def get_by_id(self, shipment_id: str) -> Shipment | None:
        for raw in self._collection.records():
            if raw["id"] == shipment_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Shipment]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    def save(self, shipment: Shipment) -> None:
        if shipment.id is None:
            shipment.id = self._collection.next_id()
        self._collection.upsert(self._to_raw(shipment))

    def delete(self, shipment_id: str) -> None:
        self._collection.remove(lambda raw: raw["id"] == shipment_id)

    @staticmethod
    def _to_raw(shipment: Shipment) -> dict:
        return {
            "id": shipment.id,
            "type": shipment.type.value,
            "tracking_number": shipment.tracking_number,
            "items": shipment.items,
            "value": dump_money(shipment.value),
            "supplier": shipment.supplier,
            "destination": shipment.destination,
            "status": shipment.status.value,  # type: ignore[union-attr]
            "eta": dump_datetime(shipment.eta),
            "actual_delivery": dump_datetime(shipment.actual_delivery),
            "requested_by": shipment.requested_by,
            "notes": shipment.notes,
            "created_at": dump_datetime(shipment.created_at),
            "updated_at": dump_datetime(shipment.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Shipment:
        return Shipment(
            id=raw["id"],
            type=ShipmentType(raw["type"]),
            tracking_number=raw["tracking_number"],
            items=raw.get("items", 0),
            value=load_money(raw["value"]),  # type: ignore[arg-type]
            supplier=raw.get("supplier", ""),
            destination=raw.get("destination", ""),
            status=ShipmentStatus(raw["status"]),
            eta=load_datetime(raw.get("eta")),
            actual_delivery=load_datetime(raw.get("actual_delivery")),
            requested_by=raw.get("requested_by", ""),
            notes=raw.get("notes", ""),
            created_at=load_datetime(raw["created_at"]),  # type: ignore[arg-type]
            updated_at=load_datetime(raw["updated_at"]),  # type: ignore[arg-type]
        )
