"""JSON-file-backed implementations of the request repositories."""

from __future__ import annotations

from supplyhub.domain.model.display_request import DisplayRequest, DisplayRequestStatus
from supplyhub.domain.model.quantity_request import QuantityRequest, QuantityRequestStatus
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.request_repository import (
    DisplayRequestRepository,
    QuantityRequestRepository,
)
from supplyhub.infrastructure.persistence.json_collection import (
    JsonCollection,
    dump_datetime,
    dump_money,
    load_datetime,
    load_money,
)


class JsonQuantityRequestRepository(QuantityRequestRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    def get_by_id(self, request_id: str) -> QuantityRequest | None:
        for raw in self._collection.records():
            if raw["id"] == request_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[QuantityRequest]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    def save(self, request: QuantityRequest) -> None:
        if request.id is None:
            request.id = self._collection.next_id()
        self._collection.upsert(self._to_raw(request))

    def delete(self, request_id: str) -> None:
        self._collection.remove(lambda raw: raw["id"] == request_id)

    @staticmethod
    def _to_raw(request: QuantityRequest) -> dict:
        return {
            "id": request.id,
            "product_id": request.product_id,
            "product_name": request.product_name,
            "supplier_id": request.supplier_id,
            "supplier_name": request.supplier_name,
            "supplier_email": request.supplier_email,
            "requested_by": request.requested_by,
            "requester_name": request.requester_name,
            "requested_quantity": request.requested_quantity,
            "approved_quantity": request.approved_quantity,
            "status": request.status.value,
            "rejection_reason": request.rejection_reason,
            "notes": request.notes,
            "display_request_id": request.display_request_id,
            "requested_at": dump_datetime(request.requested_at),
            "responded_at": dump_datetime(request.responded_at),
            "updated_at": dump_datetime(request.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> QuantityRequest:
        return QuantityRequest(
            id=raw["id"],
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            supplier_id=raw["supplier_id"],
            supplier_name=raw.get("supplier_name", ""),
            supplier_email=raw.get("supplier_email", ""),
            requested_by=raw["requested_by"],
            requester_name=raw.get("requester_name", ""),
            requested_quantity=raw["requested_quantity"],
            approved_quantity=raw.get("approved_quantity"),
            status=QuantityRequestStatus(raw["status"]),
            rejection_reason=raw.get("rejection_reason"),
            notes=raw.get("notes"),
            display_request_id=raw.get("display_request_id"),
            requested_at=load_datetime(raw["requested_at"]),  # type: ignore[arg-type]
            responded_at=load_datetime(raw.get("responded_at")),
            updated_at=load_datetime(raw["updated_at"]),  # type: ignore[arg-type]
        )


class JsonDisplayRequestRepository(DisplayRequestRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    def get_by_id(self, request_id: str) -> DisplayRequest | None:
        for raw in self._collection.records():
            if raw["id"] == request_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[DisplayRequest]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    def save(self, request: DisplayRequest) -> None:
        if request.id is None:
            request.id = self._collection.next_id()
        self._collection.upsert(self._to_raw(request))

    def delete(self, request_id: str) -> None:
        self._collection.remove(lambda raw: raw["id"] == request_id)

    @staticmethod
    def _to_raw(request: DisplayRequest) -> dict:
        return {
            "id": request.id,
            "product_id": request.product_id,
            "product_name": request.product_name,
            "product_description": request.product_description,
            "product_sku": request.product_sku,
            "product_price": dump_money(request.product_price),
            "product_category": request.product_category,
            "product_image_url": request.product_image_url,
            "supplier_id": request.supplier_id,
            "supplier_name": request.supplier_name,
            "supplier_email": request.supplier_email,
            "status": request.status.value,
            "reviewed_by": request.reviewed_by,
            "reviewer_name": request.reviewer_name,
            "rejection_reason": request.rejection_reason,
            "quantity_request_id": request.quantity_request_id,
            "requested_at": dump_datetime(request.requested_at),
            "reviewed_at": dump_datetime(request.reviewed_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> DisplayRequest:
        return DisplayRequest(
            id=raw["id"],
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            product_description=raw.get("product_description", ""),
            product_sku=raw.get("product_sku", ""),
            product_price=load_money(raw.get("product_price")) or Money.zero(),
            product_category=raw.get("product_category", ""),
            product_image_url=raw.get("product_image_url"),
            supplier_id=raw["supplier_id"],
            supplier_name=raw.get("supplier_name", ""),
            supplier_email=raw.get("supplier_email", ""),
            status=DisplayRequestStatus(raw["status"]),
            reviewed_by=raw.get("reviewed_by"),
            reviewer_name=raw.get("reviewer_name"),
            rejection_reason=raw.get("rejection_reason"),
            quantity_request_id=raw.get("quantity_request_id"),
            requested_at=load_datetime(raw["requested_at"]),  # type: ignore[arg-type]
            reviewed_at=load_datetime(raw.get("reviewed_at")),
        )
