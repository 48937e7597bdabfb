"""JSON-file-backed implementations of the inventory repositories."""

from __future__ import annotations

from supplyhub.domain.model.inventory import (
    InventoryItem,
    MovementType,
    StockMovement,
    StockStatus,
)
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.inventory_repository import (
    InventoryRepository,
    StockMovementRepository,
)
from supplyhub.infrastructure.persistence.json_collection import (
    JsonCollection,
    dump_datetime,
    dump_money,
    load_datetime,
    load_money,
)


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    # --- InventoryRepository interface ----------------------------------------

    def get_by_id(self, item_id: str) -> InventoryItem | None:
        for raw in self._collection.records():
            if raw["id"] == item_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryItem]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    def save(self, item: InventoryItem) -> None:
        if item.id is None:
            item.id = self._collection.next_id()
        self._collection.upsert(self._to_raw(item))

    def delete(self, item_id: str) -> None:
        self._collection.remove(lambda raw: raw["id"] == item_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: InventoryItem) -> dict:
        return {
            "id": item.id,
            "name": item.name,
            "sku": item.sku,
            "category": item.category,
            "description": item.description,
            "location": item.location,
            "quantity": item.quantity,
            "reserved_quantity": item.reserved_quantity,
            "min_stock_level": item.min_stock_level,
            "max_stock_level": item.max_stock_level,
            "unit_price": dump_money(item.unit_price),
            "sale_price": dump_money(item.sale_price),
            "supplier_id": item.supplier_id,
            "supplier_name": item.supplier_name,
            "product_id": item.product_id,
            "status": item.status.value,  # type: ignore[union-attr]
            "is_published": item.is_published,
            "details_saved": item.details_saved,
            "customer_description": item.customer_description,
            "tags": list(item.tags),
            "image_url": item.image_url,
            "image_path": item.image_path,
            "created_at": dump_datetime(item.created_at),
            "last_updated": dump_datetime(item.last_updated),
            "updated_by": item.updated_by,
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryItem:
        return InventoryItem(
            id=raw["id"],
            name=raw["name"],
            sku=raw.get("sku", ""),
            category=raw.get("category", ""),
            description=raw.get("description", ""),
            location=raw.get("location", ""),
            quantity=raw["quantity"],
            reserved_quantity=raw.get("reserved_quantity", 0),
            min_stock_level=raw.get("min_stock_level", 0),
            max_stock_level=raw.get("max_stock_level", 0),
            unit_price=load_money(raw.get("unit_price")) or Money.zero(),
            sale_price=load_money(raw.get("sale_price")),
            supplier_id=raw.get("supplier_id", ""),
            supplier_name=raw.get("supplier_name", ""),
            product_id=raw.get("product_id"),
            status=StockStatus(raw["status"]) if raw.get("status") else None,
            is_published=raw.get("is_published", False),
            details_saved=raw.get("details_saved", False),
            customer_description=raw.get("customer_description", ""),
            tags=raw.get("tags", []),
            image_url=raw.get("image_url"),
            image_path=raw.get("image_path"),
            created_at=load_datetime(raw["created_at"]),  # type: ignore[arg-type]
            last_updated=load_datetime(raw["last_updated"]),  # type: ignore[arg-type]
            updated_by=raw.get("updated_by", ""),
        )


class JsonStockMovementRepository(StockMovementRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    def add(self, movement: StockMovement) -> StockMovement:
        if movement.id is None:
            raw = self._to_raw(movement)
            raw["id"] = self._collection.next_id()
            movement = self._to_domain(raw)
        self._collection.upsert(self._to_raw(movement))
        return movement

    def list_all(self) -> list[StockMovement]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    def delete_for_item(self, item_id: str) -> int:
        return self._collection.remove(lambda raw: raw["item_id"] == item_id)

    @staticmethod
    def _to_raw(movement: StockMovement) -> dict:
        return {
            "id": movement.id,
            "item_id": movement.item_id,
            "item_name": movement.item_name,
            "type": movement.type.value,
            "quantity": movement.quantity,
            "reason": movement.reason,
            "performed_by": movement.performed_by,
            "timestamp": dump_datetime(movement.timestamp),
            "notes": movement.notes,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockMovement:
        return StockMovement(
            id=raw["id"],
            item_id=raw["item_id"],
            item_name=raw["item_name"],
            type=MovementType(raw["type"]),
            quantity=raw["quantity"],
            reason=raw["reason"],
            performed_by=raw["performed_by"],
            timestamp=load_datetime(raw["timestamp"]),  # type: ignore[arg-type]
            notes=raw.get("notes", ""),
        )
