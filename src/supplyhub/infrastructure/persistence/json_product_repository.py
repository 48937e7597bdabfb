"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from supplyhub.domain.model.product import Product
from supplyhub.domain.repository.product_repository import ProductRepository
from supplyhub.infrastructure.persistence.json_collection import (
    JsonCollection,
    dump_money,
    load_money,
)


class JsonProductRepository(ProductRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._collection.records():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    def save(self, product: Product) -> None:
        self._collection.upsert(self._to_raw(product))

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": dump_money(product.price),
            "supplier_id": product.supplier_id,
            "supplier_name": product.supplier_name,
            "sku": product.sku,
            "category": product.category,
            "description": product.description,
            "image_url": product.image_url,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            price=load_money(raw["price"]),  # type: ignore[arg-type]
            supplier_id=raw["supplier_id"],
            supplier_name=raw.get("supplier_name", ""),
            sku=raw.get("sku", ""),
            category=raw.get("category", ""),
            description=raw.get("description", ""),
            image_url=raw.get("image_url"),
        )
