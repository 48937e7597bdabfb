"""Product aggregate: an item in a supplier's own catalog.

Products are what suppliers offer; InventoryItems are what the warehouse
actually holds. Materializing an approved quantity request copies the
descriptive fields from here.
"""

from __future__ import annotations

from dataclasses import dataclass

from supplyhub.domain.exceptions import ValidationError
from supplyhub.domain.model.value_objects import Money


@dataclass
class Product:

    id: str
    name: str
    price: Money
    supplier_id: str
    supplier_name: str = ""
    sku: str = ""
    category: str = ""
    description: str = ""
    image_url: str | None = None

    def update_price(self, new_price: Money) -> None:
        """Change the catalog price.

        Existing orders keep the price they captured at creation time.
        """
        if not new_price.is_positive:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price
