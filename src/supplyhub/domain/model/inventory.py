"""InventoryItem aggregate: tracks stock, reservations and catalog state.

Each inventory row knows how many units are on hand, how many of those
are held against open orders, and whether it is visible in the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from supplyhub.domain.exceptions import (
    InsufficientStockError,
    ReservationInvariantError,
    ValidationError,
)
from supplyhub.domain.model.value_objects import Money


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class MovementType(Enum):
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"


def derive_stock_status(quantity: int, min_stock_level: int) -> StockStatus:
    """Status as a pure function of on-hand quantity and restock threshold."""
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= min_stock_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StockMovement:
    """Immutable audit record of a quantity change."""

    id: str | None
    item_id: str
    item_name: str
    type: MovementType
    quantity: int
    reason: str
    performed_by: str
    timestamp: datetime = field(default_factory=_now)
    notes: str = ""


@dataclass
class InventoryItem:
    """Aggregate root for inventory tracking.

    Invariants:
    - ``0 <= reserved_quantity <= quantity``
    - ``status`` matches ``derive_stock_status`` after every quantity
      change, unless the item has been discontinued
    - ``is_published`` implies ``details_saved`` and a positive price
    """

    id: str | None
    name: str
    sku: str = ""
    category: str = ""
    description: str = ""
    location: str = ""
    quantity: int = 0
    reserved_quantity: int = 0
    min_stock_level: int = 0
    max_stock_level: int = 0
    unit_price: Money = field(default_factory=Money.zero)
    sale_price: Money | None = None
    supplier_id: str = ""
    supplier_name: str = ""
    product_id: str | None = None
    status: StockStatus | None = None
    is_published: bool = False
    details_saved: bool = False
    customer_description: str = ""
    tags: list[str] = field(default_factory=list)
    image_url: str | None = None
    image_path: str | None = None
    created_at: datetime = field(default_factory=_now)
    last_updated: datetime = field(default_factory=_now)
    updated_by: str = ""

    def __post_init__(self) -> None:
        if self.status is None:
            self.status = derive_stock_status(self.quantity, self.min_stock_level)

    # --- Computed properties --------------------------------------------------

    @property
    def available_quantity(self) -> int:
        return self.quantity - self.reserved_quantity

    @property
    def effective_price(self) -> Money:
        """Customer-facing price: the sale price override if one is set."""
        return self.sale_price if self.sale_price is not None else self.unit_price

    @property
    def is_discontinued(self) -> bool:
        return self.status == StockStatus.DISCONTINUED

    # --- Quantity mutations ---------------------------------------------------

    def adjust(self, movement_type: MovementType, quantity: int) -> int:
        """Apply a stock movement and return the new on-hand quantity.

        ``in``/``out`` are relative; ``adjustment`` sets the absolute count.
        """
        if movement_type == MovementType.ADJUSTMENT:
            if quantity < 0:
                raise ValidationError("Adjusted quantity cannot be negative")
            new_quantity = quantity
        else:
            if quantity <= 0:
                raise ValidationError("Movement quantity must be positive")
            if movement_type == MovementType.IN:
                new_quantity = self.quantity + quantity
            else:
                new_quantity = self.quantity - quantity

        if new_quantity < 0:
            raise InsufficientStockError(
                f"Insufficient stock for {self.name} "
                f"(need {quantity}, have {self.quantity} on hand)"
            )
        if new_quantity < self.reserved_quantity:
            raise InsufficientStockError(
                f"Cannot reduce {self.name} to {new_quantity} "
                f"({self.reserved_quantity} units are reserved for open orders)"
            )

        self._set_quantity(new_quantity)
        return new_quantity

    def reserve(self, quantity: int) -> None:
        """Hold stock for a pending order without reducing ``quantity``."""
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_quantity:
            raise InsufficientStockError(
                f"Insufficient stock for {self.name} "
                f"(need {quantity}, have {self.available_quantity} available)"
            )
        self.reserved_quantity += quantity

    def release(self, quantity: int) -> None:
        """Drop a previously made reservation."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        if quantity > self.reserved_quantity:
            raise ReservationInvariantError(
                f"Cannot release {quantity} of {self.name} "
                f"(only {self.reserved_quantity} currently reserved)"
            )
        self.reserved_quantity -= quantity

    def confirm_deduction(self, quantity: int) -> None:
        """Turn a reservation into a permanent deduction.

        Both ``quantity`` and ``reserved_quantity`` decrease by the same
        amount, so ``available_quantity`` is unchanged.
        """
        if quantity <= 0:
            raise ValidationError("Deduction quantity must be positive")
        if quantity > self.reserved_quantity:
            raise ReservationInvariantError(
                f"Cannot deduct {quantity} of {self.name} "
                f"(only {self.reserved_quantity} currently reserved)"
            )
        self.reserved_quantity -= quantity
        self._set_quantity(self.quantity - quantity)

    # --- Status ---------------------------------------------------------------

    def refresh_status(self) -> bool:
        """Recompute the derived status; return True if it changed."""
        if self.is_discontinued:
            return False
        new_status = derive_stock_status(self.quantity, self.min_stock_level)
        changed = new_status != self.status
        self.status = new_status
        return changed

    def discontinue(self) -> None:
        if self.is_discontinued:
            raise ValidationError(f"{self.name} is already discontinued")
        self.status = StockStatus.DISCONTINUED
        self.is_published = False

    def reinstate(self) -> None:
        if not self.is_discontinued:
            raise ValidationError(f"{self.name} is not discontinued")
        self.status = derive_stock_status(self.quantity, self.min_stock_level)

    # --- Manual edits ---------------------------------------------------------

    def update_details(
        self,
        name: str | None = None,
        sku: str | None = None,
        category: str | None = None,
        description: str | None = None,
        location: str | None = None,
        unit_price: Money | None = None,
        min_stock_level: int | None = None,
        max_stock_level: int | None = None,
        supplier_name: str | None = None,
    ) -> bool:
        """Apply staff edits to the descriptive fields and stock thresholds.

        Quantities are not editable here; they only move through stock
        movements. Returns True if the derived status changed.
        """
        new_name = self.name if name is None else name.strip()
        new_min = self.min_stock_level if min_stock_level is None else min_stock_level
        new_max = self.max_stock_level if max_stock_level is None else max_stock_level
        new_price = self.unit_price if unit_price is None else unit_price

        if not new_name:
            raise ValidationError("Item name is required")
        if new_min < 0 or new_max < 0:
            raise ValidationError("Stock levels cannot be negative")
        if new_max and new_max < new_min:
            raise ValidationError("Maximum stock level cannot be below the minimum")
        if self.is_published and self.sale_price is None and not new_price.is_positive:
            raise ValidationError(f"{new_name} is published and needs a positive price")

        self.name = new_name
        self.min_stock_level = new_min
        self.max_stock_level = new_max
        self.unit_price = new_price
        if sku is not None:
            self.sku = sku.strip()
        if category is not None:
            self.category = category.strip()
        if description is not None:
            self.description = description
        if location is not None:
            self.location = location.strip()
        if supplier_name is not None:
            self.supplier_name = supplier_name.strip()
        return self.refresh_status()

    # --- Catalog curation -----------------------------------------------------

    def curate(
        self,
        sale_price: Money | None,
        customer_description: str,
        tags: list[str] | None = None,
    ) -> None:
        """Save the customer-facing details required before publishing."""
        self.sale_price = sale_price
        self.customer_description = customer_description.strip()
        self.tags = [t.strip() for t in tags or [] if t.strip()]
        self.details_saved = True

    def publish(self) -> None:
        if not self.details_saved:
            raise ValidationError(
                f"{self.name} cannot be published before its catalog details are saved"
            )
        if not self.effective_price.is_positive:
            raise ValidationError(
                f"{self.name} cannot be published without a positive price"
            )
        if self.is_discontinued:
            raise ValidationError(f"{self.name} is discontinued")
        self.is_published = True

    def unpublish(self) -> None:
        self.is_published = False

    def touch(self, actor_id: str) -> None:
        self.last_updated = _now()
        self.updated_by = actor_id

    # --- Internal helpers -----------------------------------------------------

    def _set_quantity(self, new_quantity: int) -> None:
        self.quantity = new_quantity
        self.refresh_status()
