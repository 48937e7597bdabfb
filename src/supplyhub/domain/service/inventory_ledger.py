"""Domain service: Inventory Ledger.

Every change to an item's on-hand or reserved quantity goes through here,
so each quantity write is paired with its movement record and status
recomputation. The ledger does not commit; callers run it inside a unit
of work so the item update and the movement land together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from supplyhub.domain.exceptions import EntityNotFoundError
from supplyhub.domain.model.inventory import (
    InventoryItem,
    MovementType,
    StockMovement,
    StockStatus,
)
from supplyhub.domain.model.order import Order
from supplyhub.domain.repository.inventory_repository import (
    InventoryRepository,
    StockMovementRepository,
)

logger = logging.getLogger(__name__)

RESTORATION_REASON = "Order cancellation - stock restoration"
DEDUCTION_REASON = "Order confirmed - stock deducted"


class InventoryLedger:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        movement_repo: StockMovementRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._movement_repo = movement_repo

    # --- Single-item operations ----------------------------------------------

    def get_item(self, item_id: str) -> InventoryItem:
        item = self._inventory_repo.get_by_id(item_id)
        if item is None:
            raise EntityNotFoundError(f"Inventory item '{item_id}' not found")
        return item

    def register_item(self, item: InventoryItem, actor_id: str) -> InventoryItem:
        """Insert a new row and record its opening stock."""
        item.refresh_status()
        item.touch(actor_id)
        self._inventory_repo.save(item)
        self._record(
            item, MovementType.IN, item.quantity, "Initial stock", actor_id,
            "Item created with initial stock",
        )
        logger.info("Registered inventory item %s (%s) with %d units", item.id, item.name, item.quantity)
        return item

    def adjust_stock(
        self,
        item_id: str,
        quantity: int,
        movement_type: MovementType,
        reason: str,
        actor_id: str,
        notes: str | None = None,
    ) -> InventoryItem:
        item = self.get_item(item_id)
        before = item.quantity
        item.adjust(movement_type, quantity)
        item.touch(actor_id)
        self._inventory_repo.save(item)
        self._record(item, movement_type, abs(quantity), reason, actor_id, notes or "")
        logger.info(
            "Stock %s on %s: %d -> %d (%s)",
            movement_type.value, item_id, before, item.quantity, reason,
        )
        return item

    def reserve_stock(self, item_id: str, quantity: int, actor_id: str) -> InventoryItem:
        item = self.get_item(item_id)
        item.reserve(quantity)
        item.touch(actor_id)
        self._inventory_repo.save(item)
        logger.info("Reserved %d of %s (reserved now %d)", quantity, item_id, item.reserved_quantity)
        return item

    def release_reservation(self, item_id: str, quantity: int, actor_id: str) -> InventoryItem:
        item = self.get_item(item_id)
        item.release(quantity)
        item.touch(actor_id)
        self._inventory_repo.save(item)
        logger.info("Released %d of %s (reserved now %d)", quantity, item_id, item.reserved_quantity)
        return item

    def confirm_stock_deduction(self, item_id: str, quantity: int, actor_id: str) -> InventoryItem:
        item = self.get_item(item_id)
        item.confirm_deduction(quantity)
        item.touch(actor_id)
        self._inventory_repo.save(item)
        self._record(
            item, MovementType.OUT, quantity, DEDUCTION_REASON, actor_id,
            "Confirmed order deduction",
        )
        logger.info("Deducted %d of %s (on hand now %d)", quantity, item_id, item.quantity)
        return item

    # --- Order-level operations -----------------------------------------------

    def reserve_for_order(self, order: Order, actor_id: str) -> None:
        """Reserve every line item, or none of them.

        If line *k* fails, the reservations already made for lines 1..k-1
        are released before the error propagates. This holds even when
        the caller's unit of work is not rolled back.
        """
        reserved: list[tuple[str, int]] = []
        try:
            for line in order.items:
                self.reserve_stock(line.product_id, line.quantity.value, actor_id)
                reserved.append((line.product_id, line.quantity.value))
        except Exception:
            for item_id, qty in reversed(reserved):
                self.release_reservation(item_id, qty, actor_id)
            logger.warning(
                "Reservation for order %s failed after %d of %d lines; released",
                order.order_number, len(reserved), len(order.items),
            )
            raise

    def release_for_order(self, order: Order, actor_id: str) -> None:
        for line in order.items:
            self.release_reservation(line.product_id, line.quantity.value, actor_id)

    def confirm_for_order(self, order: Order, actor_id: str) -> None:
        for line in order.items:
            self.confirm_stock_deduction(line.product_id, line.quantity.value, actor_id)

    def restore_for_order(self, order: Order, actor_id: str) -> None:
        for line in order.items:
            self.adjust_stock(
                line.product_id, line.quantity.value, MovementType.IN,
                RESTORATION_REASON, actor_id,
                notes=f"Order {order.order_number} cancelled",
            )

    # --- Lookups --------------------------------------------------------------

    def find_existing_item(
        self, name: str, supplier_id: str, sku: str | None = None
    ) -> InventoryItem | None:
        """Find the row a supplier restock should land on.

        Name match is exact but case-insensitive and scoped to the supplier.
        When ``sku`` is given, a candidate that carries a SKU must match it.
        """
        wanted_name = name.strip().lower()
        wanted_sku = (sku or "").strip().lower()
        for item in self._inventory_repo.find_by_supplier(supplier_id):
            if item.name.strip().lower() != wanted_name:
                continue
            candidate_sku = item.sku.strip().lower()
            if wanted_sku and candidate_sku and candidate_sku != wanted_sku:
                continue
            return item
        return None

    def refresh_statuses(self) -> int:
        """Recompute every derived status; return how many changed."""
        changed = 0
        for item in self._inventory_repo.list_all():
            if item.refresh_status():
                self._inventory_repo.save(item)
                changed += 1
        if changed:
            logger.info("Updated status for %d inventory items", changed)
        return changed

    def low_stock_items(self) -> list[InventoryItem]:
        return [
            i for i in self._inventory_repo.list_all()
            if i.status in (StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK)
        ]

    def movements(self, item_id: str | None = None) -> list[StockMovement]:
        if item_id is None:
            records: Iterable[StockMovement] = self._movement_repo.list_all()
        else:
            records = self._movement_repo.list_for_item(item_id)
        # Reversed first so movements sharing a timestamp stay newest first.
        return sorted(reversed(list(records)), key=lambda m: m.timestamp, reverse=True)

    # --- Internal helpers -----------------------------------------------------

    def _record(
        self,
        item: InventoryItem,
        movement_type: MovementType,
        quantity: int,
        reason: str,
        actor_id: str,
        notes: str,
    ) -> StockMovement:
        return self._movement_repo.add(
            StockMovement(
                id=None,
                item_id=item.id,  # type: ignore[arg-type]
                item_name=item.name,
                type=movement_type,
                quantity=quantity,
                reason=reason,
                performed_by=actor_id,
                notes=notes,
            )
        )
