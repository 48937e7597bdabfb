"""Domain service: the supplier request pipeline.

Two rules live here:

* **Merge** - a (product, supplier) pair has at most one pending quantity
  request. A second submission is folded into the pending row.
* **Materialize** - an approved quantity turns into stock, either by
  restocking the matching inventory row or by registering a new one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from supplyhub.domain.model.inventory import InventoryItem, MovementType
from supplyhub.domain.model.quantity_request import QuantityRequest
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.product_repository import ProductRepository
from supplyhub.domain.repository.request_repository import (
    DisplayRequestRepository,
    QuantityRequestRepository,
)
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventoryDefaults:
    """Values used for inventory rows created from approved requests."""

    location: str = "Main Warehouse"
    category: str = "Uncategorized"
    min_stock_ratio: float = 0.1
    max_stock_multiplier: int = 2

    def min_stock_for(self, quantity: int) -> int:
        return max(1, math.floor(quantity * self.min_stock_ratio))

    def max_stock_for(self, quantity: int) -> int:
        return quantity * self.max_stock_multiplier


@dataclass(frozen=True)
class Submission:
    """Outcome of submitting a quantity request."""

    request: QuantityRequest
    merged: bool = False
    original_quantity: int | None = None
    added_quantity: int | None = None
    original_requester: str | None = None


def submit_quantity_request(
    repo: QuantityRequestRepository, candidate: QuantityRequest
) -> Submission:
    """Save ``candidate``, or merge it into the pending row for its pair."""
    pending = repo.find_pending(candidate.product_id, candidate.supplier_id)
    if not pending:
        repo.save(candidate)
        logger.info(
            "Created quantity request %s for %s (%d units)",
            candidate.id, candidate.product_name, candidate.requested_quantity,
        )
        return Submission(request=candidate)

    existing = pending[0]
    original = existing.requested_quantity
    existing.merge(candidate.requested_quantity)
    if candidate.display_request_id and not existing.display_request_id:
        existing.display_request_id = candidate.display_request_id
    repo.save(existing)
    logger.info(
        "Merged quantity request into %s for %s: %d + %d = %d",
        existing.id, existing.product_name, original,
        candidate.requested_quantity, existing.requested_quantity,
    )
    return Submission(
        request=existing,
        merged=True,
        original_quantity=original,
        added_quantity=candidate.requested_quantity,
        original_requester=existing.requested_by,
    )


def materialize_approved_request(
    ledger: InventoryLedger,
    products: ProductRepository,
    display_requests: DisplayRequestRepository,
    request: QuantityRequest,
    actor_id: str,
    defaults: InventoryDefaults | None = None,
) -> InventoryItem:
    """Turn an approved request into stock.

    Descriptive details come from the supplier's product if it is still in
    the catalog, otherwise from the display request that spawned the
    request, otherwise from ``defaults``.
    """
    defaults = defaults or InventoryDefaults()
    quantity = request.approved_quantity or 0
    if quantity <= 0:
        raise ValueError("Only approved requests with a positive quantity can be materialized")

    sku, category, description, price, image_url = _resolve_details(
        products, display_requests, request, defaults
    )

    existing = ledger.find_existing_item(request.product_name, request.supplier_id, sku)
    if existing is not None:
        return ledger.adjust_stock(
            existing.id,  # type: ignore[arg-type]
            quantity,
            MovementType.IN,
            f"Stock replenishment from approved quantity request (Request ID: {request.id})",
            actor_id,
            notes=f"Approved by {actor_id}",
        )

    item = InventoryItem(
        id=None,
        name=request.product_name,
        sku=sku,
        category=category,
        description=description,
        location=defaults.location,
        quantity=quantity,
        min_stock_level=defaults.min_stock_for(quantity),
        max_stock_level=defaults.max_stock_for(quantity),
        unit_price=price,
        supplier_id=request.supplier_id,
        supplier_name=request.supplier_name,
        product_id=request.product_id,
        is_published=False,
        image_url=image_url,
    )
    return ledger.register_item(item, actor_id)


def _resolve_details(
    products: ProductRepository,
    display_requests: DisplayRequestRepository,
    request: QuantityRequest,
    defaults: InventoryDefaults,
) -> tuple[str, str, str, Money, str | None]:
    product = products.get_by_id(request.product_id)
    if product is not None:
        return (
            product.sku or request.product_id,
            product.category or defaults.category,
            product.description,
            product.price,
            product.image_url,
        )

    display = None
    if request.display_request_id:
        display = display_requests.get_by_id(request.display_request_id)
    if display is not None:
        return (
            display.product_sku or request.product_id,
            display.product_category or defaults.category,
            display.product_description,
            display.product_price,
            display.product_image_url,
        )

    return request.product_id, defaults.category, "", Money.zero(), None
