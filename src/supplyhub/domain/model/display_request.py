"""DisplayRequest aggregate: a supplier proposal to list a product."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from supplyhub.domain.exceptions import ValidationError
from supplyhub.domain.model.value_objects import Money


class DisplayRequestStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Accepting a display request asks the supplier for this many units.
DEFAULT_REQUESTED_QUANTITY = 1


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DisplayRequest:
    id: str | None
    product_id: str
    product_name: str
    supplier_id: str
    product_price: Money = field(default_factory=Money.zero)
    product_description: str = ""
    product_sku: str = ""
    product_category: str = ""
    product_image_url: str | None = None
    supplier_name: str = ""
    supplier_email: str = ""
    status: DisplayRequestStatus = DisplayRequestStatus.PENDING
    reviewed_by: str | None = None
    reviewer_name: str | None = None
    rejection_reason: str | None = None
    quantity_request_id: str | None = None
    requested_at: datetime = field(default_factory=_now)
    reviewed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == DisplayRequestStatus.PENDING

    def accept(self, reviewer_id: str, reviewer_name: str) -> None:
        self._review(DisplayRequestStatus.ACCEPTED, reviewer_id, reviewer_name)

    def reject(self, reviewer_id: str, reviewer_name: str, reason: str | None) -> None:
        self._review(DisplayRequestStatus.REJECTED, reviewer_id, reviewer_name)
        self.rejection_reason = reason

    def link_quantity_request(self, quantity_request_id: str) -> None:
        self.quantity_request_id = quantity_request_id

    def _review(self, status: DisplayRequestStatus, reviewer_id: str, reviewer_name: str) -> None:
        if not self.is_pending:
            raise ValidationError(
                f"Display request {self.id} has already been reviewed ({self.status.value})"
            )
        self.status = status
        self.reviewed_by = reviewer_id
        self.reviewer_name = reviewer_name
        self.reviewed_at = _now()
