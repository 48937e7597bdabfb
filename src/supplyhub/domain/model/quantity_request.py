"""QuantityRequest aggregate: a warehouse ask for more stock from a supplier."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from supplyhub.domain.exceptions import ValidationError


class QuantityRequestStatus(Enum):
    PENDING = "pending"
    APPROVED_FULL = "approved_full"
    APPROVED_PARTIAL = "approved_partial"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


RESPONSE_STATUSES = frozenset({
    QuantityRequestStatus.APPROVED_FULL,
    QuantityRequestStatus.APPROVED_PARTIAL,
    QuantityRequestStatus.REJECTED,
})


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class QuantityRequest:
    """Aggregate root for quantity requests.

    At most one *pending* request may exist per (product_id, supplier_id);
    the workflow service enforces that by merging into the existing row.
    """

    id: str | None
    product_id: str
    product_name: str
    supplier_id: str
    requested_by: str
    requested_quantity: int
    supplier_name: str = ""
    supplier_email: str = ""
    requester_name: str = ""
    status: QuantityRequestStatus = QuantityRequestStatus.PENDING
    approved_quantity: int | None = None
    rejection_reason: str | None = None
    notes: str | None = None
    display_request_id: str | None = None
    requested_at: datetime = field(default_factory=_now)
    responded_at: datetime | None = None
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if self.status == QuantityRequestStatus.PENDING and self.requested_quantity <= 0:
            raise ValidationError("Requested quantity must be positive")

    @property
    def is_pending(self) -> bool:
        return self.status == QuantityRequestStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status in (
            QuantityRequestStatus.APPROVED_FULL,
            QuantityRequestStatus.APPROVED_PARTIAL,
        )

    def merge(self, additional_quantity: int) -> int:
        """Fold another request's quantity into this pending one."""
        if not self.is_pending:
            raise ValidationError("Only pending requests can be combined")
        if additional_quantity <= 0:
            raise ValidationError("Requested quantity must be positive")
        original = self.requested_quantity
        self.requested_quantity = original + additional_quantity
        self.notes = (
            f"Combined request: Original {original} + New {additional_quantity} "
            f"= {self.requested_quantity} units"
        )
        self.updated_at = _now()
        return self.requested_quantity

    def respond(
        self,
        status: QuantityRequestStatus,
        approved_quantity: int | None = None,
        rejection_reason: str | None = None,
        notes: str | None = None,
    ) -> None:
        """Record the supplier's answer."""
        if not self.is_pending:
            raise ValidationError(
                f"Quantity request {self.id} has already been answered ({self.status.value})"
            )
        if status not in RESPONSE_STATUSES:
            raise ValidationError(f"'{status.value}' is not a valid response")

        if status == QuantityRequestStatus.APPROVED_FULL:
            if approved_quantity is None:
                approved_quantity = self.requested_quantity
            if approved_quantity != self.requested_quantity:
                raise ValidationError(
                    f"A full approval must cover all {self.requested_quantity} requested units"
                )
        elif status == QuantityRequestStatus.APPROVED_PARTIAL:
            if approved_quantity is None or not 0 < approved_quantity < self.requested_quantity:
                raise ValidationError(
                    "A partial approval must be between 1 and "
                    f"{self.requested_quantity - 1} units"
                )
        else:
            approved_quantity = None

        self.status = status
        self.approved_quantity = approved_quantity
        self.rejection_reason = rejection_reason if status == QuantityRequestStatus.REJECTED else None
        if notes:
            self.notes = notes
        self.responded_at = self.updated_at = _now()

    def cancel(self) -> None:
        if not self.is_pending:
            raise ValidationError(
                f"Only pending requests can be cancelled (status is {self.status.value})"
            )
        self.status = QuantityRequestStatus.CANCELLED
        self.updated_at = _now()
