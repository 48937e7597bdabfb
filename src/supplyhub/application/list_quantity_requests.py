"""Application services: quantity request queries."""

from __future__ import annotations

from supplyhub.application.dto import QuantityRequestDTO, quantity_request_to_dto
from supplyhub.domain.model.quantity_request import QuantityRequest
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork


def filter_quantity_requests(
    requests: list[QuantityRequest],
    supplier_id: str | None = None,
    requested_by: str | None = None,
    pending_only: bool = False,
) -> list[QuantityRequest]:
    """Apply the optional filters and sort newest first."""
    return sorted(
        (
            r for r in requests
            if (supplier_id is None or r.supplier_id == supplier_id)
            and (requested_by is None or r.requested_by == requested_by)
            and (not pending_only or r.is_pending)
        ),
        key=lambda r: r.requested_at,
        reverse=True,
    )


def has_active_quantity_requests(
    uow: AbstractUnitOfWork, product_id: str, supplier_id: str | None = None
) -> bool:
    with uow:
        return bool(uow.quantity_requests.find_pending(product_id, supplier_id))


class ListQuantityRequestsHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        supplier_id: str | None = None,
        requested_by: str | None = None,
        pending_only: bool = False,
    ) -> list[QuantityRequestDTO]:
        with self._uow:
            requests = self._uow.quantity_requests.list_all()
        return [
            quantity_request_to_dto(r)
            for r in filter_quantity_requests(requests, supplier_id, requested_by, pending_only)
        ]
