"""Application service: Create Quantity Request use case.

Staff ask a supplier for more units of a product. If the pair already
has a pending request, the new quantity is folded into it and both
requesters hear about the merge.
"""

from __future__ import annotations

import logging

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import QuantityRequestDTO, quantity_request_to_dto
from supplyhub.application.events import NOTIFICATIONS, QUANTITY_REQUESTS, EventBus
from supplyhub.application.notifications import NotificationService
from supplyhub.domain.exceptions import DomainException, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.quantity_request import QuantityRequest
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.request_workflow import Submission, submit_quantity_request

logger = logging.getLogger(__name__)

MERGED_TITLE = "Quantity Request Combined"


def submit_and_notify(
    uow: AbstractUnitOfWork,
    notifier: NotificationService,
    candidate: QuantityRequest,
) -> Submission:
    """Submit through the merge rule and stage the matching notifications."""
    result = submit_quantity_request(uow.quantity_requests, candidate)
    request = result.request

    if result.merged:
        total = request.requested_quantity
        notifier.notify(
            uow.notifications,
            result.original_requester,  # type: ignore[arg-type]
            MERGED_TITLE,
            f"Your quantity request for {request.product_name} was combined with "
            f"another request. Total quantity: {total} units",
            request_id=request.id,
            original_quantity=result.original_quantity,
            added_quantity=result.added_quantity,
            total_quantity=total,
        )
        notifier.notify(
            uow.notifications,
            candidate.requested_by,
            MERGED_TITLE,
            f"Your quantity request for {request.product_name} was combined with "
            f"an existing request. Total quantity: {total} units",
            request_id=request.id,
            your_quantity=result.added_quantity,
            existing_quantity=result.original_quantity,
            total_quantity=total,
        )
    else:
        notifier.notify(
            uow.notifications,
            request.supplier_id,
            "New Quantity Request",
            f"{request.requester_name or 'Warehouse'} has requested "
            f"{request.requested_quantity} units of {request.product_name}",
            request_id=request.id,
            requested_quantity=request.requested_quantity,
        )
    return result


def email_supplier(notifier: NotificationService, result: Submission) -> None:
    request = result.request
    notifier.email(
        request.supplier_email,
        "quantity_request_combined" if result.merged else "quantity_request_created",
        {
            "request_id": request.id,
            "product_name": request.product_name,
            "requested_quantity": request.requested_quantity,
            "requester_name": request.requester_name,
        },
    )


class CreateQuantityRequestHandler:

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        events: EventBus | None = None,
        notifier: NotificationService | None = None,
    ) -> None:
        self._uow = uow
        self._events = events
        self._notifier = notifier or NotificationService()

    def handle(
        self,
        actor: Actor,
        product_id: str,
        quantity: int,
        supplier_id: str | None = None,
        product_name: str | None = None,
        supplier_name: str = "",
        supplier_email: str = "",
        notes: str | None = None,
    ) -> tuple[QuantityRequestDTO, bool]:
        """Return the resulting request and whether it was merged."""
        try:
            require_staff(actor, "request stock from suppliers")
            with self._uow:
                product = self._uow.products.get_by_id(product_id)
                if product is not None:
                    product_name = product_name or product.name
                    supplier_id = supplier_id or product.supplier_id
                    supplier_name = supplier_name or product.supplier_name
                if not product_name or not supplier_id:
                    raise ValidationError(
                        f"Product '{product_id}' is not in the catalog; "
                        "a product name and supplier are required"
                    )

                candidate = QuantityRequest(
                    id=None,
                    product_id=product_id,
                    product_name=product_name,
                    supplier_id=supplier_id,
                    supplier_name=supplier_name,
                    supplier_email=supplier_email,
                    requested_by=actor.user_id,
                    requester_name=actor.name,
                    requested_quantity=quantity,
                    notes=notes,
                )
                result = submit_and_notify(self._uow, self._notifier, candidate)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Quantity request for %s rejected: %s", product_id, exc)
            raise

        email_supplier(self._notifier, result)
        if self._events is not None:
            self._events.publish(QUANTITY_REQUESTS, request_id=result.request.id)
            self._events.publish(NOTIFICATIONS)
        return quantity_request_to_dto(result.request), result.merged
