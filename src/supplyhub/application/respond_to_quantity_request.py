"""Application service: Respond To Quantity Request use case.

The supplier (or an admin) answers a pending request. An approval turns
into stock in the same unit of work as the status change, so a request
is never marked approved without its inventory.
"""

from __future__ import annotations

import logging

from supplyhub.application.dto import QuantityRequestDTO, quantity_request_to_dto
from supplyhub.application.events import (
    INVENTORY,
    NOTIFICATIONS,
    QUANTITY_REQUESTS,
    EventBus,
)
from supplyhub.application.notifications import NotificationService
from supplyhub.domain.exceptions import DomainException, UnauthorizedError, ValidationError
from supplyhub.domain.model.actor import Actor, Role
from supplyhub.domain.model.notification import NotificationType
from supplyhub.domain.model.quantity_request import QuantityRequest, QuantityRequestStatus
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger
from supplyhub.domain.service.request_workflow import (
    InventoryDefaults,
    materialize_approved_request,
)

logger = logging.getLogger(__name__)

_RESPONSE_TITLES = {
    QuantityRequestStatus.APPROVED_FULL: ("Quantity Request Approved", NotificationType.SUCCESS),
    QuantityRequestStatus.APPROVED_PARTIAL: (
        "Quantity Request Partially Approved", NotificationType.INFO,
    ),
    QuantityRequestStatus.REJECTED: ("Quantity Request Rejected", NotificationType.WARNING),
}


def _parse_response(value: QuantityRequestStatus | str) -> QuantityRequestStatus:
    if isinstance(value, QuantityRequestStatus):
        return value
    try:
        return QuantityRequestStatus(value.lower())
    except ValueError:
        raise ValidationError(f"Unknown response '{value}'") from None


def _response_message(request: QuantityRequest) -> str:
    if request.status == QuantityRequestStatus.REJECTED:
        message = f"Your quantity request for {request.product_name} was rejected."
        if request.rejection_reason:
            message += f" Reason: {request.rejection_reason}"
        return message
    return (
        f"{request.supplier_name or 'The supplier'} approved {request.approved_quantity} "
        f"of {request.requested_quantity} units of {request.product_name}."
    )


class RespondToQuantityRequestHandler:

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        events: EventBus | None = None,
        notifier: NotificationService | None = None,
        defaults: InventoryDefaults | None = None,
    ) -> None:
        self._uow = uow
        self._events = events
        self._notifier = notifier or NotificationService()
        self._defaults = defaults or InventoryDefaults()

    def handle(
        self,
        request_id: str,
        status: QuantityRequestStatus | str,
        actor: Actor,
        approved_quantity: int | None = None,
        rejection_reason: str | None = None,
        notes: str | None = None,
    ) -> QuantityRequestDTO:
        item_id = None
        try:
            response = _parse_response(status)
            with self._uow:
                request = self._uow.quantity_requests.require(request_id)
                is_own_supplier = (
                    actor.role == Role.SUPPLIER and actor.user_id == request.supplier_id
                )
                if not (is_own_supplier or actor.is_admin):
                    raise UnauthorizedError(
                        "Only the request's supplier or an admin can respond to it"
                    )

                request.respond(response, approved_quantity, rejection_reason, notes)
                self._uow.quantity_requests.save(request)

                if request.is_approved and request.approved_quantity:
                    item = materialize_approved_request(
                        InventoryLedger(self._uow.inventory, self._uow.movements),
                        self._uow.products,
                        self._uow.display_requests,
                        request,
                        actor.user_id,
                        self._defaults,
                    )
                    item_id = item.id

                title, kind = _RESPONSE_TITLES[request.status]
                self._notifier.notify(
                    self._uow.notifications,
                    request.requested_by,
                    title,
                    _response_message(request),
                    kind,
                    request_id=request.id,
                    approved_quantity=request.approved_quantity,
                    inventory_item_id=item_id,
                )
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Response to quantity request %s rejected: %s", request_id, exc)
            raise

        logger.info(
            "Quantity request %s answered %s by %s", request_id, request.status.value, actor.user_id
        )
        if self._events is not None:
            self._events.publish(QUANTITY_REQUESTS, request_id=request_id)
            if item_id is not None:
                self._events.publish(INVENTORY, item_id=item_id)
            self._events.publish(NOTIFICATIONS)
        return quantity_request_to_dto(request)
