"""Application services: display requests.

A supplier proposes one of their products for the warehouse catalog.
Staff accept or reject the proposal; accepting asks the supplier for a
first unit through the usual quantity-request merge rule.
"""

from __future__ import annotations

import logging

from supplyhub.application.authorization import require_role, require_staff
from supplyhub.application.create_quantity_request import email_supplier, submit_and_notify
from supplyhub.application.dto import DisplayRequestDTO, display_request_to_dto
from supplyhub.application.events import (
    DISPLAY_REQUESTS,
    NOTIFICATIONS,
    QUANTITY_REQUESTS,
    EventBus,
)
from supplyhub.application.notifications import NotificationService
from supplyhub.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from supplyhub.domain.model.actor import Actor, Role
from supplyhub.domain.model.display_request import (
    DEFAULT_REQUESTED_QUANTITY,
    DisplayRequest,
)
from supplyhub.domain.model.notification import NotificationType
from supplyhub.domain.model.quantity_request import QuantityRequest
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


class SubmitDisplayRequestHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(self, actor: Actor, product_id: str) -> DisplayRequestDTO:
        try:
            require_role(actor, Role.SUPPLIER, "submit display requests")
            with self._uow:
                product = self._uow.products.get_by_id(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product '{product_id}' not found")
                if product.supplier_id != actor.user_id:
                    raise UnauthorizedError("You can only propose your own products")
                if any(
                    r.is_pending and r.product_id == product_id
                    for r in self._uow.display_requests.list_all()
                ):
                    raise ValidationError(
                        f"A display request for {product.name} is already pending"
                    )

                request = DisplayRequest(
                    id=None,
                    product_id=product.id,
                    product_name=product.name,
                    supplier_id=actor.user_id,
                    product_price=product.price,
                    product_description=product.description,
                    product_sku=product.sku,
                    product_category=product.category,
                    product_image_url=product.image_url,
                    supplier_name=product.supplier_name or actor.name,
                    supplier_email=actor.email or "",
                )
                self._uow.display_requests.save(request)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Display request for %s rejected: %s", product_id, exc)
            raise

        logger.info("Display request %s submitted for %s", request.id, product_id)
        if self._events is not None:
            self._events.publish(DISPLAY_REQUESTS, request_id=request.id)
        return display_request_to_dto(request)


class ReviewDisplayRequestHandler:

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
        request_id: str,
        accept: bool,
        actor: Actor,
        rejection_reason: str | None = None,
    ) -> DisplayRequestDTO:
        submission = None
        try:
            require_staff(actor, "review display requests")
            with self._uow:
                request = self._uow.display_requests.require(request_id)
                if accept:
                    request.accept(actor.user_id, actor.name)
                    submission = submit_and_notify(
                        self._uow,
                        self._notifier,
                        QuantityRequest(
                            id=None,
                            product_id=request.product_id,
                            product_name=request.product_name,
                            supplier_id=request.supplier_id,
                            supplier_name=request.supplier_name,
                            supplier_email=request.supplier_email,
                            requested_by=actor.user_id,
                            requester_name=actor.name,
                            requested_quantity=DEFAULT_REQUESTED_QUANTITY,
                            display_request_id=request.id,
                        ),
                    )
                    request.link_quantity_request(submission.request.id)  # type: ignore[arg-type]
                else:
                    request.reject(actor.user_id, actor.name, rejection_reason)

                self._uow.display_requests.save(request)
                self._notifier.notify(
                    self._uow.notifications,
                    request.supplier_id,
                    f"Display Request {request.status.value.capitalize()}",
                    self._message(request),
                    NotificationType.SUCCESS if accept else NotificationType.WARNING,
                    display_request_id=request.id,
                    quantity_request_id=request.quantity_request_id,
                )
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Review of display request %s rejected: %s", request_id, exc)
            raise

        logger.info(
            "Display request %s %s by %s", request_id, request.status.value, actor.user_id
        )
        if submission is not None:
            email_supplier(self._notifier, submission)
        if self._events is not None:
            self._events.publish(DISPLAY_REQUESTS, request_id=request_id)
            if submission is not None:
                self._events.publish(QUANTITY_REQUESTS, request_id=submission.request.id)
            self._events.publish(NOTIFICATIONS)
        return display_request_to_dto(request)

    @staticmethod
    def _message(request: DisplayRequest) -> str:
        if request.rejection_reason:
            return (
                f"Your display request for {request.product_name} was "
                f"{request.status.value}. Reason: {request.rejection_reason}"
            )
        return f"Your display request for {request.product_name} was {request.status.value}."


class DeleteDisplayRequestHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(self, request_id: str, actor: Actor) -> None:
        try:
            with self._uow:
                request = self._uow.display_requests.require(request_id)
                if request.supplier_id != actor.user_id:
                    raise UnauthorizedError("You can only delete your own requests")
                if not request.is_pending:
                    raise ValidationError("Cannot delete request that has already been reviewed")
                self._uow.display_requests.delete(request_id)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Deleting display request %s rejected: %s", request_id, exc)
            raise

        if self._events is not None:
            self._events.publish(DISPLAY_REQUESTS, request_id=request_id, deleted=True)


class ListDisplayRequestsHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(
        self, supplier_id: str | None = None, pending_only: bool = False
    ) -> list[DisplayRequestDTO]:
        with self._uow:
            requests = self._uow.display_requests.list_all()
        selected = [
            r for r in requests
            if (supplier_id is None or r.supplier_id == supplier_id)
            and (not pending_only or r.is_pending)
        ]
        selected.sort(key=lambda r: r.requested_at, reverse=True)
        return [display_request_to_dto(r) for r in selected]
