"""Application services: withdraw a quantity request."""

from __future__ import annotations

import logging

from supplyhub.application.events import QUANTITY_REQUESTS, EventBus
from supplyhub.domain.exceptions import DomainException, UnauthorizedError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


class CancelQuantityRequestHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(self, request_id: str, actor: Actor) -> None:
        try:
            with self._uow:
                request = self._uow.quantity_requests.require(request_id)
                if request.requested_by != actor.user_id and not actor.is_staff:
                    raise UnauthorizedError("You can only cancel your own requests")
                request.cancel()
                self._uow.quantity_requests.save(request)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Cancelling quantity request %s rejected: %s", request_id, exc)
            raise

        logger.info("Quantity request %s cancelled by %s", request_id, actor.user_id)
        if self._events is not None:
            self._events.publish(QUANTITY_REQUESTS, request_id=request_id)


class DeleteQuantityRequestHandler:
    """Only the requester may delete; a pending request is cancelled first."""

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(self, request_id: str, actor: Actor) -> None:
        try:
            with self._uow:
                request = self._uow.quantity_requests.require(request_id)
                if request.requested_by != actor.user_id:
                    raise UnauthorizedError("You can only delete your own requests")
                if request.is_pending:
                    request.cancel()
                    self._uow.quantity_requests.save(request)
                self._uow.quantity_requests.delete(request_id)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Deleting quantity request %s rejected: %s", request_id, exc)
            raise

        logger.info("Quantity request %s deleted by %s", request_id, actor.user_id)
        if self._events is not None:
            self._events.publish(QUANTITY_REQUESTS, request_id=request_id, deleted=True)
