"""Application services: shipment tracking for warehouse staff."""

from __future__ import annotations

import logging
from datetime import datetime

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import ShipmentDTO, ShipmentStatsDTO, shipment_to_dto
from supplyhub.application.events import SHIPMENTS, EventBus
from supplyhub.domain.exceptions import DomainException, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.model.shipment import Shipment, ShipmentStatus, ShipmentType
from supplyhub.domain.model.value_objects import Money
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def parse_shipment_type(value: ShipmentType | str) -> ShipmentType:
    if isinstance(value, ShipmentType):
        return value
    try:
        return ShipmentType(value.lower())
    except ValueError:
        raise ValidationError(f"Unknown shipment type '{value}'") from None


def parse_shipment_status(value: ShipmentStatus | str) -> ShipmentStatus:
    if isinstance(value, ShipmentStatus):
        return value
    try:
        return ShipmentStatus(value.lower())
    except ValueError:
        raise ValidationError(f"Unknown shipment status '{value}'") from None


def filter_shipments(
    shipments: list[Shipment], type: ShipmentType | str | None = None
) -> list[Shipment]:
    if type is not None:
        wanted = parse_shipment_type(type)
        shipments = [s for s in shipments if s.type == wanted]
    return sorted(shipments, key=lambda s: s.created_at, reverse=True)


class _ShipmentHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def _published(self, shipment: Shipment, **extra) -> ShipmentDTO:
        if self._events is not None:
            self._events.publish(SHIPMENTS, shipment_id=shipment.id, **extra)
        return shipment_to_dto(shipment)


class CreateShipmentHandler(_ShipmentHandler):
    """Incoming shipments start ``pending``, outgoing ones ``processing``."""

    def handle(
        self,
        actor: Actor,
        type: ShipmentType | str,
        tracking_number: str,
        items: int,
        value: str,
        supplier: str = "",
        destination: str = "",
        eta: datetime | None = None,
        notes: str = "",
    ) -> ShipmentDTO:
        try:
            require_staff(actor, "record shipments")
            shipment = Shipment.create(
                parse_shipment_type(type),
                tracking_number,
                items,
                Money.of(value),
                requested_by=actor.user_id,
                supplier=supplier,
                destination=destination,
                eta=eta,
                notes=notes,
            )
            with self._uow:
                self._uow.shipments.save(shipment)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Recording shipment %s rejected: %s", tracking_number, exc)
            raise

        logger.info(
            "Recorded %s shipment %s (%s)",
            shipment.type.value, shipment.tracking_number, shipment.id,
        )
        return self._published(shipment)


class UpdateShipmentHandler(_ShipmentHandler):

    def handle(
        self,
        actor: Actor,
        shipment_id: str,
        tracking_number: str | None = None,
        items: int | None = None,
        value: str | None = None,
        supplier: str | None = None,
        destination: str | None = None,
        eta: datetime | None = None,
        notes: str | None = None,
    ) -> ShipmentDTO:
        try:
            require_staff(actor, "update shipments")
            with self._uow:
                shipment = self._uow.shipments.require(shipment_id)
                shipment.update_details(
                    tracking_number=tracking_number,
                    items=items,
                    value=Money.of(value) if value is not None else None,
                    supplier=supplier,
                    destination=destination,
                    eta=eta,
                    notes=notes,
                )
                self._uow.shipments.save(shipment)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Updating shipment %s rejected: %s", shipment_id, exc)
            raise

        return self._published(shipment)


class UpdateShipmentStatusHandler(_ShipmentHandler):

    def handle(
        self, actor: Actor, shipment_id: str, status: ShipmentStatus | str
    ) -> ShipmentDTO:
        try:
            require_staff(actor, "update shipments")
            target = parse_shipment_status(status)
            with self._uow:
                shipment = self._uow.shipments.require(shipment_id)
                previous = shipment.set_status(target)
                self._uow.shipments.save(shipment)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Status update of shipment %s rejected: %s", shipment_id, exc)
            raise

        logger.info(
            "Shipment %s moved %s -> %s by %s",
            shipment.tracking_number, previous.value, target.value, actor.user_id,
        )
        return self._published(shipment, status=target.value)


class DeleteShipmentHandler(_ShipmentHandler):

    def handle(self, actor: Actor, shipment_id: str) -> None:
        try:
            require_staff(actor, "delete shipments")
            with self._uow:
                shipment = self._uow.shipments.require(shipment_id)
                self._uow.shipments.delete(shipment_id)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Deleting shipment %s rejected: %s", shipment_id, exc)
            raise

        logger.info("Deleted shipment %s by %s", shipment.tracking_number, actor.user_id)
        self._published(shipment, deleted=True)


class ListShipmentsHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self, type: ShipmentType | str | None = None) -> list[ShipmentDTO]:
        with self._uow:
            shipments = self._uow.shipments.list_all()
        return [shipment_to_dto(s) for s in filter_shipments(shipments, type)]


class ShipmentStatsHandler:

    def __init__(self, uow: AbstractUnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> ShipmentStatsDTO:
        with self._uow:
            shipments = self._uow.shipments.list_all()

        total_value = Money.zero()
        for shipment in shipments:
            total_value = total_value + shipment.value
        return ShipmentStatsDTO(
            total=len(shipments),
            incoming=sum(1 for s in shipments if s.type == ShipmentType.INCOMING),
            outgoing=sum(1 for s in shipments if s.type == ShipmentType.OUTGOING),
            pending=sum(1 for s in shipments if s.status == ShipmentStatus.PENDING),
            in_transit=sum(1 for s in shipments if s.status == ShipmentStatus.IN_TRANSIT),
            total_value=str(total_value),
        )
