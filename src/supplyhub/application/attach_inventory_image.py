"""Application service: attach a product image to an inventory item."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from supplyhub.application.authorization import require_staff
from supplyhub.application.dto import InventoryItemDTO, inventory_to_dto
from supplyhub.application.events import INVENTORY, EventBus
from supplyhub.domain.exceptions import DomainException, ValidationError
from supplyhub.domain.model.actor import Actor
from supplyhub.domain.ports import ObjectStore
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


class AttachInventoryImageHandler:

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        object_store: ObjectStore,
        events: EventBus | None = None,
    ) -> None:
        self._uow = uow
        self._object_store = object_store
        self._events = events

    def handle(self, actor: Actor, item_id: str, filename: str, data: bytes) -> InventoryItemDTO:
        try:
            require_staff(actor, "change item images")
            extension = PurePosixPath(filename).suffix.lower()
            if extension not in ALLOWED_EXTENSIONS:
                raise ValidationError(f"Unsupported image type '{extension or filename}'")
            if not data:
                raise ValidationError("Image file is empty")

            with self._uow:
                item = InventoryLedger(self._uow.inventory, self._uow.movements).get_item(item_id)
                previous_path = item.image_path
                path = f"inventory/{item_id}/image{extension}"
                item.image_url = self._object_store.upload(data, path)
                item.image_path = path
                item.touch(actor.user_id)
                self._uow.inventory.save(item)
                self._uow.commit()
        except DomainException as exc:
            logger.warning("Image upload for %s rejected: %s", item_id, exc)
            raise

        if previous_path and previous_path != path:
            try:
                self._object_store.delete(previous_path)
            except Exception as exc:
                logger.warning("Could not delete old image %s: %s", previous_path, exc)

        if self._events is not None:
            self._events.publish(INVENTORY, item_id=item_id)
        return inventory_to_dto(item)
