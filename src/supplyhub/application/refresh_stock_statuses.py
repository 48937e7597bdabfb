"""Application service: recompute every item's derived stock status."""

from __future__ import annotations

from supplyhub.application.events import INVENTORY, EventBus
from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.domain.service.inventory_ledger import InventoryLedger


class RefreshStockStatusesHandler:

    def __init__(self, uow: AbstractUnitOfWork, events: EventBus | None = None) -> None:
        self._uow = uow
        self._events = events

    def handle(self) -> int:
        with self._uow:
            changed = InventoryLedger(self._uow.inventory, self._uow.movements).refresh_statuses()
            self._uow.commit()
        if changed and self._events is not None:
            self._events.publish(INVENTORY, refreshed=changed)
        return changed
