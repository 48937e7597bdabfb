"""Unit of work over a directory of JSON files, one per collection.

Entering loads every collection into memory. ``commit()`` writes each
changed file to a ``.tmp`` sibling, then records the staged file names
in a journal, and only then replaces the real files. The journal is the
commit point:

- a failure while staging leaves the data directory untouched and the
  stray ``.tmp`` files are discarded on the next load;
- a failure while replacing leaves the journal behind, and the next
  load finishes the replacement before reading anything.

Rolling back simply drops the in-memory state.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from supplyhub.domain.repository.unit_of_work import AbstractUnitOfWork
from supplyhub.infrastructure.persistence.json_collection import (
    IdSequences,
    JsonCollection,
    JsonDocument,
)
from supplyhub.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
    JsonStockMovementRepository,
)
from supplyhub.infrastructure.persistence.json_notification_repository import (
    JsonNotificationRepository,
)
from supplyhub.infrastructure.persistence.json_order_repository import JsonOrderRepository
from supplyhub.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from supplyhub.infrastructure.persistence.json_request_repository import (
    JsonDisplayRequestRepository,
    JsonQuantityRequestRepository,
)
from supplyhub.infrastructure.persistence.json_shipment_repository import (
    JsonShipmentRepository,
)

logger = logging.getLogger(__name__)

COLLECTION_FILES = {
    "inventory": "inventory.json",
    "movements": "stock_movements.json",
    "orders": "orders.json",
    "quantity_requests": "quantity_requests.json",
    "display_requests": "display_requests.json",
    "products": "products.json",
    "notifications": "notifications.json",
    "shipments": "shipments.json",
}
SEQUENCES_FILE = "sequences.json"
JOURNAL_FILE = "commit.journal"


class JsonUnitOfWork(AbstractUnitOfWork):

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self._documents: list[JsonDocument] = []

    @property
    def journal_path(self) -> Path:
        return self.data_dir / JOURNAL_FILE

    def _begin(self) -> None:
        self.recover()
        sequences = IdSequences(self.data_dir / SEQUENCES_FILE)
        collections = {
            name: JsonCollection(self.data_dir / filename, name, sequences)
            for name, filename in COLLECTION_FILES.items()
        }
        self._documents = [*collections.values(), sequences]
        for document in self._documents:
            document.load()

        self.inventory = JsonInventoryRepository(collections["inventory"])
        self.movements = JsonStockMovementRepository(collections["movements"])
        self.orders = JsonOrderRepository(collections["orders"])
        self.quantity_requests = JsonQuantityRequestRepository(collections["quantity_requests"])
        self.display_requests = JsonDisplayRequestRepository(collections["display_requests"])
        self.products = JsonProductRepository(collections["products"])
        self.notifications = JsonNotificationRepository(collections["notifications"])
        self.shipments = JsonShipmentRepository(collections["shipments"])

    def _commit(self) -> None:
        dirty = [d for d in self._documents if d.dirty]
        if not dirty:
            return
        try:
            for document in dirty:
                document.stage()
            self._write_journal(dirty)
        except OSError:
            for document in dirty:
                document.discard_staged()
            logger.error("Could not stage changes under %s", self.data_dir, exc_info=True)
            raise

        try:
            for document in dirty:
                document.publish_staged()
        except OSError:
            logger.error(
                "Commit under %s interrupted; it will be completed on the next load",
                self.data_dir, exc_info=True,
            )
            raise
        self.journal_path.unlink()
        logger.debug("Committed %s", ", ".join(d.file_path.name for d in dirty))

    def rollback(self) -> None:
        for document in self._documents:
            if document.dirty:
                document.load()

    def recover(self) -> None:
        """Finish a commit that passed its journal, or drop one that did not."""
        if self.journal_path.exists():
            names = json.loads(self.journal_path.read_text(encoding="utf-8"))
            for name in names:
                target = self.data_dir / name
                staged = target.with_name(name + ".tmp")
                if staged.exists():
                    os.replace(staged, target)
            self.journal_path.unlink()
            logger.warning("Completed interrupted commit of %s", ", ".join(names))
            return
        for stray in self.data_dir.glob("*.tmp"):
            stray.unlink()
            logger.warning("Discarded unfinished staging file %s", stray.name)

    def _write_journal(self, documents: list[JsonDocument]) -> None:
        staging = self.journal_path.with_name(JOURNAL_FILE + ".tmp")
        staging.write_text(
            json.dumps([d.file_path.name for d in documents]), encoding="utf-8"
        )
        os.replace(staging, self.journal_path)
