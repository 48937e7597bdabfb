"""JSON documents staged in memory and written through ``.tmp`` siblings.

Repositories read and write ``records`` in memory; nothing touches the
disk until the unit of work stages and then replaces every dirty file.
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from supplyhub.domain.model.value_objects import Money


class JsonDocument:
    """One JSON file loaded whole into ``_data``."""

    def __init__(self, file_path: Path) -> None:
        self.file_path = file_path
        self._data: Any = self._empty()
        self.dirty = False

    def _empty(self) -> Any:
        return []

    def load(self) -> None:
        if self.file_path.exists():
            self._data = json.loads(self.file_path.read_text(encoding="utf-8"))
        else:
            self._data = self._empty()
        self.dirty = False

    # --- File helpers ---------------------------------------------------------

    @property
    def staging_path(self) -> Path:
        return self.file_path.with_name(self.file_path.name + ".tmp")

    def stage(self) -> Path:
        """Write the data next to the real file and return that path."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self.staging_path.write_text(
            json.dumps(self._data, indent=2) + "\n", encoding="utf-8"
        )
        return self.staging_path

    def publish_staged(self) -> None:
        os.replace(self.staging_path, self.file_path)
        self.dirty = False

    def discard_staged(self) -> None:
        self.staging_path.unlink(missing_ok=True)


class IdSequences(JsonDocument):
    """Last ID issued per collection, so deleted IDs are never handed out again."""

    def _empty(self) -> dict[str, int]:
        return {}

    def next_id(self, name: str, records: list[dict[str, Any]]) -> str:
        numeric = [int(r["id"]) for r in records if str(r["id"]).isdigit()]
        last = max(self._data.get(name, 0), max(numeric, default=0))
        self._data[name] = last + 1
        self.dirty = True
        return str(last + 1)


class JsonCollection(JsonDocument):
    """A list of records, one per entity."""

    def __init__(self, file_path: Path, name: str, sequences: IdSequences) -> None:
        super().__init__(file_path)
        self.name = name
        self._sequences = sequences

    def records(self) -> list[dict[str, Any]]:
        return self._data

    def upsert(self, record: dict[str, Any]) -> None:
        for i, raw in enumerate(self._data):
            if raw["id"] == record["id"]:
                self._data[i] = record
                break
        else:
            self._data.append(record)
        self.dirty = True

    def remove(self, predicate) -> int:
        kept = [r for r in self._data if not predicate(r)]
        removed = len(self._data) - len(kept)
        if removed:
            self._data = kept
            self.dirty = True
        return removed

    def next_id(self) -> str:
        return self._sequences.next_id(self.name, self._data)


# --- Field codecs -------------------------------------------------------------

def dump_money(money: Money | None) -> dict[str, str] | None:
    if money is None:
        return None
    return {"amount": str(money.amount), "currency": money.currency}


def load_money(raw: dict[str, str] | None) -> Money | None:
    if raw is None:
        return None
    return Money(Decimal(raw["amount"]), raw.get("currency", "USD"))


def dump_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_datetime(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None
