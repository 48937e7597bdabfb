"""ObjectStore backed by a local directory."""

from __future__ import annotations

import logging
from pathlib import Path

from supplyhub.domain.ports import ObjectStore

logger = logging.getLogger(__name__)


class LocalObjectStore(ObjectStore):

    def __init__(self, root: Path) -> None:
        self._root = root

    def upload(self, data: bytes, path: str) -> str:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info("Stored %d bytes at %s", len(data), target)
        return target.as_uri()

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        target.unlink()
        logger.info("Deleted %s", target)

    def _resolve(self, path: str) -> Path:
        root = self._root.resolve()
        target = (root / path).resolve()
        if root not in target.parents:
            raise ValueError(f"Object path '{path}' escapes the store root")
        return target
