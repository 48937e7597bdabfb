"""Interfaces to external collaborators that are not document storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class EmailSender(ABC):

    @abstractmethod
    def send(self, to: str, template: str, context: dict[str, Any]) -> None:
        """Send a transactional email. May raise on delivery failure."""


class ObjectStore(ABC):

    @abstractmethod
    def upload(self, data: bytes, path: str) -> str:
        """Store ``data`` at ``path`` and return a URL for it."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the object at ``path``."""
