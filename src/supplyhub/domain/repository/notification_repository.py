"""Abstract repository for in-app notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supplyhub.domain.model.notification import Notification


class NotificationRepository(ABC):

    @abstractmethod
    def save(self, notification: Notification) -> None:
        """Persist a notification, assigning an ID if needed."""

    @abstractmethod
    def list_all(self) -> list[Notification]:
        """Return every notification."""

    def list_for_user(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        return [
            n for n in self.list_all()
            if n.user_id == user_id and (not unread_only or not n.read)
        ]
