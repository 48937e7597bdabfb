"""JSON-file-backed implementation of NotificationRepository."""

from __future__ import annotations

from supplyhub.domain.model.notification import Notification, NotificationType
from supplyhub.domain.repository.notification_repository import NotificationRepository
from supplyhub.infrastructure.persistence.json_collection import (
    JsonCollection,
    dump_datetime,
    load_datetime,
)


class JsonNotificationRepository(NotificationRepository):

    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    def save(self, notification: Notification) -> None:
        if notification.id is None:
            notification.id = self._collection.next_id()
        self._collection.upsert(self._to_raw(notification))

    def list_all(self) -> list[Notification]:
        return [self._to_domain(raw) for raw in self._collection.records()]

    @staticmethod
    def _to_raw(notification: Notification) -> dict:
        return {
            "id": notification.id,
            "user_id": notification.user_id,
            "title": notification.title,
            "message": notification.message,
            "type": notification.type.value,
            "read": notification.read,
            "created_at": dump_datetime(notification.created_at),
            "metadata": notification.metadata,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Notification:
        return Notification(
            id=raw["id"],
            user_id=raw["user_id"],
            title=raw["title"],
            message=raw["message"],
            type=NotificationType(raw.get("type", "info")),
            read=raw.get("read", False),
            created_at=load_datetime(raw["created_at"]),  # type: ignore[arg-type]
            metadata=raw.get("metadata", {}),
        )
