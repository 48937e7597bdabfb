"""In-app notifications and outgoing email.

In-app notifications are written through the caller's unit of work, so
they commit with the change they describe. Email is fire-and-forget: a
failing sender is logged and never fails the use case.
"""

from __future__ import annotations

import logging
from typing import Any

from supplyhub.domain.model.notification import Notification, NotificationType
from supplyhub.domain.ports import EmailSender
from supplyhub.domain.repository.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, email_sender: EmailSender | None = None) -> None:
        self._email_sender = email_sender

    def notify(
        self,
        repo: NotificationRepository,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        **metadata: Any,
    ) -> Notification:
        notification = Notification(
            id=None,
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            metadata=metadata,
        )
        repo.save(notification)
        return notification

    def email(self, to: str | None, template: str, context: dict[str, Any]) -> bool:
        """Send an email; return False if it was skipped or failed."""
        if not to or self._email_sender is None:
            return False
        try:
            self._email_sender.send(to, template, context)
        except Exception:
            logger.exception("Failed to send '%s' email to %s", template, to)
            return False
        return True
