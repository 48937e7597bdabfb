"""EmailSender that writes messages to the log instead of a mail server."""

from __future__ import annotations

import logging
from typing import Any

from supplyhub.domain.ports import EmailSender

logger = logging.getLogger(__name__)


class LoggingEmailSender(EmailSender):

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []

    def send(self, to: str, template: str, context: dict[str, Any]) -> None:
        self.sent.append((to, template, dict(context)))
        logger.info("Email '%s' to %s: %s", template, to, context)
