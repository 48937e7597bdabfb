"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from supplyhub.application.events import EventBus
from supplyhub.application.notifications import NotificationService
from supplyhub.infrastructure.adapters.email_sender import LoggingEmailSender
from supplyhub.infrastructure.adapters.local_object_store import LocalObjectStore
from supplyhub.infrastructure.config import Settings
from supplyhub.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


class Container:
    """Per-process wiring; the CLI builds one from the loaded settings."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.events = EventBus()
        self.email_sender = LoggingEmailSender()
        self.notifier = NotificationService(self.email_sender)
        self.object_store = LocalObjectStore(settings.uploads_dir)

    def unit_of_work(self) -> JsonUnitOfWork:
        return JsonUnitOfWork(self.settings.data_dir)
