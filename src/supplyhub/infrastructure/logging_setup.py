"""Root logger configuration for the command line entry point."""

from __future__ import annotations

import logging
import logging.handlers

from supplyhub.infrastructure.config import LoggingSettings


def configure_logging(settings: LoggingSettings, level: str | None = None) -> logging.Logger:
    """Install a console handler, plus a rotating file handler if configured.

    ``level`` overrides the configured level (e.g. from ``--log-level``).
    Calling this again replaces the handlers instead of stacking them.
    """
    root_logger = logging.getLogger()
    level_name = (level or settings.level).upper()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(settings.format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.file is not None:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            settings.file,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
