"""Settings loaded from an optional INI file.

Lookup order for the file: the explicit ``path`` argument, then the
``SUPPLYHUB_CONFIG`` environment variable, then ``./supplyhub.ini``.
A missing file means defaults; loading never writes anything.

Example::

    [storage]
    data_dir = /var/lib/supplyhub
    uploads_dir = /var/lib/supplyhub/uploads

    [logging]
    level = INFO
    file = logs/supplyhub.log
    max_size_mb = 10
    backup_count = 5

    [inventory]
    default_location = Main Warehouse
    default_category = Uncategorized
    min_stock_ratio = 0.1
    max_stock_multiplier = 2
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from supplyhub.domain.service.request_workflow import InventoryDefaults

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SUPPLYHUB_CONFIG"
DATA_DIR_ENV_VAR = "SUPPLYHUB_DATA_DIR"
DEFAULT_CONFIG_FILE = "supplyhub.ini"

# Project root when installed in editable mode.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "WARNING"
    format: str = DEFAULT_LOG_FORMAT
    file: Path | None = None
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    uploads_dir: Path = _DEFAULT_DATA_DIR / "uploads"
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    inventory: InventoryDefaults = field(default_factory=InventoryDefaults)
    source: Path | None = None


def load_settings(path: Path | str | None = None) -> Settings:
    config_path = _resolve_path(path)
    parser = configparser.ConfigParser(interpolation=None)
    if config_path is not None:
        parser.read(config_path, encoding="utf-8")

    data_dir = Path(
        os.environ.get(DATA_DIR_ENV_VAR)
        or parser.get("storage", "data_dir", fallback=str(_DEFAULT_DATA_DIR))
    ).expanduser()
    uploads_dir = Path(
        parser.get("storage", "uploads_dir", fallback=str(data_dir / "uploads"))
    ).expanduser()

    log_file = parser.get("logging", "file", fallback="").strip()
    logging_settings = LoggingSettings(
        level=parser.get("logging", "level", fallback=LoggingSettings.level).upper(),
        format=parser.get("logging", "format", fallback=DEFAULT_LOG_FORMAT),
        file=Path(log_file).expanduser() if log_file else None,
        max_size_mb=_get_int(parser, "logging", "max_size_mb", LoggingSettings.max_size_mb),
        backup_count=_get_int(parser, "logging", "backup_count", LoggingSettings.backup_count),
    )

    defaults = InventoryDefaults()
    inventory = InventoryDefaults(
        location=parser.get("inventory", "default_location", fallback=defaults.location),
        category=parser.get("inventory", "default_category", fallback=defaults.category),
        min_stock_ratio=_get_float(
            parser, "inventory", "min_stock_ratio", defaults.min_stock_ratio
        ),
        max_stock_multiplier=_get_int(
            parser, "inventory", "max_stock_multiplier", defaults.max_stock_multiplier
        ),
    )

    return Settings(
        data_dir=data_dir,
        uploads_dir=uploads_dir,
        logging=logging_settings,
        inventory=inventory,
        source=config_path,
    )


def _resolve_path(path: Path | str | None) -> Path | None:
    candidate = path or os.environ.get(CONFIG_ENV_VAR)
    if candidate:
        config_path = Path(candidate).expanduser()
        if not config_path.is_file():
            logger.warning("Config file %s not found; using defaults", config_path)
            return None
        return config_path
    local = Path.cwd() / DEFAULT_CONFIG_FILE
    return local if local.is_file() else None


def _get_int(parser: configparser.ConfigParser, section: str, key: str, default: int) -> int:
    try:
        return parser.getint(section, key, fallback=default)
    except ValueError:
        logger.warning("Invalid integer for [%s] %s; using %s", section, key, default)
        return default


def _get_float(
    parser: configparser.ConfigParser, section: str, key: str, default: float
) -> float:
    try:
        return parser.getfloat(section, key, fallback=default)
    except ValueError:
        logger.warning("Invalid number for [%s] %s; using %s", section, key, default)
        return default
