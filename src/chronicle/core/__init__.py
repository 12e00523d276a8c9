# src/chronicle/core/__init__.py
"""Core infrastructure: Configuration, Logging."""

from chronicle.core.config import (
    DEFAULT_LIMIT,
    ChronicleSettings,
    LoggingSettings,
    ReaderSettings,
    StoreSettings,
    load_settings,
)
from chronicle.core.logging import (
    configure_logging,
    get_logger,
)

__all__ = [
    "DEFAULT_LIMIT",
    "ChronicleSettings",
    "LoggingSettings",
    "ReaderSettings",
    "StoreSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
