"""Configuration module."""

from batchledger.config.logging import (
    bind_operation,
    configure_logging,
    get_logger,
    render_decimals,
)
from batchledger.config.settings import (
    LedgerSettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "StorageSettings",
    "LedgerSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "bind_operation",
    "render_decimals",
]
