"""Konfiguration und Logging für das einvoice-Paket."""

from .config import Settings, settings
from .logging import JSONFormatter, PIIRedactionFilter, get_logger, init_logging

__all__ = [
    "Settings",
    "settings",
    "JSONFormatter",
    "PIIRedactionFilter",
    "get_logger",
    "init_logging",
]
