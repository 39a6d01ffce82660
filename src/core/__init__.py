"""Core module exports."""
from __future__ import annotations

from core.config import Settings, get_settings, reload_settings
from core.exceptions import (
    # Base
    NameMatchingError,
    # Matching
    InvalidNameError,
    # Roster
    RosterError,
    RosterLoadError,
)
from core.logging_config import (
    setup_logging,
    get_logger,
    get_context_logger,
    log_comparison,
    JSONFormatter,
    ContextLogger,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "reload_settings",
    # Exceptions
    "NameMatchingError",
    "InvalidNameError",
    "RosterError",
    "RosterLoadError",
    # Logging
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "log_comparison",
    "JSONFormatter",
    "ContextLogger",
]
