"""Custom exceptions for the roster_dedupe application."""
from __future__ import annotations


class NameMatchingError(Exception):
    """Base exception for all application errors."""

    pass


# =============================================================================
# Matching Errors
# =============================================================================


class InvalidNameError(NameMatchingError, TypeError):
    """Raised when a name passed to the matcher is not a string."""

    pass


# =============================================================================
# Roster Errors
# =============================================================================


class RosterError(NameMatchingError):
    """Base exception for roster-related errors."""

    pass


class RosterLoadError(RosterError):
    """Raised when a roster file cannot be read or lacks required columns."""

    pass


__all__ = [
    # Base
    "NameMatchingError",
    # Matching
    "InvalidNameError",
    # Roster
    "RosterError",
    "RosterLoadError",
]
