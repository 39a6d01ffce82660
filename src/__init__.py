"""Top-level package for the roster_dedupe application."""
from __future__ import annotations

__version__ = "1.0.0"

__all__ = [
    "core",
    "services",
    "utils",
]
