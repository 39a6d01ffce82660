"""Pytest configuration and fixtures."""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.pop("NAME_MATCH_THRESHOLD", None)
os.environ.pop("NAME_MATCH_NEAR_MISS", None)
os.environ.pop("NAME_MATCH_LEVENSHTEIN_THRESHOLD", None)
os.environ.pop("NAME_MATCH_MIN_TOKEN_LENGTH", None)

from core.config import get_settings
from services.salesperson_dedupe import RosterEntry


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings around every test so env tweaks do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI commands reconfigure the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def roster() -> list[RosterEntry]:
    """A small salesperson roster with two duplicate clusters."""
    return [
        RosterEntry(id=1, name="Eben Woodall", active_estimates=3),
        RosterEntry(id=2, name="Eben Woodbell", telegram_id="5551234"),
        RosterEntry(id=3, name="Zack Smith", active_estimates=1),
        RosterEntry(id=4, name="Dan Howard", warning_count=2),
        RosterEntry(id=5, name="Daniel Howard", active_estimates=4),
        RosterEntry(id=6, name="Priya Raman"),
    ]


@pytest.fixture
def roster_csv(tmp_path: Path) -> Path:
    """Write a roster CSV to a temporary directory."""
    path = tmp_path / "salespeople.csv"
    path.write_text(
        "id,name,telegram_id,active_estimates,warning_count,is_active\n"
        "1,Eben Woodall,,3,0,true\n"
        "2,Eben Woodbell,5551234,0,1,true\n"
        "3,Zack Smith,,1,0,true\n"
        "4,,,0,0,true\n"
        "5,Dan Howard,,0,2,false\n"
        "6,Daniel Howard,,4,0,true\n",
        encoding="utf-8",
    )
    return path
