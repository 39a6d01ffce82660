"""Test configuration loading."""
from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from core.config import get_settings, reload_settings
from core.logging_config import JSONFormatter, get_context_logger, log_comparison, setup_logging


def test_settings_load():
    """Test that settings load with sensible defaults."""
    settings = get_settings()

    assert settings.duplicate_threshold == 0.7
    assert settings.near_miss_threshold == 0.6
    assert settings.levenshtein_threshold == 0.86
    assert settings.min_char_token_length == 3
    assert settings.log_level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def test_settings_from_env(monkeypatch):
    """Environment variables override defaults."""
    monkeypatch.setenv("NAME_MATCH_THRESHOLD", "0.85")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "JSON")

    settings = reload_settings()

    assert settings.duplicate_threshold == 0.85
    assert settings.log_level == "DEBUG"
    assert settings.is_json_logging()


def test_settings_threshold_out_of_range(monkeypatch):
    monkeypatch.setenv("NAME_MATCH_THRESHOLD", "1.2")

    with pytest.raises(ValidationError):
        reload_settings()


def test_settings_near_miss_above_threshold(monkeypatch):
    monkeypatch.setenv("NAME_MATCH_THRESHOLD", "0.5")
    monkeypatch.setenv("NAME_MATCH_NEAR_MISS", "0.6")

    with pytest.raises(ValidationError):
        reload_settings()


def test_settings_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValidationError):
        reload_settings()


def test_settings_cached():
    """Settings are loaded once until the cache is cleared."""
    assert get_settings() is get_settings()


def test_json_formatter_includes_context():
    """Context logger fields end up in JSON output."""
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname=__file__, lineno=1,
        msg="Grouping roster", args=(), exc_info=None,
    )
    record.roster = "salespeople.csv"
    record.entry_id = 12
    record.extra_data = {"entries": 3}

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Grouping roster"
    assert payload["roster"] == "salespeople.csv"
    assert payload["entry_id"] == 12
    assert payload["extra"] == {"entries": 3}


def test_log_comparison(caplog):
    """Comparisons are logged with structured fields."""
    logger = get_context_logger("tests.compare", roster="salespeople.csv")

    with caplog.at_level(logging.DEBUG, logger="tests.compare"):
        log_comparison(logger, "Eben Woodall", "Eben Woodbell", 0.7, 0.7)

    record = caplog.records[-1]
    assert record.roster == "salespeople.csv"
    assert record.extra_data["is_duplicate"] is True
    assert "Eben Woodall" in record.getMessage()


def test_setup_logging_log_file(tmp_path):
    """A log file gets the same JSON records as the console."""
    log_path = tmp_path / "roster.log"
    setup_logging(level="INFO", log_file=str(log_path), json_format=True)

    logger = get_context_logger("tests.file", roster="salespeople.csv")
    logger.info("Assigned id 7", extra={"entry_id": 7})

    payload = json.loads(log_path.read_text(encoding="utf-8").splitlines()[-1])
    assert payload["message"] == "Assigned id 7"
    assert payload["roster"] == "salespeople.csv"
    assert payload["entry_id"] == 7
