"""Centralized logging configuration with JSON structured logging support."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Default format for text logs
TEXT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs logs in JSON format suitable for log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        # Common context fields
        if hasattr(record, "roster"):
            log_data["roster"] = record.roster
        if hasattr(record, "entry_id"):
            log_data["entry_id"] = record.entry_id

        return json.dumps(log_data, default=str)


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that allows adding context to log messages.

    Usage:
        logger = get_context_logger(__name__, roster="salespeople.csv")
        logger.info("Grouping roster")  # Will include roster in output
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        """Add context to log record."""
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        json_format: If True, use JSON structured logging.
    """
    handlers: list[logging.Handler] = []

    # Console handler on stderr; stdout carries CLI reports
    console_handler = logging.StreamHandler(sys.stderr)
    if json_format:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT, DATE_FORMAT))
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True,  # Overwrite any existing configuration
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Name of the logger (usually __name__).

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)


def get_context_logger(name: str, **context: Any) -> ContextLogger:
    """
    Get a logger with context that will be included in all log messages.

    Args:
        name: Name of the logger (usually __name__).
        **context: Context key-value pairs to include in logs.

    Returns:
        ContextLogger adapter.
    """
    base_logger = logging.getLogger(name)
    return ContextLogger(base_logger, context)


def log_comparison(
    logger: logging.Logger | ContextLogger,
    name_1: str,
    name_2: str,
    score: float,
    threshold: float,
    level: int = logging.DEBUG,
) -> None:
    """
    Log a name comparison with standard fields.

    Args:
        logger: Logger instance to use.
        name_1: First name as given.
        name_2: Second name as given.
        score: Similarity score.
        threshold: Duplicate threshold the score was judged against.
        level: Log level for the record.
    """
    log_data = {
        "name_1": name_1,
        "name_2": name_2,
        "score": round(score, 3),
        "threshold": threshold,
        "is_duplicate": score >= threshold,
    }
    logger.log(
        level,
        f"Compared {name_1!r} vs {name_2!r}: {score:.2f} (threshold {threshold:.2f})",
        extra={"extra_data": log_data},
    )


__all__ = [
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "log_comparison",
    "JSONFormatter",
    "ContextLogger",
]
