"""Logging configuration for the serialization layer.

This module provides structured logging with JSON formatting and a logger
wrapper that attaches contextual fields (target type, naming strategy, ...)
to every record.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

PACKAGE_LOGGER = "api_serialization"


class StructuredFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", structured: bool = True) -> None:
    """Configure the package logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        structured: Whether to use structured JSON logging
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(getattr(logging, level.upper()))

    if structured:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False


class ContextLogger:
    """Logger wrapper that adds contextual information to all log messages."""

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        """Initialize context logger.

        Args:
            name: Logger name
            context: Default context to add to all messages
        """
        self.logger = logging.getLogger(name)
        self.context = context or {}

    def bind(self, **context: Any) -> "ContextLogger":
        """Return a logger for the same name with extra default context."""
        merged = self.context.copy()
        merged.update(context)
        return ContextLogger(self.logger.name, merged)

    def _add_context(self, extra: dict[str, Any] | None) -> dict[str, Any]:
        merged = self.context.copy()
        merged.update(extra or {})
        return merged

    def debug(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        """Log debug message with context."""
        self.logger.debug(msg, extra={"extra_fields": self._add_context(extra)})

    def info(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        """Log info message with context."""
        self.logger.info(msg, extra={"extra_fields": self._add_context(extra)})

    def warning(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        """Log warning message with context."""
        self.logger.warning(msg, extra={"extra_fields": self._add_context(extra)})

    def error(self, msg: str, extra: dict[str, Any] | None = None) -> None:
        """Log error message with context."""
        self.logger.error(msg, extra={"extra_fields": self._add_context(extra)})
