"""Tests for logging configuration."""

import json
import logging
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pytest

from api_serialization import SerializationConfig, create_mapper, json_enum
from api_serialization.utils.config import Settings, configure_logging
from api_serialization.utils.logging_config import (
    PACKAGE_LOGGER,
    ContextLogger,
    StructuredFormatter,
    setup_logging,
)


@json_enum(default="UNKNOWN")
class Letter(Enum):
    A = "A"
    UNKNOWN = "UNKNOWN"


@dataclass
class Letters:
    letter: Optional[Letter] = None


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """Package logger restored to its original state after the test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.mark.unit
class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_format_includes_extra_fields(self) -> None:
        """Test records are rendered as JSON with context fields."""
        record = logging.LogRecord(
            name="api_serialization.mapper",
            level=logging.WARNING,
            pathname=__file__,
            lineno=10,
            msg="Unknown enum literal",
            args=(),
            exc_info=None,
        )
        record.extra_fields = {"enum": "Letter", "value": "D"}

        data = json.loads(StructuredFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "api_serialization.mapper"
        assert data["message"] == "Unknown enum literal"
        assert data["enum"] == "Letter"
        assert data["value"] == "D"

    def test_format_includes_exception(self) -> None:
        """Test exception info is rendered."""
        try:
            raise ValueError("boom")
        except ValueError:
            exc_info = sys.exc_info()

        record = logging.LogRecord(
            "x", logging.ERROR, __file__, 1, "failed", (), exc_info
        )
        data = json.loads(StructuredFormatter().format(record))

        assert "ValueError: boom" in data["exception"]


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_configures_package_logger(self, package_logger: logging.Logger) -> None:
        """Test level, handler and propagation are set."""
        setup_logging(level="debug", structured=True)

        assert package_logger.level == logging.DEBUG
        assert package_logger.propagate is False
        assert isinstance(package_logger.handlers[-1].formatter, StructuredFormatter)

    def test_plain_formatter(self, package_logger: logging.Logger) -> None:
        """Test non-structured logging uses a plain formatter."""
        setup_logging(level="INFO", structured=False)

        formatter = package_logger.handlers[-1].formatter
        assert not isinstance(formatter, StructuredFormatter)


@pytest.mark.unit
class TestContextLogger:
    """Tests for ContextLogger."""

    def test_context_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test default and per-call context are merged."""
        logger = ContextLogger("api_serialization.test", {"component": "mapper"})

        with caplog.at_level(logging.INFO, logger="api_serialization.test"):
            logger.info("hello", extra={"target": "Sample"})

        assert caplog.records[0].extra_fields == {
            "component": "mapper",
            "target": "Sample",
        }

    def test_bind(self) -> None:
        """Test bind returns a logger with extended context."""
        logger = ContextLogger("api_serialization.test", {"a": 1})

        bound = logger.bind(b=2)

        assert bound.context == {"a": 1, "b": 2}
        assert logger.context == {"a": 1}
        assert bound.logger is logger.logger

    def test_enum_fallback_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the mapper warns when it substitutes a default member."""
        mapper = create_mapper(SerializationConfig())

        with caplog.at_level(logging.WARNING, logger=PACKAGE_LOGGER):
            result = mapper.read_value('{"letter": "Z"}', Letters)

        assert result.letter is Letter.UNKNOWN
        warning = next(r for r in caplog.records if r.levelno == logging.WARNING)
        assert warning.extra_fields["value"] == "Z"
        assert warning.extra_fields["enum"] == "Letter"
        assert warning.extra_fields["default"] == "UNKNOWN"

    def test_wire_model_logged_with_target(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test the mapper binds the target type when logging model builds."""
        mapper = create_mapper(SerializationConfig())

        with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
            mapper.read_value("{}", Letters)

        built = next(r for r in caplog.records if r.getMessage() == "Wire model built")
        assert built.extra_fields["target"] == "Letters"
        assert built.extra_fields["naming_strategy"] == "CAMEL_TO_SNAKE"


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configuring logging from settings."""

    def test_applies_logging_settings(
        self, package_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test level and format come from the environment."""
        monkeypatch.setenv("SERIALIZATION_LOG_LEVEL", "warning")
        monkeypatch.setenv("SERIALIZATION_LOG_STRUCTURED", "false")

        configure_logging(Settings())

        assert package_logger.level == logging.WARNING
        assert package_logger.propagate is False
        formatter = package_logger.handlers[-1].formatter
        assert not isinstance(formatter, StructuredFormatter)

    def test_structured_by_default(self, package_logger: logging.Logger) -> None:
        """Test default settings install the JSON formatter."""
        configure_logging(Settings())

        assert package_logger.level == logging.INFO
        assert isinstance(package_logger.handlers[-1].formatter, StructuredFormatter)
