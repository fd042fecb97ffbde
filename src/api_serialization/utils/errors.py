"""Error handling for the serialization layer.

This module provides standardized error codes and the exception hierarchy
surfaced by mappers when input cannot be converted to a target type.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Standard error codes for serialization failures."""

    INVALID_FORMAT = "INVALID_FORMAT"
    MISMATCHED_INPUT = "MISMATCHED_INPUT"
    MALFORMED_JSON = "MALFORMED_JSON"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"


class SerializationError(Exception):
    """Base exception for serialization errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize serialization error.

        Args:
            message: Human-readable error message
            error_code: Standard error code
            details: Additional error details
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class FormatError(SerializationError):
    """Input shape does not match the target type's declared structure."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.MISMATCHED_INPUT,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details)


class InvalidFormatError(FormatError):
    """A value has the right JSON kind but is not an accepted literal."""

    def __init__(
        self,
        field: str,
        value: Any,
        target_type: type,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize invalid format error.

        Args:
            field: Dotted wire path of the offending field
            value: The rejected input value
            target_type: Type the value was expected to convert to
            details: Additional error details
        """
        self.field = field
        self.value = value
        self.target_type = target_type
        merged = {
            "field": field,
            "value": value,
            "target_type": target_type.__name__,
        }
        merged.update(details or {})
        super().__init__(
            f"Cannot deserialize value {value!r} of field '{field}' "
            f"as {target_type.__name__}",
            ErrorCode.INVALID_FORMAT,
            merged,
        )


class MapperConfigurationError(SerializationError):
    """A target type is declared in a way the mapper cannot honor."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
