"""Centrally configured JSON mapping for API request and response bodies."""

from api_serialization.annotations import (
    describe_enum,
    describe_type,
    json_enum,
    json_object,
    json_property,
)
from api_serialization.creator import create_mapper
from api_serialization.mapper import Mapper
from api_serialization.models import NamingStrategy, SerializationConfig
from api_serialization.utils.config import configure_logging
from api_serialization.utils.errors import (
    ErrorCode,
    FormatError,
    InvalidFormatError,
    MapperConfigurationError,
    SerializationError,
)

__version__ = "0.1.0"

__all__ = [
    "ErrorCode",
    "FormatError",
    "InvalidFormatError",
    "Mapper",
    "MapperConfigurationError",
    "NamingStrategy",
    "SerializationConfig",
    "SerializationError",
    "configure_logging",
    "create_mapper",
    "describe_enum",
    "describe_type",
    "json_enum",
    "json_object",
    "json_property",
]
