"""Pydantic models for api-serialization."""

from api_serialization.models.base import SerializationBaseModel
from api_serialization.models.config import SerializationConfig
from api_serialization.models.descriptors import (
    AnySetter,
    EnumDescriptor,
    FieldDescriptor,
    TypeDescriptor,
)
from api_serialization.models.naming import NamingStrategy

__all__ = [
    "AnySetter",
    "EnumDescriptor",
    "FieldDescriptor",
    "NamingStrategy",
    "SerializationBaseModel",
    "SerializationConfig",
    "TypeDescriptor",
]
