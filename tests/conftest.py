"""Pytest configuration and shared fixtures."""

import pytest

from api_serialization import Mapper, SerializationConfig, create_mapper


@pytest.fixture
def default_config() -> SerializationConfig:
    """Configuration with every switch at its default.

    Returns:
        Fresh SerializationConfig
    """
    return SerializationConfig()


@pytest.fixture
def default_mapper(default_config: SerializationConfig) -> Mapper:
    """Mapper built from the default configuration.

    Args:
        default_config: Default configuration

    Returns:
        Mapper instance
    """
    return create_mapper(default_config)


@pytest.fixture
def lenient_mapper() -> Mapper:
    """Mapper that never calls any-setters.

    Returns:
        Mapper instance
    """
    return create_mapper(SerializationConfig().set_should_ignore_any_setter_annotation())


@pytest.fixture
def strict_enum_mapper() -> Mapper:
    """Mapper that rejects unrecognized enum literals.

    Returns:
        Mapper instance
    """
    return create_mapper(
        SerializationConfig().set_should_disable_read_unknown_enum_values_as_default_value()
    )
