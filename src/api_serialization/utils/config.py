"""Configuration management for the serialization layer.

Deployment-level defaults for the mapper policy and logging, loaded from the
environment (and an optional ``.env`` file) with Pydantic Settings. Mixins
are code-level declarations and are not read from the environment.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from api_serialization.models.config import SerializationConfig
from api_serialization.models.naming import NamingStrategy
from api_serialization.utils.logging_config import setup_logging

# Valid logging levels
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class MapperSettings(BaseSettings):
    """Mapper policy defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SERIALIZATION_", env_file=".env", extra="ignore"
    )

    naming_strategy: NamingStrategy = Field(
        default=NamingStrategy.CAMEL_TO_SNAKE,
        description="Property naming strategy",
    )

    ignore_any_setter_annotation: bool = Field(
        default=False, description="Discard unknown fields without calling handlers"
    )

    disable_read_unknown_enum_values_as_default_value: bool = Field(
        default=False, description="Reject unrecognized enum literals"
    )

    @field_validator("naming_strategy", mode="before")
    @classmethod
    def validate_naming_strategy(cls, v: object) -> object:
        """Accept strategy names case-insensitively."""
        return NamingStrategy.parse(v)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SERIALIZATION_LOG_", env_file=".env", extra="ignore"
    )

    level: str = Field(default="INFO", description="Logging level")

    structured: bool = Field(
        default=True, description="Enable structured JSON logging"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        upper_v = v.upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {sorted(VALID_LOG_LEVELS)}"
            )
        return upper_v


class Settings:
    """Aggregated settings for the serialization layer."""

    def __init__(self) -> None:
        """Initialize all settings groups.

        Raises ValidationError if any environment value is invalid.
        """
        self.mapper = MapperSettings()
        self.logging = LoggingSettings()

    def to_config(self) -> SerializationConfig:
        """Build a serialization config from the environment defaults.

        Returns:
            A new, mutable ``SerializationConfig``; add mixins before use
        """
        return SerializationConfig(
            naming_strategy=self.mapper.naming_strategy,
            ignore_any_setter_annotation=self.mapper.ignore_any_setter_annotation,
            disable_read_unknown_enum_values_as_default_value=(
                self.mapper.disable_read_unknown_enum_values_as_default_value
            ),
        )


def get_settings() -> Settings:
    """Get or create global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if "_settings" not in globals():
        _settings = Settings()
    return _settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the package logger from the logging settings.

    Call once at application startup; each call installs a new handler.

    Args:
        settings: Settings to apply; defaults to ``get_settings()``
    """
    settings = settings or get_settings()
    setup_logging(level=settings.logging.level, structured=settings.logging.structured)
