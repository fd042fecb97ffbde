"""Serialization configuration value.

``SerializationConfig`` records the four policy switches a mapper is built
from. It is created once, adjusted with the fluent setters, and handed to
``create_mapper``. Mappers take a snapshot, so changing a configuration
afterwards does not alter mappers already created from it.
"""

from collections.abc import Mapping
from typing import Self

from pydantic import Field, field_validator

from api_serialization.models.base import SerializationBaseModel
from api_serialization.models.naming import NamingStrategy


class SerializationConfig(SerializationBaseModel):
    """Policy switches for a mapper."""

    naming_strategy: NamingStrategy = Field(
        default=NamingStrategy.CAMEL_TO_SNAKE,
        description="Transform from declared field names to wire names",
    )

    mixins: dict[type, type] = Field(
        default_factory=dict,
        description="Annotation overlays, keyed by target type",
    )

    ignore_any_setter_annotation: bool = Field(
        default=False,
        description="Never invoke catch-all handlers for unknown fields",
    )

    disable_read_unknown_enum_values_as_default_value: bool = Field(
        default=False,
        description="Fail on unrecognized enum literals instead of using the default member",
    )

    @field_validator("naming_strategy", mode="before")
    @classmethod
    def validate_naming_strategy(cls, v: object) -> object:
        """Accept strategies given by name."""
        return NamingStrategy.parse(v)

    def set_naming_strategy(self, naming_strategy: NamingStrategy | str) -> Self:
        self.naming_strategy = naming_strategy  # type: ignore[assignment]
        return self

    def set_mixins(self, mixins: Mapping[type, type]) -> Self:
        """Replace all registered overlays."""
        self.mixins = dict(mixins)
        return self

    def add_mixin(self, target: type, source: type) -> Self:
        """Register a single overlay.

        Raises:
            ValueError: If ``target`` already has an overlay
        """
        if target in self.mixins:
            raise ValueError(
                f"Mixin for {target.__name__} already registered: "
                f"{self.mixins[target].__name__}"
            )
        self.mixins = {**self.mixins, target: source}
        return self

    def set_should_ignore_any_setter_annotation(self, value: bool = True) -> Self:
        self.ignore_any_setter_annotation = value
        return self

    def set_should_disable_read_unknown_enum_values_as_default_value(
        self, value: bool = True
    ) -> Self:
        self.disable_read_unknown_enum_values_as_default_value = value
        return self

    def snapshot(self) -> "SerializationConfig":
        """Return an independent copy for a mapper to hold."""
        return self.model_copy(update={"mixins": dict(self.mixins)})
