"""Explicit type descriptors.

Descriptors state everything a mapper needs to know about a target type:
which fields exist, their wire names, which are ignored, which callback
receives unknown fields, and which enum member is the fallback. They are
built once when a type is declared and merged with mixin overlays when a
mapper resolves a type.
"""

from collections.abc import Callable
from typing import Any, Optional

from pydantic import ConfigDict, Field

from api_serialization.models.base import SerializationBaseModel

# Called as handler(instance, field_name, value)
AnySetter = Callable[[Any, str, Any], None]


class FieldDescriptor(SerializationBaseModel):
    """Declared settings of a single field."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Declared Python field name")
    wire_name: Optional[str] = Field(None, description="Explicit wire name")
    ignored: bool = Field(False, description="Skip field when reading and writing")

    def overlay(self, other: "FieldDescriptor") -> "FieldDescriptor":
        """Apply the settings explicitly declared on ``other``."""
        update = {
            key: getattr(other, key) for key in other.model_fields_set - {"name"}
        }
        return self.model_copy(update=update)


class TypeDescriptor(SerializationBaseModel):
    """Capability table of a dataclass target."""

    model_config = ConfigDict(frozen=True)

    target: type = Field(..., description="Described class")
    fields: dict[str, FieldDescriptor] = Field(default_factory=dict)
    any_setter: Optional[AnySetter] = Field(
        None, description="Receives input fields with no declared property"
    )

    def field(self, name: str) -> FieldDescriptor:
        return self.fields.get(name) or FieldDescriptor(name=name)

    def merge(self, overlay: "TypeDescriptor") -> "TypeDescriptor":
        """Return a descriptor where the overlay's declarations win.

        Overlay fields the target does not declare are dropped.
        """
        fields = {
            name: (
                descriptor.overlay(overlay.fields[name])
                if name in overlay.fields
                else descriptor
            )
            for name, descriptor in self.fields.items()
        }
        return self.model_copy(
            update={
                "fields": fields,
                "any_setter": overlay.any_setter or self.any_setter,
            }
        )


class EnumDescriptor(SerializationBaseModel):
    """Fallback settings of an enum target."""

    model_config = ConfigDict(frozen=True)

    target: type = Field(..., description="Described enum, or its mixin source")
    default_member: Optional[str] = Field(
        None, description="Name of the member used for unrecognized literals"
    )

    def merge(self, overlay: "EnumDescriptor") -> "EnumDescriptor":
        return self.model_copy(
            update={"default_member": overlay.default_member or self.default_member}
        )
