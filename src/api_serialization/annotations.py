"""Declaring serialization metadata on dataclasses and enums.

Target types describe themselves once, at class creation time::

    @json_enum(default="UNKNOWN")
    class Letter(Enum):
        A = "A"
        UNKNOWN = "UNKNOWN"

    @json_object(any_setter="handle_unknown")
    @dataclass
    class Payload:
        user_id: int = json_property("id", default=0)
        letter: Letter | None = None
        secret: str | None = json_property(ignore=True, default=None)

        def handle_unknown(self, field: str, value: object) -> None:
            raise ValueError(f"unknown field {field}")

The decorators attach a ``TypeDescriptor`` / ``EnumDescriptor``; undecorated
dataclasses are described from their field metadata on demand. Mixin sources
can be plain classes whose body assigns ``json_property(...)`` to the names of
the target's fields.
"""

import dataclasses
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional, TypeVar

from api_serialization.models.descriptors import (
    AnySetter,
    EnumDescriptor,
    FieldDescriptor,
    TypeDescriptor,
)
from api_serialization.utils.errors import MapperConfigurationError

METADATA_KEY = "api_serialization"
TYPE_DESCRIPTOR_ATTR = "__json_descriptor__"
ENUM_DESCRIPTOR_ATTR = "__json_enum_descriptor__"

C = TypeVar("C", bound=type)


def json_property(
    wire_name: Optional[str] = None,
    *,
    ignore: Optional[bool] = None,
    **field_kwargs: Any,
) -> Any:
    """Declare a dataclass field with serialization settings.

    Args:
        wire_name: Explicit wire name, overriding the naming strategy
        ignore: Skip the field when reading and writing
        **field_kwargs: Passed to ``dataclasses.field`` (default, default_factory, ...)

    Returns:
        A ``dataclasses.Field`` carrying the settings in its metadata
    """
    settings: dict[str, Any] = {}
    if wire_name is not None:
        settings["wire_name"] = wire_name
    if ignore is not None:
        settings["ignored"] = ignore

    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = settings
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _declared_fields(cls: type) -> dict[str, FieldDescriptor]:
    if dataclasses.is_dataclass(cls):
        return {
            f.name: FieldDescriptor(name=f.name, **f.metadata.get(METADATA_KEY, {}))
            for f in dataclasses.fields(cls)
        }

    # Plain mixin classes keep unprocessed Field objects as class attributes
    declared: dict[str, FieldDescriptor] = {}
    for klass in reversed(cls.__mro__[:-1]):
        for name, value in vars(klass).items():
            if isinstance(value, dataclasses.Field):
                settings = value.metadata.get(METADATA_KEY, {})
                declared[name] = FieldDescriptor(name=name, **settings)
    return declared


def _inherited_any_setter(cls: type) -> Optional[AnySetter]:
    for base in cls.__mro__[1:]:
        descriptor = base.__dict__.get(TYPE_DESCRIPTOR_ATTR)
        if descriptor is not None:
            return descriptor.any_setter
    return None


def _build_type_descriptor(
    cls: type, any_setter: Optional[AnySetter]
) -> TypeDescriptor:
    return TypeDescriptor(
        target=cls,
        fields=_declared_fields(cls),
        any_setter=any_setter or _inherited_any_setter(cls),
    )


def json_object(
    cls: Optional[C] = None,
    *,
    any_setter: str | AnySetter | None = None,
) -> C | Callable[[C], C]:
    """Attach a ``TypeDescriptor`` to a dataclass or mixin class.

    Apply above ``@dataclass`` so the fields already exist.

    Args:
        cls: Class being decorated (when used without arguments)
        any_setter: Method name on the class, or a callable taking
            ``(instance, field_name, value)``, receiving unknown input fields

    Raises:
        MapperConfigurationError: If ``any_setter`` names a missing or
            non-callable attribute
    """

    def wrap(klass: C) -> C:
        handler = any_setter
        if isinstance(handler, str):
            handler = getattr(klass, handler, None)
            if not callable(handler):
                raise MapperConfigurationError(
                    f"{klass.__name__} has no callable '{any_setter}' to use as any-setter",
                    details={"type": klass.__name__, "any_setter": any_setter},
                )
        setattr(klass, TYPE_DESCRIPTOR_ATTR, _build_type_descriptor(klass, handler))
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


def json_enum(default: Optional[str] = None) -> Callable[[C], C]:
    """Attach an ``EnumDescriptor`` naming the fallback member.

    Args:
        default: Name of the member unrecognized literals resolve to

    Raises:
        MapperConfigurationError: If the decorated enum has no such member
    """

    def wrap(klass: C) -> C:
        if (
            default is not None
            and issubclass(klass, Enum)
            and default not in klass.__members__
        ):
            raise MapperConfigurationError(
                f"{klass.__name__} has no member '{default}' to use as default",
                details={"type": klass.__name__, "default": default},
            )
        setattr(
            klass,
            ENUM_DESCRIPTOR_ATTR,
            EnumDescriptor(target=klass, default_member=default),
        )
        return klass

    return wrap


def describe_type(cls: type) -> TypeDescriptor:
    """Return the descriptor declared for ``cls``, building one if undecorated."""
    descriptor = cls.__dict__.get(TYPE_DESCRIPTOR_ATTR)
    if descriptor is not None:
        return descriptor
    return _build_type_descriptor(cls, None)


def describe_enum(cls: type) -> EnumDescriptor:
    """Return the enum descriptor declared for ``cls``, or an empty one."""
    descriptor = cls.__dict__.get(ENUM_DESCRIPTOR_ATTR)
    if descriptor is not None:
        return descriptor
    return EnumDescriptor(target=cls)
