"""Configured JSON mapper.

A ``Mapper`` converts between JSON and dataclass instances under a fixed
``SerializationConfig``. For every dataclass it meets, it builds a pydantic
model describing the wire shape (aliases are wire names, enums carry the
fallback policy, unknown fields are kept only when an any-setter will receive
them). Parsing validates into that model and then materializes the dataclass;
writing walks the dataclass and emits wire names.

Mappers are created with ``create_mapper`` and are safe to share between
threads: the policy never changes and the wire-model cache is lock-guarded.
"""

import dataclasses
import enum
import threading
import types
from collections.abc import Mapping, MutableSet
from collections.abc import Set as AbstractSet
from typing import (
    Annotated,
    Any,
    Literal,
    Optional,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    create_model,
)
from pydantic_core import (
    PydanticCustomError,
    PydanticSerializationError,
    to_json,
    to_jsonable_python,
)

from api_serialization.annotations import describe_enum, describe_type
from api_serialization.models.base import SerializationBaseModel
from api_serialization.models.config import SerializationConfig
from api_serialization.models.descriptors import (
    AnySetter,
    EnumDescriptor,
    TypeDescriptor,
)
from api_serialization.models.naming import NamingStrategy
from api_serialization.utils.errors import (
    ErrorCode,
    FormatError,
    InvalidFormatError,
    MapperConfigurationError,
    SerializationError,
)
from api_serialization.utils.logging_config import PACKAGE_LOGGER, ContextLogger

T = TypeVar("T")

INVALID_ENUM_LITERAL = "invalid_enum_literal"


class WireField(SerializationBaseModel):
    """How one dataclass field appears on the wire."""

    name: str
    slot: str
    wire_name: str
    readable: bool
    ignored: bool
    # Skipped constructor argument without a default; receives None
    null_when_skipped: bool = False


class WirePlan(SerializationBaseModel):
    """Resolved wire shape of a dataclass."""

    target: type
    model: type[BaseModel]
    fields: list[WireField]
    discarded_wire_names: frozenset[str]
    any_setter: Optional[AnySetter] = None


class WireSet(list):
    """Set members validated as a JSON array, rebuilt once materialized.

    Wire models of dataclasses are not hashable, so set-typed fields are
    validated as lists and turned back into ``kind`` afterwards.
    """

    def __init__(self, items: Any, kind: type):
        super().__init__(items)
        self.kind = kind


def _strip_annotated(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def _is_mapping(annotation: Any) -> bool:
    origin = get_origin(annotation)
    return isinstance(origin, type) and issubclass(origin, Mapping)


def _model_field(model: Any, wire_name: Any) -> Any:
    if (
        get_origin(model) is None
        and isinstance(model, type)
        and issubclass(model, BaseModel)
    ):
        for info in model.model_fields.values():
            if info.alias == wire_name:
                return info
    return None


def _member_annotation(annotation: Any, part: Any) -> Any:
    """Annotation of the value found at ``part`` inside ``annotation``."""
    info = _model_field(annotation, part)
    if info is not None:
        return info.annotation

    origin = get_origin(annotation)
    args = get_args(annotation)
    if not args:
        return Any
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if isinstance(part, int) and part < len(args):
            return args[part]
        return Any
    if _is_mapping(annotation):
        return args[-1]
    return args[0]


def _union_branch(members: list[Any], upcoming: list[Any]) -> Any:
    """Guess which union member the rest of an error location descends into."""
    if not upcoming:
        return Any
    part = upcoming[0]
    for member in map(_strip_annotated, members):
        if _model_field(member, part) is not None:
            return member
        if get_origin(member) in (None, Literal):
            continue
        if isinstance(part, int) != _is_mapping(member):
            return member
    return Any


def _wire_path(model: type[BaseModel], loc: tuple[Any, ...]) -> str:
    """Dotted error location using wire names and indexes only.

    pydantic inserts the tag of each tried branch when a union fails; those
    tags are dropped.
    """
    parts: list[str] = []
    remaining = list(loc)
    annotation: Any = model
    while remaining:
        annotation = _strip_annotated(annotation)
        if get_origin(annotation) in (Union, types.UnionType):
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(members) == 1:
                annotation = members[0]
                continue
            remaining.pop(0)
            annotation = _union_branch(members, remaining)
            continue

        part = remaining.pop(0)
        parts.append(str(part))
        annotation = _member_annotation(annotation, part)
    return ".".join(parts) or "$"


def _type_key(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class Mapper:
    """JSON reader/writer bound to one serialization policy."""

    def __init__(self, config: SerializationConfig):
        """Initialize mapper.

        Args:
            config: Policy snapshot; use ``create_mapper`` rather than calling
                this directly
        """
        self._config = config
        self._mixins: dict[type, type] = dict(config.mixins)
        self._plans: dict[type, WirePlan] = {}
        self._plans_by_model: dict[type[BaseModel], WirePlan] = {}
        self._enum_types: dict[str, type[enum.Enum]] = {}
        self._building: set[type] = set()
        self._lock = threading.RLock()
        self.logger = ContextLogger(
            f"{PACKAGE_LOGGER}.mapper",
            {"naming_strategy": config.naming_strategy.value},
        )

    # Policy introspection

    @property
    def config(self) -> SerializationConfig:
        """Copy of the policy this mapper was built with."""
        return self._config.snapshot()

    @property
    def naming_strategy(self) -> NamingStrategy:
        return self._config.naming_strategy

    def mixin_count(self) -> int:
        return len(self._mixins)

    def find_mixin_class_for(self, target: type) -> Optional[type]:
        """Return the overlay registered for ``target``, if any."""
        return self._mixins.get(target)

    def type_descriptor(self, target: type) -> TypeDescriptor:
        """Descriptor of ``target`` with its mixin overlay applied."""
        descriptor = describe_type(target)
        source = self._mixins.get(target)
        if source is not None:
            descriptor = descriptor.merge(describe_type(source))
        return descriptor

    def enum_descriptor(self, target: type) -> EnumDescriptor:
        """Enum descriptor of ``target`` with its mixin overlay applied."""
        descriptor = describe_enum(target)
        source = self._mixins.get(target)
        if source is not None:
            descriptor = descriptor.merge(describe_enum(source))
        return descriptor

    def wire_name_for(self, target: type, field_name: str) -> str:
        """Wire name of a field: the explicit override, else the strategy's."""
        declared = self.type_descriptor(target).field(field_name)
        return declared.wire_name or self.naming_strategy.translate(field_name)

    # Reading

    def read_value(self, content: str | bytes, target: type[T]) -> T:
        """Parse JSON text into an instance of ``target``.

        Raises:
            FormatError: If the input does not match the declared structure
            InvalidFormatError: If an enum literal is rejected
            MapperConfigurationError: If ``target`` cannot be mapped
        """
        plan = self._plan_for(target)
        try:
            wire = plan.model.model_validate_json(content)
        except ValidationError as exc:
            raise self._format_error(exc, plan) from exc
        return self._materialize(wire, plan)

    def convert_value(self, data: Mapping[str, Any], target: type[T]) -> T:
        """Build an instance of ``target`` from already-decoded JSON."""
        plan = self._plan_for(target)
        try:
            wire = plan.model.model_validate(data)
        except ValidationError as exc:
            raise self._format_error(exc, plan) from exc
        return self._materialize(wire, plan)

    def _materialize(self, wire: BaseModel, plan: WirePlan) -> Any:
        kwargs: dict[str, Any] = {}
        for field in plan.fields:
            if field.readable:
                if field.slot in wire.model_fields_set:
                    kwargs[field.name] = self._unwrap(getattr(wire, field.slot))
            elif field.null_when_skipped:
                kwargs[field.name] = None
        instance = plan.target(**kwargs)

        # model_extra is only populated when an active any-setter exists
        for name, value in (wire.model_extra or {}).items():
            if name in plan.discarded_wire_names:
                continue
            plan.any_setter(instance, name, value)
        return instance

    def _unwrap(self, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return self._materialize(value, self._plans_by_model[type(value)])
        if isinstance(value, WireSet):
            return value.kind(self._unwrap(item) for item in value)
        if isinstance(value, list):
            return [self._unwrap(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self._unwrap(item) for item in value)
        if isinstance(value, dict):
            return {key: self._unwrap(item) for key, item in value.items()}
        return value

    def _format_error(self, exc: ValidationError, plan: WirePlan) -> FormatError:
        errors = exc.errors(include_url=False)
        target = plan.target

        for error in errors:
            if error["type"] == INVALID_ENUM_LITERAL:
                return InvalidFormatError(
                    field=_wire_path(plan.model, error["loc"]),
                    value=error["input"],
                    target_type=self._enum_types[error["ctx"]["enum"]],
                    details={"target": target.__name__},
                )

        first = errors[0]
        code = (
            ErrorCode.MALFORMED_JSON
            if first["type"] == "json_invalid"
            else ErrorCode.MISMATCHED_INPUT
        )
        return FormatError(
            f"Cannot deserialize {target.__name__}: {first['msg']} "
            f"at '{_wire_path(plan.model, first['loc'])}'",
            code,
            details={
                "target": target.__name__,
                "errors": [
                    {
                        "loc": _wire_path(plan.model, e["loc"]),
                        "type": e["type"],
                        "msg": e["msg"],
                    }
                    for e in errors
                ],
            },
        )

    # Wire models

    def _plan_for(self, target: type) -> WirePlan:
        plan = self._plans.get(target)
        if plan is not None:
            return plan

        with self._lock:
            plan = self._plans.get(target)
            if plan is not None:
                return plan
            if not (isinstance(target, type) and dataclasses.is_dataclass(target)):
                raise MapperConfigurationError(
                    f"{target!r} is not a dataclass",
                    details={"target": repr(target)},
                )
            if target in self._building:
                raise MapperConfigurationError(
                    f"Recursive type {target.__name__} is not supported",
                    details={"target": target.__name__},
                )

            self._building.add(target)
            try:
                plan = self._build_plan(target)
            finally:
                self._building.discard(target)

            self._plans[target] = plan
            self._plans_by_model[plan.model] = plan
            self.logger.bind(target=target.__name__).debug(
                "Wire model built", extra={"fields": len(plan.fields)}
            )
            return plan

    def _build_plan(self, target: type) -> WirePlan:
        descriptor = self.type_descriptor(target)
        hints = get_type_hints(target, include_extras=True)
        any_setter = (
            None if self._config.ignore_any_setter_annotation else descriptor.any_setter
        )

        definitions: dict[str, Any] = {}
        fields: list[WireField] = []
        discarded: set[str] = set()
        claimed: dict[str, str] = {}

        for index, field in enumerate(dataclasses.fields(target)):
            declared = descriptor.field(field.name)
            wire_name = declared.wire_name or self.naming_strategy.translate(field.name)
            readable = field.init and not declared.ignored
            required = (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING
            )
            slot = f"field_{index}"

            if not declared.ignored:
                owner = claimed.setdefault(wire_name, field.name)
                if owner != field.name:
                    raise MapperConfigurationError(
                        f"Fields '{owner}' and '{field.name}' of {target.__name__} "
                        f"both map to wire name '{wire_name}'",
                        details={
                            "target": target.__name__,
                            "wire_name": wire_name,
                            "fields": [owner, field.name],
                        },
                    )

            fields.append(
                WireField(
                    name=field.name,
                    slot=slot,
                    wire_name=wire_name,
                    readable=readable,
                    ignored=declared.ignored,
                    null_when_skipped=field.init and not readable and required,
                )
            )
            if not readable:
                discarded.add(wire_name)
                continue

            definitions[slot] = (
                self._wire_annotation(hints.get(field.name, Any)),
                Field(... if required else None, alias=wire_name),
            )

        model = create_model(
            f"{target.__name__}Wire",
            __config__=ConfigDict(
                extra="allow" if any_setter is not None else "ignore",
                arbitrary_types_allowed=True,
            ),
            **definitions,
        )
        return WirePlan(
            target=target,
            model=model,
            fields=fields,
            discarded_wire_names=frozenset(discarded),
            any_setter=any_setter,
        )

    def _wire_annotation(self, annotation: Any) -> Any:
        origin = get_origin(annotation)
        if origin is None:
            if isinstance(annotation, type):
                if issubclass(annotation, enum.Enum):
                    return self._enum_annotation(annotation)
                if dataclasses.is_dataclass(annotation):
                    return self._plan_for(annotation).model
            return annotation

        if origin is Literal:
            return annotation

        args = get_args(annotation)
        if origin is Annotated:
            base, *metadata = args
            return Annotated[(self._wire_annotation(base), *metadata)]

        if origin in (set, frozenset, AbstractSet, MutableSet):
            kind = set if origin in (set, MutableSet) else frozenset
            item = self._wire_annotation(args[0]) if args else Any
            return Annotated[
                list[item], AfterValidator(lambda items: WireSet(items, kind))
            ]

        resolved = tuple(self._wire_annotation(arg) for arg in args)
        if origin is Union or origin is types.UnionType:
            return Union[resolved]
        return origin[resolved]

    # Enums

    def _enum_annotation(self, enum_cls: type[enum.Enum]) -> Any:
        key = _type_key(enum_cls)
        self._enum_types[key] = enum_cls
        literals = {
            member.value for member in enum_cls if isinstance(member.value, str)
        }
        strict = self._config.disable_read_unknown_enum_values_as_default_value
        enum_logger = self.logger.bind(enum=enum_cls.__name__)

        def read_literal(value: Any) -> Any:
            if isinstance(value, enum_cls) or not isinstance(value, str):
                return value
            if value in literals:
                return value
            if strict:
                raise PydanticCustomError(
                    INVALID_ENUM_LITERAL,
                    "'{value}' is not a member of {enum}",
                    {"value": value, "enum": key},
                )
            default = self._default_member(enum_cls)
            enum_logger.warning(
                "Unknown enum literal replaced by default member",
                extra={"value": value, "default": default.name},
            )
            return default

        return Annotated[enum_cls, BeforeValidator(read_literal)]

    def _default_member(self, enum_cls: type[enum.Enum]) -> enum.Enum:
        default_member = self.enum_descriptor(enum_cls).default_member
        if default_member is None:
            raise MapperConfigurationError(
                f"Enum {enum_cls.__name__} declares no default member for "
                "unrecognized values",
                details={"enum": enum_cls.__name__},
            )
        try:
            return enum_cls[default_member]
        except KeyError:
            raise MapperConfigurationError(
                f"Enum {enum_cls.__name__} has no member '{default_member}'",
                details={"enum": enum_cls.__name__, "default": default_member},
            ) from None

    # Writing

    def value_to_tree(self, value: Any) -> Any:
        """Convert ``value`` to JSON-compatible Python data using wire names.

        ``None`` fields and ignored fields are omitted; enums are written by
        value.
        """
        if value is None:
            return None
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            plan = self._plan_for(type(value))
            tree: dict[str, Any] = {}
            for field in plan.fields:
                if field.ignored:
                    continue
                item = getattr(value, field.name)
                if item is None:
                    continue
                tree[field.wire_name] = self.value_to_tree(item)
            return tree
        if isinstance(value, enum.Enum):
            return self.value_to_tree(value.value)
        if isinstance(value, Mapping):
            return {
                self.value_to_tree(key): self.value_to_tree(item)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.value_to_tree(item) for item in value]
        try:
            return to_jsonable_python(value)
        except PydanticSerializationError as exc:
            raise SerializationError(
                f"Cannot serialize value of type {type(value).__name__}",
                ErrorCode.UNSUPPORTED_TYPE,
                details={"type": type(value).__name__},
            ) from exc

    def write_value_as_bytes(self, value: Any) -> bytes:
        return to_json(self.value_to_tree(value))

    def write_value_as_string(self, value: Any) -> str:
        """Serialize ``value`` to JSON text."""
        return self.write_value_as_bytes(value).decode("utf-8")
