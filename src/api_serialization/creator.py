"""Mapper construction.

``create_mapper`` is the single place a serialization policy turns into a
working mapper. The HTTP layer calls it once at startup and shares the
result.
"""

from api_serialization.mapper import Mapper
from api_serialization.models.config import SerializationConfig
from api_serialization.utils.logging_config import PACKAGE_LOGGER, ContextLogger

logger = ContextLogger(f"{PACKAGE_LOGGER}.creator")


def create_mapper(config: SerializationConfig) -> Mapper:
    """Create a mapper applying ``config``.

    The configuration is snapshotted, so later changes to ``config`` do not
    affect the returned mapper. Equal configurations produce mappers with
    identical behavior.

    Args:
        config: Serialization policy

    Returns:
        Mapper configured with the policy's naming strategy, mixins,
        unknown-field and enum-fallback handling
    """
    snapshot = config.snapshot()
    mapper = Mapper(snapshot)

    logger.debug(
        "Serialization mapper created",
        extra={
            "naming_strategy": snapshot.naming_strategy.value,
            "mixins": sorted(target.__name__ for target in snapshot.mixins),
            "ignore_any_setter": snapshot.ignore_any_setter_annotation,
            "strict_enums": snapshot.disable_read_unknown_enum_values_as_default_value,
        },
    )
    return mapper
