"""Tests for the serialization configuration value."""

import pytest
from pydantic import ValidationError

from api_serialization.models import NamingStrategy, SerializationConfig


class Target:
    pass


class Source:
    pass


class OtherSource:
    pass


@pytest.mark.unit
class TestSerializationConfig:
    """Tests for SerializationConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = SerializationConfig()

        assert config.naming_strategy is NamingStrategy.CAMEL_TO_SNAKE
        assert config.mixins == {}
        assert config.ignore_any_setter_annotation is False
        assert config.disable_read_unknown_enum_values_as_default_value is False

    def test_setters_are_fluent(self) -> None:
        """Test every setter returns the same configuration."""
        config = SerializationConfig()

        result = (
            config.set_naming_strategy(NamingStrategy.IDENTITY)
            .set_mixins({Target: Source})
            .set_should_ignore_any_setter_annotation()
            .set_should_disable_read_unknown_enum_values_as_default_value()
        )

        assert result is config
        assert config.naming_strategy is NamingStrategy.IDENTITY
        assert config.mixins == {Target: Source}
        assert config.ignore_any_setter_annotation is True
        assert config.disable_read_unknown_enum_values_as_default_value is True

    def test_boolean_switches_are_independent(self) -> None:
        """Test switching one flag leaves the other untouched."""
        config = SerializationConfig().set_should_ignore_any_setter_annotation()
        assert config.disable_read_unknown_enum_values_as_default_value is False

        config.set_should_ignore_any_setter_annotation(False)
        assert config.ignore_any_setter_annotation is False

    def test_set_mixins_copies_mapping(self) -> None:
        """Test later changes to the given mapping are not seen."""
        mixins: dict[type, type] = {Target: Source}
        config = SerializationConfig().set_mixins(mixins)

        mixins[Source] = Target

        assert config.mixins == {Target: Source}

    def test_add_mixin(self) -> None:
        """Test overlays can be added one at a time."""
        config = SerializationConfig().add_mixin(Target, Source)
        assert config.mixins == {Target: Source}

    def test_add_mixin_duplicate_target(self) -> None:
        """Test a target can only have one overlay."""
        config = SerializationConfig().add_mixin(Target, Source)

        with pytest.raises(ValueError, match="already registered"):
            config.add_mixin(Target, OtherSource)

        assert config.mixins == {Target: Source}

    def test_naming_strategy_by_name(self) -> None:
        """Test strategies may be given by case-insensitive name."""
        config = SerializationConfig(naming_strategy="snake_to_camel")
        assert config.naming_strategy is NamingStrategy.SNAKE_TO_CAMEL

    def test_naming_strategy_never_none(self) -> None:
        """Test the naming strategy cannot be cleared."""
        with pytest.raises(ValidationError):
            SerializationConfig().set_naming_strategy(None)  # type: ignore[arg-type]

    def test_invalid_naming_strategy(self) -> None:
        """Test unknown strategy names are rejected."""
        with pytest.raises(ValidationError, match="Invalid naming strategy"):
            SerializationConfig(naming_strategy="upper")

    def test_mixin_values_must_be_types(self) -> None:
        """Test non-type mixin entries are rejected."""
        with pytest.raises(ValidationError):
            SerializationConfig().set_mixins({Target: "Source"})  # type: ignore[dict-item]

    def test_snapshot_is_independent(self) -> None:
        """Test a snapshot does not follow later changes."""
        config = SerializationConfig().add_mixin(Target, Source)
        snapshot = config.snapshot()

        config.add_mixin(Source, OtherSource).set_should_ignore_any_setter_annotation()

        assert snapshot.mixins == {Target: Source}
        assert snapshot.ignore_any_setter_annotation is False
