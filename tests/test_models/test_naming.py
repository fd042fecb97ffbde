"""Tests for naming strategies."""

import pytest

from api_serialization.models import NamingStrategy


@pytest.mark.unit
class TestNamingStrategy:
    """Tests for NamingStrategy.translate."""

    @pytest.mark.parametrize(
        ("strategy", "name", "expected"),
        [
            (NamingStrategy.CAMEL_TO_SNAKE, "firstName", "first_name"),
            (NamingStrategy.CAMEL_TO_SNAKE, "id", "id"),
            (NamingStrategy.CAMEL_TO_SNAKE, "already_snake", "already_snake"),
            (NamingStrategy.IDENTITY, "firstName", "firstName"),
            (NamingStrategy.SNAKE_TO_CAMEL, "first_name", "firstName"),
            (NamingStrategy.SNAKE_TO_PASCAL, "first_name", "FirstName"),
            (NamingStrategy.CAMEL_TO_KEBAB, "firstName", "first-name"),
        ],
    )
    def test_translate(self, strategy: NamingStrategy, name: str, expected: str) -> None:
        """Test each strategy's transform."""
        assert strategy.translate(name) == expected

    def test_parse_by_name(self) -> None:
        """Test names are matched case-insensitively."""
        assert NamingStrategy.parse(" camel_to_snake ") is NamingStrategy.CAMEL_TO_SNAKE

    def test_parse_passes_members_through(self) -> None:
        """Test non-string values are returned unchanged."""
        assert NamingStrategy.parse(NamingStrategy.IDENTITY) is NamingStrategy.IDENTITY

    def test_parse_unknown_name(self) -> None:
        """Test unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Invalid naming strategy"):
            NamingStrategy.parse("screaming")
