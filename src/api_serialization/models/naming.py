"""Property naming strategies.

A naming strategy derives the wire-format property name of a field from its
declared Python name. Explicit wire names declared with ``json_property``
always take precedence over the strategy.
"""

from enum import Enum

from pydantic.alias_generators import to_camel, to_pascal, to_snake


class NamingStrategy(Enum):
    """Supported transforms from declared field names to wire names."""

    CAMEL_TO_SNAKE = "CAMEL_TO_SNAKE"
    IDENTITY = "IDENTITY"
    SNAKE_TO_CAMEL = "SNAKE_TO_CAMEL"
    SNAKE_TO_PASCAL = "SNAKE_TO_PASCAL"
    CAMEL_TO_KEBAB = "CAMEL_TO_KEBAB"

    def translate(self, name: str) -> str:
        """Return the wire name for a declared field name.

        Args:
            name: Declared field name

        Returns:
            Wire-format property name
        """
        if self is NamingStrategy.CAMEL_TO_SNAKE:
            return to_snake(name)
        if self is NamingStrategy.SNAKE_TO_CAMEL:
            return to_camel(name)
        if self is NamingStrategy.SNAKE_TO_PASCAL:
            return to_pascal(name)
        if self is NamingStrategy.CAMEL_TO_KEBAB:
            return to_snake(name).replace("_", "-")
        return name

    @classmethod
    def parse(cls, value: object) -> object:
        """Normalize a strategy given by name, case-insensitively.

        Non-string values are returned untouched for the caller's validation.
        """
        if isinstance(value, str):
            normalized = value.strip().upper()
            if normalized not in cls.__members__:
                raise ValueError(
                    f"Invalid naming strategy '{value}'. "
                    f"Must be one of: {sorted(cls.__members__)}"
                )
            return cls[normalized]
        return value
