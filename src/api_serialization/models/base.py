"""Base model configuration for all Pydantic models."""

from pydantic import BaseModel, ConfigDict


class SerializationBaseModel(BaseModel):
    """Base model with common configuration for all models.

    Configuration:
    - extra="forbid": Reject unexpected fields (strict validation)
    - validate_assignment=True: Validate on attribute assignment
    - arbitrary_types_allowed=True: Allow classes and callables as values
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )
