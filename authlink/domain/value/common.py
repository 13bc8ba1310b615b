"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable value compared by its fields.

    Credentials, principals and sign-in outcomes are all value objects:
    they are passed between the provider adapter and the services and are
    never mutated in place, only replaced.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )
