"""
Base Schemas.

Standard API envelopes and the camelCase base model shared by every
request and response schema.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """
    Base for API schemas.

    Attributes are snake_case in Python and camelCase on the wire. Inputs
    are accepted under either name; outputs are serialized by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(BaseModel):
    """One field-level validation problem."""

    field: str
    message: str
    type: str = "value_error"


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Standard success envelope.

    All successful API responses use this structure for consistency.
    """

    message: str
    data: DataT | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: str
    message: str
    code: str
    errors: list[FieldError] | None = None
