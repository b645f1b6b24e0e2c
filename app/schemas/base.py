"""Base schemas for the application."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema class with common configuration.

    Fields are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SuccessResponse(BaseSchema):
    """Acknowledgement for operations without a resource body."""
    success: bool = True
