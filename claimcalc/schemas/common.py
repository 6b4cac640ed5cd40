"""Shared schema primitives."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CamelSchema(BaseSchema):
    """Serialized with camelCase keys; accepts camelCase or snake_case input."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ErrorDetail(BaseSchema):
    field: str | None = None
    message: str


class ErrorResponse(BaseSchema):
    error: str
    details: list[ErrorDetail] = []
