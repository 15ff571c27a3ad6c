"""Shared schema base and generic responses."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire model: camelCase JSON, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MessageResponse(CamelModel):
    """Generic message response."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str
    message: str
    field: str | None = None
