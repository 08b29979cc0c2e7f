"""Shared API schema building blocks."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Identifier = Annotated[
    str,
    Field(min_length=1, max_length=128, pattern=r"^[A-Za-z0-9_.:-]+$"),
]


class CamelModel(BaseModel):
    """Model serialised with camelCase keys (``userId``, ``sessionId``)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Error body with a human message, an error code and optional details."""

    error: str
    code: str
    details: Any = None


class StatusMessage(BaseModel):
    """Plain confirmation body."""

    message: str
