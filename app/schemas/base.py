"""
Base schema pieces shared by all endpoints.

Provides UTCDatetime type annotation that serializes datetime objects with
Z suffix indicating UTC, and CamelModel which exposes snake_case fields as
camelCase on the wire.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Custom datetime type that serializes with Z suffix for UTC
# Usage: date: UTCDatetime instead of date: datetime
UTCDatetime = Annotated[
    datetime,
    PlainSerializer(
        lambda dt: dt.strftime("%Y-%m-%dT%H:%M:%SZ") if dt else None,
        return_type=str,
    ),
]


class CamelModel(BaseModel):
    """Model whose JSON keys are camelCase (``titleEs``) while Python uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
