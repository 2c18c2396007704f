"""Common response schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that accepts snake_case or camelCase and emits camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None


class NotFoundResponse(BaseModel):
    error: str
    message: str
