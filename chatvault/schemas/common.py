"""Common schemas and field types."""

import re
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict

ID_LENGTH = 25
ID_PATTERN = re.compile(r"^[a-zA-Z0-9-]+$")


def validate_entity_id(value: str) -> str:
    """Ids are exactly 25 letters, digits or hyphens."""
    if len(value) != ID_LENGTH:
        raise ValueError(f"id must be exactly {ID_LENGTH} characters long")
    if not ID_PATTERN.match(value):
        raise ValueError("id may contain only letters, digits and hyphens")
    return value


EntityId = Annotated[str, AfterValidator(validate_entity_id)]


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class CreatedResponse(BaseModel):
    """Identifier of a newly created record."""

    id: str


class ErrorDetail(BaseModel):
    """Error detail for validation errors."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    code: str
    message: str
    details: list[ErrorDetail] | dict[str, Any] | None = None
    status_code: int
    timestamp: str
    request_url: str | None = None
