"""User schemas."""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from chatvault.schemas.common import BaseSchema

_WHITESPACE_RUN = re.compile(r"\s+")
_USERNAME_PUNCTUATION = frozenset("'. -")


class UserCreate(BaseModel):
    """User registration request."""

    username: str = Field(min_length=3, max_length=300)

    @field_validator("username", mode="before")
    @classmethod
    def collapse_whitespace(cls, value: object) -> object:
        if isinstance(value, str):
            return _WHITESPACE_RUN.sub(" ", value).strip()
        return value

    @field_validator("username")
    @classmethod
    def check_characters(cls, value: str) -> str:
        if not all(ch.isalnum() or ch in _USERNAME_PUNCTUATION for ch in value):
            raise ValueError(
                "username may contain only letters, digits, apostrophes, dots, spaces and hyphens"
            )
        return value


class UserResponse(BaseSchema):
    """User response schema."""

    id: str
    username: str
    created_at: datetime
