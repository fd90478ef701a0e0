"""Chat schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from chatvault.schemas.common import BaseSchema, EntityId
from chatvault.schemas.user import UserResponse


class ChatCreate(BaseModel):
    """Chat creation request."""

    name: str = Field(min_length=3, max_length=100)
    users: list[EntityId] = Field(min_length=1)

    @field_validator("users")
    @classmethod
    def check_unique(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("member ids must be unique")
        return value


class ChatFilter(BaseModel):
    """Chats-of-user lookup request."""

    user: EntityId


class ChatResponse(BaseSchema):
    """Chat with its member users."""

    id: str
    name: str
    created_at: datetime
    users: list[UserResponse] = Field(default_factory=list, validation_alias="members")
