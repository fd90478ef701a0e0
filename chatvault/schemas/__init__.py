"""Pydantic schemas for request/response validation."""

from chatvault.schemas.chat import ChatCreate, ChatFilter, ChatResponse
from chatvault.schemas.common import (
    BaseSchema,
    CreatedResponse,
    EntityId,
    ErrorDetail,
    ErrorResponse,
)
from chatvault.schemas.message import ChatIdFilter, MessageCreate, MessageResponse
from chatvault.schemas.user import UserCreate, UserResponse

__all__ = [
    # Common
    "BaseSchema",
    "CreatedResponse",
    "EntityId",
    "ErrorDetail",
    "ErrorResponse",
    # User
    "UserCreate",
    "UserResponse",
    # Chat
    "ChatCreate",
    "ChatFilter",
    "ChatResponse",
    # Message
    "ChatIdFilter",
    "MessageCreate",
    "MessageResponse",
]
