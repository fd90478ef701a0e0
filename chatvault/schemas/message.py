"""Message schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from chatvault.schemas.common import BaseSchema, EntityId

# Emoji blocks accepted in message text besides ASCII and letters
_EMOJI_RANGES = (
    (0x1F600, 0x1F64F),  # emoticons
    (0x1F300, 0x1F5FF),  # symbols & pictographs
    (0x1F680, 0x1F6FF),  # transport & map
    (0x2600, 0x26FF),  # misc symbols
    (0x2700, 0x27BF),  # dingbats
    (0x1F923, 0x1F92F),
)


def is_allowed_message_char(ch: str) -> bool:
    code = ord(ch)
    if code <= 0x7F or ch.isalpha():
        return True
    return any(low <= code <= high for low, high in _EMOJI_RANGES)


class ChatIdFilter(BaseModel):
    """Messages-of-chat lookup request."""

    chat: EntityId


class MessageCreate(ChatIdFilter):
    """Message creation request."""

    author: EntityId
    text: str = Field(min_length=1, max_length=300)

    @field_validator("text")
    @classmethod
    def check_characters(cls, value: str) -> str:
        if not all(is_allowed_message_char(ch) for ch in value):
            raise ValueError("text may contain only ASCII characters, letters and emoji")
        return value


class MessageResponse(BaseSchema):
    """Message with decrypted text."""

    id: str
    chat: str = Field(validation_alias="chat_id")
    author: str = Field(validation_alias="author_id")
    text: str
    created_at: datetime
