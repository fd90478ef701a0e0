"""SQLAlchemy models."""

from chatvault.models.chat import Chat, Message, chat_members
from chatvault.models.user import User

__all__ = [
    "User",
    "Chat",
    "Message",
    "chat_members",
]
