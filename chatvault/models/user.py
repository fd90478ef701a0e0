"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatvault.models.base import BaseModelNoUpdate

if TYPE_CHECKING:
    from chatvault.models.chat import Chat


class User(BaseModelNoUpdate):
    """User record owned by the directory."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(300),
        unique=True,
        nullable=False,
        index=True,
    )

    # Read-only view of memberships; membership is written through Chat.members
    chats: Mapped[list["Chat"]] = relationship(
        "Chat",
        secondary="chat_members",
        order_by="Chat.created_at.desc()",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"
