"""Chat and message models."""

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Index, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatvault.core.database import Base
from chatvault.models.base import ID_LENGTH, BaseModelNoUpdate

if TYPE_CHECKING:
    from chatvault.models.user import User


chat_members = Table(
    "chat_members",
    Base.metadata,
    Column(
        "chat_id",
        String(ID_LENGTH),
        ForeignKey("chats.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        String(ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Chat(BaseModelNoUpdate):
    """Named conversation with a membership fixed at creation."""

    __tablename__ = "chats"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )

    # Relationships
    members: Mapped[list["User"]] = relationship(
        "User",
        secondary=chat_members,
        order_by="User.username",
    )
    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    def __repr__(self) -> str:
        return f"<Chat {self.name}>"


class Message(BaseModelNoUpdate):
    """Chat message. ``text`` always holds base64 ciphertext."""

    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_chat_id_created_at", "chat_id", "created_at"),)

    chat_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Relationships
    chat: Mapped["Chat"] = relationship(
        "Chat",
        back_populates="messages",
    )

    def __repr__(self) -> str:
        return f"<Message {self.id} in {self.chat_id}>"
