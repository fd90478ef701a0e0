"""Message ledger: membership-checked, encrypted message storage."""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatvault.core.encryption import MessageCipher
from chatvault.core.errors import ForbiddenError, error_boundary, run_concurrently
from chatvault.models.chat import Chat, Message
from chatvault.models.user import User
from chatvault.services.chat_registry import ChatRegistry
from chatvault.services.directory import UserDirectory

logger = logging.getLogger(__name__)


class MessageLedger:
    """Owns message records scoped to a chat.

    Message text is encrypted with the injected cipher before it is persisted
    and decrypted after it is read; plaintext never reaches storage.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        directory: UserDirectory,
        registry: ChatRegistry,
        cipher: MessageCipher,
    ):
        self._session_maker = session_maker
        self._directory = directory
        self._registry = registry
        self._cipher = cipher

    @staticmethod
    def _check_membership(author: User, chat: Chat) -> None:
        if not any(member.id == author.id for member in chat.members):
            raise ForbiddenError("Access denied: user is not a member of this chat")

    async def _decrypt_all(self, messages: list[Message]) -> list[Message]:
        """Decrypt message text in place, keeping the input order."""
        plaintexts = await asyncio.gather(
            *(asyncio.to_thread(self._cipher.decrypt, message.text) for message in messages)
        )
        for message, plaintext in zip(messages, plaintexts):
            message.text = plaintext
        return messages

    @error_boundary("create_message")
    async def create_message(self, chat_id: str, author_id: str, text: str) -> Message:
        """Post a message to a chat.

        The author and the chat are looked up concurrently; either one missing
        is reported as NotFoundError before membership is considered.

        Args:
            chat_id: Target chat.
            author_id: Posting user, must be a member of the chat.
            text: Plaintext message body.

        Returns:
            The persisted message; its ``text`` holds the ciphertext.

        Raises:
            NotFoundError: If the user or the chat does not exist.
            ForbiddenError: If the author is not a member of the chat.
        """
        logger.info(f"Creating message, author_id={author_id}, chat_id={chat_id}")
        author, chat = await run_concurrently(
            self._directory.require_user(author_id),
            self._registry.require_chat_with_members(chat_id),
        )
        self._check_membership(author, chat)

        ciphertext = self._cipher.encrypt(text)

        message = Message(chat_id=chat.id, author_id=author.id, text=ciphertext)
        async with self._session_maker.begin() as session:
            session.add(message)

        logger.info(f"Created message, message_id={message.id}, chat_id={chat_id}")
        return message

    @error_boundary("list_messages")
    async def list_messages(self, chat_id: str) -> list[Message]:
        """Return all messages of a chat, oldest first, with plaintext text.

        Raises:
            NotFoundError: If the chat does not exist.
        """
        logger.info(f"Listing messages, chat_id={chat_id}")
        await self._registry.require_chat(chat_id)

        async with self._session_maker() as session:
            result = await session.scalars(
                select(Message)
                .where(Message.chat_id == chat_id)
                .order_by(Message.created_at.asc(), Message.id.asc())
            )
            messages = list(result.all())

        logger.debug(f"Decrypting {len(messages)} messages, chat_id={chat_id}")
        return await self._decrypt_all(messages)
