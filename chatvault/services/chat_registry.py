"""Chat registry: creation of chats with a validated, fixed membership."""

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from chatvault.core.errors import (
    ConflictError,
    NotFoundError,
    error_boundary,
    require_existing,
    run_concurrently,
)
from chatvault.models.chat import Chat
from chatvault.models.user import User
from chatvault.services.directory import UserDirectory

logger = logging.getLogger(__name__)

CHAT_NAME_TAKEN = "Chat name is already taken"


def find_missing_ids(requested: Iterable[str], found: Iterable[str]) -> list[str]:
    """Return requested ids absent from ``found``, deduplicated, in request order."""
    found_ids = set(found)
    missing: list[str] = []
    for user_id in requested:
        if user_id not in found_ids and user_id not in missing:
            missing.append(user_id)
    return missing


class ChatRegistry:
    """Owns chat records and their membership sets."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        directory: UserDirectory,
    ):
        self._session_maker = session_maker
        self._directory = directory

    # =========================================================================
    # Lookups
    # =========================================================================

    async def find_by_id(self, chat_id: str) -> Chat | None:
        logger.debug(f"Looking up chat by id, chat_id={chat_id}")
        async with self._session_maker() as session:
            return await session.get(Chat, chat_id)

    async def find_by_name(self, name: str) -> Chat | None:
        logger.debug(f"Looking up chat by name, name={name}")
        async with self._session_maker() as session:
            result = await session.scalars(select(Chat).where(Chat.name == name))
            return result.one_or_none()

    async def find_with_members(self, chat_id: str) -> Chat | None:
        """Fetch a chat with its member users eagerly loaded."""
        logger.debug(f"Looking up chat with members, chat_id={chat_id}")
        async with self._session_maker() as session:
            result = await session.scalars(
                select(Chat).where(Chat.id == chat_id).options(selectinload(Chat.members))
            )
            return result.one_or_none()

    async def require_chat(self, chat_id: str) -> Chat:
        return await require_existing(self.find_by_id(chat_id), "chat", chat_id)

    async def require_chat_with_members(self, chat_id: str) -> Chat:
        return await require_existing(self.find_with_members(chat_id), "chat", chat_id)

    # =========================================================================
    # Validation steps
    # =========================================================================

    async def _check_name_available(self, name: str) -> None:
        if await self.find_by_name(name) is not None:
            raise ConflictError(CHAT_NAME_TAKEN)

    async def _resolve_members(self, member_ids: list[str]) -> list[User]:
        """Resolve every requested member or fail naming all missing ids."""
        users = await self._directory.find_by_ids(member_ids)
        missing = find_missing_ids(member_ids, (user.id for user in users))
        if missing:
            raise NotFoundError("user", missing)
        return users

    # =========================================================================
    # Operations
    # =========================================================================

    async def create_chat(self, name: str, member_ids: Iterable[str]) -> Chat:
        """Create a chat after validating its name and members.

        The name check and the member lookup run concurrently and both must
        pass; nothing is written otherwise. The chat row and its membership
        links are committed in one transaction.

        Args:
            name: Globally unique chat name.
            member_ids: Ids of the members; duplicates are collapsed. Must not
                be empty.

        Returns:
            The persisted chat with ``members`` populated.

        Raises:
            ValueError: If ``member_ids`` is empty (caller precondition).
            ConflictError: If the name is taken (also on a lost insert race).
            NotFoundError: Naming every member id that does not exist.
        """
        requested = list(dict.fromkeys(member_ids))
        if not requested:
            raise ValueError("A chat needs at least one member")
        return await self._create_chat(name, requested)

    @error_boundary("create_chat")
    async def _create_chat(self, name: str, requested: list[str]) -> Chat:
        logger.info(f"Creating chat, name={name}, members={len(requested)}")
        _, users = await run_concurrently(
            self._check_name_available(name),
            self._resolve_members(requested),
        )

        try:
            async with self._session_maker.begin() as session:
                chat = Chat(name=name)
                chat.members = [await session.merge(user, load=False) for user in users]
                session.add(chat)
        except IntegrityError as e:
            raise ConflictError(CHAT_NAME_TAKEN) from e

        logger.info(f"Created chat, chat_id={chat.id}, name={name}")
        return chat

    @error_boundary("find_chats_for_user")
    async def find_chats_for_user(self, user_id: str) -> list[Chat]:
        """List the chats a user belongs to, newest first, members resolved.

        A known user without chats yields an empty list; an unknown user
        raises NotFoundError.
        """
        logger.info(f"Listing chats for user, user_id={user_id}")
        async with self._session_maker() as session:
            result = await session.scalars(
                select(User)
                .where(User.id == user_id)
                .options(selectinload(User.chats).selectinload(Chat.members))
            )
            user = result.one_or_none()

        if user is None:
            raise NotFoundError("user", [user_id])
        return list(user.chats)
