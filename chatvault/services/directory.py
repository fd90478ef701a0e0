"""User directory: authoritative lookups and registration of users."""

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatvault.core.errors import ConflictError, error_boundary, require_existing
from chatvault.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Lookups and registration for User records.

    Every lookup opens its own session so callers can issue several of them
    concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def find_by_id(self, user_id: str) -> User | None:
        logger.debug(f"Looking up user by id, user_id={user_id}")
        async with self._session_maker() as session:
            return await session.get(User, user_id)

    async def find_by_ids(self, user_ids: Iterable[str]) -> list[User]:
        """Fetch the users matching ``user_ids``.

        Unknown ids are silently omitted; callers diff the result against the
        requested set themselves.
        """
        unique_ids = set(user_ids)
        logger.debug(f"Looking up {len(unique_ids)} users by id")
        if not unique_ids:
            return []
        async with self._session_maker() as session:
            result = await session.scalars(select(User).where(User.id.in_(unique_ids)))
            return list(result.all())

    async def find_by_username(self, username: str) -> User | None:
        logger.debug(f"Looking up user by username, username={username}")
        async with self._session_maker() as session:
            result = await session.scalars(select(User).where(User.username == username))
            return result.one_or_none()

    async def require_user(self, user_id: str) -> User:
        """Return the user or raise NotFoundError."""
        return await require_existing(self.find_by_id(user_id), "user", user_id)

    @error_boundary("create_user")
    async def create_user(self, username: str) -> User:
        """Register a new user.

        Args:
            username: Display name, unique across the directory.

        Returns:
            The persisted user.

        Raises:
            ConflictError: If the username is already taken.
        """
        logger.info(f"Creating user, username={username}")
        if await self.find_by_username(username) is not None:
            raise ConflictError("A user with this username already exists")

        user = User(username=username)
        try:
            async with self._session_maker.begin() as session:
                session.add(user)
        except IntegrityError as e:
            # Lost a race against a concurrent registration of the same name
            raise ConflictError("A user with this username already exists") from e

        logger.info(f"Created user, user_id={user.id}")
        return user
