"""Database configuration and session management."""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from chatvault.core.config import settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, sizing the pool only for server databases."""
    kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=20)
    return create_async_engine(url, **kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory shared by the services; each lookup opens its own session."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_engine = create_engine_for_url(settings.database_url_async, echo=settings.debug)

async_session_maker = create_session_maker(async_engine)


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Dependency returning the process-wide session factory."""
    return async_session_maker


async def init_db(engine: AsyncEngine = async_engine) -> None:
    """Initialize database (create tables)."""
    # Make sure every model is registered on the metadata
    import chatvault.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine = async_engine) -> None:
    """Close pooled connections on shutdown."""
    await engine.dispose()
