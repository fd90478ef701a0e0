"""FastAPI dependencies wiring the services together."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatvault.core.database import get_session_maker
from chatvault.core.encryption import MessageCipher, get_message_cipher
from chatvault.services.chat_registry import ChatRegistry
from chatvault.services.directory import UserDirectory
from chatvault.services.message_ledger import MessageLedger

SessionMaker = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_maker)]
Cipher = Annotated[MessageCipher, Depends(get_message_cipher)]


def get_directory(session_maker: SessionMaker) -> UserDirectory:
    return UserDirectory(session_maker)


def get_chat_registry(
    session_maker: SessionMaker,
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> ChatRegistry:
    return ChatRegistry(session_maker, directory)


def get_message_ledger(
    session_maker: SessionMaker,
    directory: Annotated[UserDirectory, Depends(get_directory)],
    registry: Annotated[ChatRegistry, Depends(get_chat_registry)],
    cipher: Cipher,
) -> MessageLedger:
    return MessageLedger(session_maker, directory, registry, cipher)


Directory = Annotated[UserDirectory, Depends(get_directory)]
Registry = Annotated[ChatRegistry, Depends(get_chat_registry)]
Ledger = Annotated[MessageLedger, Depends(get_message_ledger)]
