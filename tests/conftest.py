"""Shared fixtures.

A throwaway RSA key pair and a SQLite URL are exported before the package is
imported, since settings are read once at import time.
"""

import os

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

_private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

PRIVATE_KEY_PEM = _private_key.private_bytes(
    encoding=serialization.Encoding.PEM,
    format=serialization.PrivateFormat.PKCS8,
    encryption_algorithm=serialization.NoEncryption(),
).decode()
PUBLIC_KEY_PEM = (
    _private_key.public_key()
    .public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    .decode()
)

os.environ["MESSAGE_PUBLIC_KEY"] = PUBLIC_KEY_PEM
os.environ["MESSAGE_PRIVATE_KEY"] = PRIVATE_KEY_PEM
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "development"
os.environ["DEBUG"] = "false"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from chatvault.core.database import (  # noqa: E402
    create_engine_for_url,
    create_session_maker,
    dispose_engine,
    init_db,
)
from chatvault.core.encryption import MessageCipher  # noqa: E402
from chatvault.models.user import User  # noqa: E402
from chatvault.services.chat_registry import ChatRegistry  # noqa: E402
from chatvault.services.directory import UserDirectory  # noqa: E402
from chatvault.services.message_ledger import MessageLedger  # noqa: E402


@pytest.fixture(scope="session")
def cipher() -> MessageCipher:
    return MessageCipher(PUBLIC_KEY_PEM, PRIVATE_KEY_PEM)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite so concurrent lookups get separate connections."""
    engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'chatvault.db'}")
    await init_db(engine)
    yield engine
    await dispose_engine(engine)


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest.fixture
def directory(session_maker) -> UserDirectory:
    return UserDirectory(session_maker)


@pytest.fixture
def registry(session_maker, directory) -> ChatRegistry:
    return ChatRegistry(session_maker, directory)


@pytest.fixture
def ledger(session_maker, directory, registry, cipher) -> MessageLedger:
    return MessageLedger(session_maker, directory, registry, cipher)


@pytest.fixture
def make_users(directory):
    """Register users by name and return them in the same order."""

    async def _make_users(*usernames: str) -> list[User]:
        return [await directory.create_user(name) for name in usernames]

    return _make_users
