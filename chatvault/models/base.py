"""Base model with common fields."""

import secrets
import string
from datetime import UTC, datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from chatvault.core.database import Base

ID_LENGTH = 25
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """Generate a 25-character identifier (``c`` followed by 24 random characters)."""
    return "c" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_LENGTH - 1))


def utcnow() -> datetime:
    return datetime.now(UTC)


class IDMixin:
    """Mixin for string primary key."""

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=generate_id,
    )


class BaseModelNoUpdate(Base, IDMixin):
    """Base model with id primary key and created_at only (rows are immutable)."""

    __abstract__ = True

    # Assigned client-side with microsecond precision so rows created within
    # the same second still sort in creation order.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
