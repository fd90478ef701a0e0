"""Error taxonomy shared by every service.

Services raise one of a closed set of error kinds. Anything else that escapes
a service operation (storage faults, cryptographic faults, bugs) is normalized
to ``InternalError`` at the operation boundary so no internal detail reaches
the caller.
"""

import asyncio
import enum
import functools
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, ClassVar, ParamSpec, TypeVar

from fastapi import status

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Failure kinds exposed to callers."""

    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


# =============================================================================
# Exceptions
# =============================================================================


class ChatServiceError(Exception):
    """Base class for failures raised by the chat services."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL
    status_code: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def details(self) -> dict[str, Any] | None:
        """Structured detail for the response body."""
        return None


class ConflictError(ChatServiceError):
    """A uniqueness invariant would be violated."""

    kind = ErrorKind.CONFLICT
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(ChatServiceError):
    """One or more referenced entities do not exist."""

    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, missing_ids: Iterable[str] = (), message: str | None = None):
        self.entity = entity
        self.missing_ids = list(missing_ids)
        if message is None:
            if len(self.missing_ids) > 1:
                message = f"{entity.capitalize()}s not found: {', '.join(self.missing_ids)}"
            elif self.missing_ids:
                message = f"{entity.capitalize()} not found: {self.missing_ids[0]}"
            else:
                message = f"{entity.capitalize()} not found"
        super().__init__(message)

    @property
    def details(self) -> dict[str, Any] | None:
        if not self.missing_ids:
            return None
        return {"entity": self.entity, "missing_ids": self.missing_ids}


class ForbiddenError(ChatServiceError):
    """The acting user may not perform the operation."""

    kind = ErrorKind.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN


class InternalError(ChatServiceError):
    """Any failure that is not one of the recognized kinds."""

    kind = ErrorKind.INTERNAL
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


# =============================================================================
# Normalization
# =============================================================================


def normalize_error(exc: BaseException) -> ChatServiceError:
    """Pass recognized errors through, collapse everything else to InternalError."""
    if isinstance(exc, ChatServiceError):
        return exc
    return InternalError()


def error_boundary(operation: str) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Wrap an exposed async service operation with logging and normalization."""

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except ChatServiceError as e:
                logger.error(f"{operation} failed: {e.kind.value}: {e.message}")
                raise
            except Exception as e:
                logger.exception(f"{operation} failed with unexpected error: {type(e).__name__}")
                raise normalize_error(e) from e

        return wrapper

    return decorator


# =============================================================================
# Helpers
# =============================================================================


async def require_existing(lookup: Awaitable[T | None], entity: str, entity_id: str) -> T:
    """Await a lookup and raise NotFoundError when it yields nothing."""
    found = await lookup
    if found is None:
        raise NotFoundError(entity, [entity_id])
    return found


async def run_concurrently(*aws: Awaitable[Any]) -> list[Any]:
    """Run independent steps concurrently and return results in argument order.

    The first failure cancels the remaining steps and is re-raised once they
    have finished unwinding.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
