"""Translate service errors into HTTP error responses."""

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chatvault.core.config import Settings, get_settings
from chatvault.core.errors import ChatServiceError, ErrorKind
from chatvault.schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def format_timestamp(settings: Settings, now: datetime | None = None) -> str:
    """Render the current time with the configured format and zone."""
    zone = UTC if settings.error_time_zone.upper() == "UTC" else ZoneInfo(settings.error_time_zone)
    now = now or datetime.now(UTC)
    return now.astimezone(zone).strftime(settings.error_time_format)


def create_error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: list[ErrorDetail] | dict | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        timestamp=format_timestamp(get_settings()),
        request_url=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def chat_service_error_handler(request: Request, exc: ChatServiceError) -> JSONResponse:
    """Recognized service errors keep their kind and message.

    Internal errors always carry the configured default message.
    """
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    message = exc.message
    if exc.kind is ErrorKind.INTERNAL:
        message = get_settings().error_default_message
    return create_error_response(
        request,
        status_code=exc.status_code,
        code=exc.kind.value,
        message=message,
        details=exc.details,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are reported with per-field messages."""
    errors = exc.errors()
    logger.warning(f"Request validation error on {request.url.path}: {errors}")
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            message=err.get("msg", ""),
        )
        for err in errors
    ]
    return create_error_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Request validation failed",
        details=details,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unrecognized becomes a generic internal error."""
    logger.error(f"Unhandled exception on {request.url.path}: {type(exc).__name__}", exc_info=exc)
    return create_error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorKind.INTERNAL.value,
        message=get_settings().error_default_message,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChatServiceError, chat_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
