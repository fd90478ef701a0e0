"""Health check endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text

from chatvault.api.deps import SessionMaker

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health_check() -> dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "ok"}


@router.get("/ready")
async def readiness_check(session_maker: SessionMaker) -> dict[str, str]:
    """Readiness check - verifies the database answers."""
    try:
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    return {"status": "ready"}
