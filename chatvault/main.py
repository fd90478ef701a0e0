"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatvault import __version__
from chatvault.api.errors import register_error_handlers
from chatvault.api.v1 import router as api_v1_router
from chatvault.core.config import settings
from chatvault.core.database import dispose_engine, init_db
from chatvault.core.encryption import get_message_cipher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: load the key pair once so bad key material stops the process here
    logger.info("Starting chatvault API...")
    get_message_cipher()
    await init_db()
    yield
    # Shutdown
    logger.info("Shutting down chatvault API...")
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title="chatvault API",
        description="Chats with fixed membership and messages encrypted at rest",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include API router
    app.include_router(api_v1_router, prefix=settings.api_v1_prefix)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "name": "chatvault API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("chatvault.main:app", host="0.0.0.0", port=8000)
