"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jamvote.interface.api.routes import health, themes, votes
from jamvote.interface.error import register_error_handlers
from jamvote.util.di.container import create_container, setup_di
from jamvote.util.observability import instrument_fastapi, instrument_httpx


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use (tests pass one built from mocks);
            defaults to the production container

    Returns:
        Configured application
    """
    # Identity provider lookups go through httpx
    instrument_httpx()

    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await container.close()

    app_instance = FastAPI(
        title="Jam Vote API",
        description="Backend API for voting on game jam themes",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    # Clients authenticate with bearer tokens, not cookies
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        max_age=600,
    )

    setup_di(app_instance, container)
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(themes.router)
    app_instance.include_router(votes.router)

    return app_instance
