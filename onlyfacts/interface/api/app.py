"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onlyfacts.config import Settings
from onlyfacts.interface.api.routes import facts, health
from onlyfacts.interface.error import register_error_handlers
from onlyfacts.persistence.connection import DatabaseConnection
from onlyfacts.util.di.container import create_container, setup_di
from onlyfacts.util.observability import instrument_fastapi


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect to storage in the background and clean up on shutdown.

    Requests arriving before the connection is ready get a 503.
    """
    container: AsyncContainer = app.state.dishka_container
    connection = await container.get(DatabaseConnection)
    connection.start()
    logfire.info("Application started", storage=connection.state.value)
    yield
    await connection.close()
    await container.close()
    logfire.info("Application stopped")


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Logfire must already be configured (scripts/start_app.py, or the test
    conftest).

    Args:
        container: DI container to use; the production container if omitted
    """
    settings = Settings()

    app_instance = FastAPI(
        title="OnlyFacts API",
        description="One fact a day. Agree or disagree.",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(facts.router)

    return app_instance


# Served by uvicorn as onlyfacts.interface.api.app:app
app = create_app()
