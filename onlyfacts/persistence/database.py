"""Async engine and session factory for the facts database."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from onlyfacts.config import DatabaseSettings, Settings


def _asyncpg_timeouts(database: DatabaseSettings) -> dict[str, float]:
    """asyncpg connect and per-statement timeouts, in seconds."""
    return {
        "timeout": database.connect_timeout,
        "command_timeout": database.command_timeout,
    }


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine.

    Connections are not opened here; DatabaseConnection does the first one.

    Args:
        settings: Application settings
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,  # Drop connections the server closed while idle
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        connect_args=_asyncpg_timeouts(settings.database),
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used for one session per request.

    Facts are immutable pydantic models built from rows, so nothing needs
    expiring after commit; repositories flush explicitly.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
