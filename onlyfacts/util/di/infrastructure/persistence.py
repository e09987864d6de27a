"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from onlyfacts.config import Settings
from onlyfacts.domain.repository import FactRepository
from onlyfacts.persistence.connection import DatabaseConnection, engine_connector
from onlyfacts.persistence.database import create_engine, create_session_factory
from onlyfacts.persistence.error import StorageUnavailableError
from onlyfacts.persistence.repository import PostgresFactRepository
from onlyfacts.util.di.base import ProviderBase
from onlyfacts.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the app shuts down."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_connection(
        self, engine: AsyncEngine, settings: Settings
    ) -> DatabaseConnection:
        """Provide the storage connection (starts DISCONNECTED)."""
        return DatabaseConnection(
            connector=engine_connector(engine),
            retry=settings.connection_retry,
        )

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        connection: DatabaseConnection,
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        Refuses to open a session while storage is not ready. The session is
        committed at the end of the request if no exception occurred, or
        rolled back if one was raised.
        """
        connection.check_ready()

        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except OperationalError as e:
                connection.mark_lost(e)
                raise StorageUnavailableError("Lost connection to storage") from e
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_fact_repository(self, session: AsyncSession) -> FactRepository:
        """Provide Fact repository."""
        return PostgresFactRepository(session)
