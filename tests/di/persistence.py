"""Mock persistence providers for testing."""

from dishka import Scope, provide

from onlyfacts.config import Settings
from onlyfacts.domain.repository import FactRepository
from onlyfacts.persistence.connection import DatabaseConnection
from onlyfacts.persistence.repository.inmemory import (
    InMemoryFactRepository,
    InMemoryFactStore,
)
from onlyfacts.util.di.infrastructure.persistence import PersistenceProvider


async def _in_memory_connector() -> None:
    """Nothing to connect to."""


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    The store is APP-scoped so facts survive across requests of one
    container; each test builds its own container, so tests stay isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_fact_store(self) -> InMemoryFactStore:
        """Provide the shared in-memory fact store."""
        return InMemoryFactStore()

    @provide(scope=Scope.APP)
    async def get_connection(self, settings: Settings) -> DatabaseConnection:
        """Provide an already connected storage connection."""
        connection = DatabaseConnection(
            connector=_in_memory_connector, retry=settings.connection_retry
        )
        await connection.connect()
        return connection

    @provide(scope=Scope.REQUEST)
    def get_fact_repository(
        self, store: InMemoryFactStore, connection: DatabaseConnection
    ) -> FactRepository:
        """Provide in-memory fact repository.

        Gated on the connection like the production session, so tests can
        take storage away.
        """
        connection.check_ready()
        return InMemoryFactRepository(store)
