"""Database connection lifecycle.

Tracks whether storage can serve requests as an explicit state on a
connection object, instead of a shared module-level flag. Handlers ask the
connection directly (via DI) and fail fast with StorageUnavailableError while
it is not ready.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

import logfire
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from onlyfacts.config import ConnectionRetrySettings
from onlyfacts.persistence.error import StorageUnavailableError
from onlyfacts.util.logging import get_logger

logger = get_logger(__name__)

Connector = Callable[[], Awaitable[None]]
Sleep = Callable[[float], Awaitable[None]]


class ConnectionState(str, Enum):
    """Storage connection state."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"


def backoff_delay(retry: ConnectionRetrySettings, attempt: int) -> float:
    """Delay to wait before the given attempt.

    Args:
        retry: Retry policy
        attempt: 1-based attempt number

    Returns:
        Seconds to sleep; 0 for the first attempt
    """
    if attempt <= 1:
        return 0.0
    return min(retry.base_delay * 2 ** (attempt - 2), retry.max_delay)


def engine_connector(engine: AsyncEngine) -> Connector:
    """Build a connector that checks out a connection and runs a trivial query.

    Args:
        engine: SQLAlchemy async engine

    Returns:
        Async callable raising on failure
    """

    async def _connect() -> None:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))

    return _connect


class DatabaseConnection:
    """Storage connection with a queryable readiness state.

    connect() runs a bounded retry loop with exponential back-off. The
    connector and sleep functions are injectable so the loop can be tested
    without a database or real delays.
    """

    def __init__(
        self,
        connector: Connector,
        retry: ConnectionRetrySettings,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._connector = connector
        self._sleep = sleep
        self._task: Optional[asyncio.Task[bool]] = None
        self.retry = retry
        self.state = ConnectionState.DISCONNECTED
        self.last_error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        """Whether storage can currently serve requests."""
        return self.state is ConnectionState.READY

    async def connect(self) -> bool:
        """Connect, retrying with exponential back-off.

        Returns:
            True once connected, False if every attempt failed
        """
        self.state = ConnectionState.CONNECTING

        for attempt in range(1, self.retry.max_attempts + 1):
            delay = backoff_delay(self.retry, attempt)
            if delay:
                await self._sleep(delay)

            try:
                await self._connector()
            except Exception as e:
                # OSError, timeouts and driver errors alike are retried
                self._record_failure(e, attempt)
            else:
                self.state = ConnectionState.READY
                self.last_error = None
                logfire.info("Storage connected", attempt=attempt)
                return True

        self.state = ConnectionState.DISCONNECTED
        logfire.error(
            "Storage connection failed",
            attempts=self.retry.max_attempts,
            error=self.last_error,
        )
        return False

    def _record_failure(self, error: Exception, attempt: int) -> None:
        self.last_error = f"{type(error).__name__}: {error}"
        logger.warning(
            f"Storage connection attempt {attempt}/{self.retry.max_attempts} failed: {self.last_error}"
        )

    def start(self) -> None:
        """Connect in the background unless connected or already connecting."""
        if self.is_ready:
            return
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self.connect())

    def check_ready(self) -> None:
        """Fail fast when storage is not ready.

        A disconnected connection schedules a reconnect before failing.

        Raises:
            StorageUnavailableError: If state is not READY
        """
        if self.is_ready:
            return
        if self.state is ConnectionState.DISCONNECTED:
            self.start()
        raise StorageUnavailableError(f"Storage is {self.state.value}")

    def mark_lost(self, error: Exception) -> None:
        """Record that an in-flight request lost its connection."""
        self.state = ConnectionState.DISCONNECTED
        self.last_error = f"{type(error).__name__}: {error}"
        logfire.warn("Storage connection lost", error=self.last_error)

    async def close(self) -> None:
        """Stop any background connection attempt."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self.state = ConnectionState.DISCONNECTED
