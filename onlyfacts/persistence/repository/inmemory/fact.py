"""In-memory fact repository for testing."""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from onlyfacts.domain.model.fact import Fact
from onlyfacts.domain.repository.fact import FactRepository
from onlyfacts.domain.value import FactId


class InMemoryFactStore:
    """Facts shared by every repository built on it.

    Lives for the lifetime of the DI container, so state survives across
    requests the way a database would. One lock per fact plays the part of
    the database row lock.
    """

    def __init__(self) -> None:
        self.facts: dict[FactId, Fact] = {}
        self.locks: defaultdict[FactId, asyncio.Lock] = defaultdict(asyncio.Lock)


class InMemoryFactRepository(FactRepository):
    """In-memory implementation of FactRepository for testing.

    Reads yield to the event loop after fetching, like a database round trip
    would, so concurrent votes in tests really interleave.
    """

    def __init__(self, store: InMemoryFactStore | None = None) -> None:
        self._store = store or InMemoryFactStore()

    async def find_by_id(self, fact_id: FactId) -> Optional[Fact]:
        """Find a fact by ID."""
        fact = self._store.facts.get(fact_id)
        await asyncio.sleep(0)
        return fact

    async def find_current(self) -> Optional[Fact]:
        """Find the most recently published fact."""
        # Latest insert wins a published_at tie
        fact = max(
            reversed(self._store.facts.values()),
            key=lambda f: f.published_at,
            default=None,
        )
        await asyncio.sleep(0)
        return fact

    @asynccontextmanager
    async def locked(self, fact_id: FactId) -> AsyncIterator[Optional[Fact]]:
        """Hold the fact's lock and hand over its state as of acquisition."""
        async with self._store.locks[fact_id]:
            yield await self.find_by_id(fact_id)

    async def save(self, fact: Fact) -> Fact:
        """Save a new fact."""
        self._store.facts[fact.id] = fact
        return fact

    async def compare_and_swap(self, current: Fact, updated: Fact) -> bool:
        """Replace the stored fact if its version is unchanged.

        No await between check and write, so the swap is atomic on the loop.
        """
        stored = self._store.facts.get(current.id)
        if stored is None or stored.version != current.version:
            return False
        self._store.facts[current.id] = updated
        return True
