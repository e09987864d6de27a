"""Fact repository interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Optional

from onlyfacts.domain.model.fact import Fact
from onlyfacts.domain.value import FactId


class FactRepository(ABC):
    """Repository for Fact aggregate.

    Defines the contract for fact persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, fact_id: FactId) -> Optional[Fact]:
        """Find a fact by ID, including its voter ledger.

        Args:
            fact_id: The fact's unique identifier

        Returns:
            The fact if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_current(self) -> Optional[Fact]:
        """Find the most recently published fact.

        Returns:
            The fact with the latest published_at, None if there are no facts
        """
        pass

    @abstractmethod
    def locked(
        self, fact_id: FactId
    ) -> AbstractAsyncContextManager[Optional[Fact]]:
        """Hold an exclusive write lock on a fact for the duration of a block.

        Votes on one fact read, check and write inside this block, so they are
        applied one after another instead of racing. The block receives the
        fact as of lock acquisition (None if it does not exist).

        Usage:
            async with repository.locked(fact_id) as fact:
                ...

        Args:
            fact_id: The fact's unique identifier
        """
        pass

    @abstractmethod
    async def save(self, fact: Fact) -> Fact:
        """Save a new fact (create).

        Args:
            fact: The fact to save

        Returns:
            The saved fact
        """
        pass

    @abstractmethod
    async def compare_and_swap(self, current: Fact, updated: Fact) -> bool:
        """Persist a voted fact if nobody else has written it meanwhile.

        The write succeeds only if the stored version still equals
        current.version. Counters, version and every voter entry that differs
        between current and updated are written together or not at all.

        Args:
            current: The fact as it was read
            updated: The fact after applying a vote

        Returns:
            True if written, False on a version conflict
        """
        pass
