"""PostgreSQL implementation of Fact repository."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import logfire
from sqlalchemy import ColumnElement, desc, func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from onlyfacts.domain.model import Fact
from onlyfacts.domain.repository import FactRepository
from onlyfacts.domain.value import FactId
from onlyfacts.persistence.mappers import (
    changed_votes,
    fact_to_dict,
    row_to_fact,
    votes_to_dicts,
)
from onlyfacts.persistence.tables import fact_votes_table, facts_table


class PostgresFactRepository(FactRepository):
    """PostgreSQL implementation of FactRepository.

    A fact and its voter ledger are always read in one statement. Under READ
    COMMITTED every statement has its own snapshot, so reading them
    separately could pair counters from before a vote with a ledger from
    after it.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch(self, condition: ColumnElement[bool]) -> Optional[Fact]:
        """Load the fact matching condition together with its voter ledger."""
        stmt = (
            select(facts_table, fact_votes_table.c.voter_id, fact_votes_table.c.choice)
            .select_from(
                facts_table.outerjoin(
                    fact_votes_table, fact_votes_table.c.fact_id == facts_table.c.id
                )
            )
            .where(condition)
        )
        result = await self.session.execute(stmt)
        rows = result.fetchall()
        if not rows:
            return None

        votes = [
            {"voter_id": row.voter_id, "choice": row.choice}
            for row in rows
            if row.voter_id is not None
        ]
        return row_to_fact(rows[0]._asdict(), votes)

    async def find_by_id(self, fact_id: FactId) -> Optional[Fact]:
        """Find a fact by ID."""
        return await self._fetch(facts_table.c.id == fact_id)

    async def find_current(self) -> Optional[Fact]:
        """Find the most recently published fact."""
        latest = (
            select(facts_table.c.id)
            .order_by(desc(facts_table.c.published_at))
            .limit(1)
            .scalar_subquery()
        )
        return await self._fetch(facts_table.c.id == latest)

    @asynccontextmanager
    async def locked(self, fact_id: FactId) -> AsyncIterator[Optional[Fact]]:
        """Lock the facts row with SELECT ... FOR UPDATE, then load it.

        The row lock is held until the request transaction ends. The load
        runs after the lock is granted, so it sees every vote committed by
        the previous lock holder.
        """
        lock = (
            select(facts_table.c.id)
            .where(facts_table.c.id == fact_id)
            .with_for_update()
        )
        result = await self.session.execute(lock)
        if result.scalar_one_or_none() is None:
            yield None
            return
        yield await self.find_by_id(fact_id)

    async def save(self, fact: Fact) -> Fact:
        """Save a new fact."""
        stmt = insert(facts_table).values(**fact_to_dict(fact))
        await self.session.execute(stmt)
        if fact.voters:
            await self.session.execute(insert(fact_votes_table), votes_to_dicts(fact))
        await self.session.flush()
        return fact

    async def compare_and_swap(self, current: Fact, updated: Fact) -> bool:
        """Write counters and changed voter rows if the version is unchanged.

        Votes call this while holding the row lock from locked(). The version
        guard still rejects a write based on a stale read.
        """
        stmt = (
            update(facts_table)
            .where(facts_table.c.id == current.id)
            .where(facts_table.c.version == current.version)
            .values(
                agrees=updated.agrees,
                disagrees=updated.disagrees,
                version=updated.version,
            )
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:  # type: ignore[attr-defined]
            logfire.info(
                "Fact version conflict",
                fact_id=str(current.id),
                expected_version=current.version,
            )
            return False

        votes = changed_votes(current, updated)
        if votes:
            upsert = pg_insert(fact_votes_table).values(votes)
            upsert = upsert.on_conflict_do_update(
                constraint="unique_fact_voter",
                set_={"choice": upsert.excluded.choice, "updated_at": func.now()},
            )
            await self.session.execute(upsert)

        await self.session.flush()
        return True
