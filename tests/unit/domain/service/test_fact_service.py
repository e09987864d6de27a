"""Unit tests for FactService."""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from onlyfacts.domain.error import (
    ContentionError,
    DuplicateVoteError,
    NotFoundError,
    ValidationError,
)
from onlyfacts.domain.model import Fact
from onlyfacts.domain.repository import FactRepository
from onlyfacts.domain.service import FactService
from onlyfacts.domain.value import FactId, VoteChoice, VotePolicy, VoterId
from onlyfacts.persistence.repository.inmemory import InMemoryFactRepository
from tests.conftest import make_fact
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class ContendedFactRepository(InMemoryFactRepository):
    """Repository where another writer always wins the race."""

    async def compare_and_swap(self, current: Fact, updated: Fact) -> bool:
        return False


class TestCreateFact:
    """Tests for FactService.create_fact."""

    @pytest.mark.asyncio
    async def test_create_fact_starts_with_zero_votes(self, unit_env):
        # Arrange
        service = await unit_env.get(FactService)

        # Act
        fact = await service.create_fact("A day on Venus is longer than a year.")

        # Assert
        assert fact.content == "A day on Venus is longer than a year."
        assert fact.agrees == 0
        assert fact.disagrees == 0
        assert fact.published_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_create_fact_becomes_current(self, unit_env):
        service = await unit_env.get(FactService)

        fact = await service.create_fact("Sharks are older than trees.")

        current = await service.get_current_fact()
        assert current is not None
        assert current.id == fact.id

    @pytest.mark.asyncio
    async def test_create_fact_strips_surrounding_whitespace(self, unit_env):
        service = await unit_env.get(FactService)

        fact = await service.create_fact("  Wombat droppings are cubes.\n")

        assert fact.content == "Wombat droppings are cubes."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    async def test_create_fact_rejects_blank_content(self, unit_env, content):
        """Blank content is rejected and nothing is persisted."""
        # Arrange
        service = await unit_env.get(FactService)

        # Act & Assert
        with pytest.raises(ValidationError, match="must not be empty"):
            await service.create_fact(content)

        assert await service.get_current_fact() is None

    @pytest.mark.asyncio
    async def test_create_fact_rejects_too_long_content(self, unit_env):
        service = await unit_env.get(FactService)

        with pytest.raises(ValidationError, match="at most 2000"):
            await service.create_fact("x" * 2001)

        assert await service.get_current_fact() is None


class TestGetFacts:
    """Tests for current fact and lookup by ID."""

    @pytest.mark.asyncio
    async def test_current_fact_is_none_when_empty(self, unit_env):
        service = await unit_env.get(FactService)

        assert await service.get_current_fact() is None

    @pytest.mark.asyncio
    async def test_current_fact_is_latest_published(self, unit_env):
        """The fact with the latest published_at is current, regardless of insert order."""
        # Arrange
        service = await unit_env.get(FactService)
        repo = await unit_env.get(FactRepository)
        now = datetime.now(timezone.utc)
        newer = make_fact(content="Newer", published_at=now)
        older = make_fact(content="Older", published_at=now - timedelta(days=1))
        await repo.save(newer)
        await repo.save(older)

        # Act
        current = await service.get_current_fact()

        # Assert
        assert current is not None
        assert current.id == newer.id

    @pytest.mark.asyncio
    async def test_get_fact_by_id(self, unit_env):
        service = await unit_env.get(FactService)
        created = await service.create_fact("Honey never spoils.")

        fact = await service.get_fact_by_id(created.id)

        assert fact == created

    @pytest.mark.asyncio
    async def test_get_fact_by_id_not_found(self, unit_env):
        service = await unit_env.get(FactService)

        with pytest.raises(NotFoundError):
            await service.get_fact_by_id(FactId(uuid4()))


class TestApplyVote:
    """Tests for FactService.apply_vote under the default locked policy."""

    @pytest.mark.asyncio
    async def test_distinct_voters_are_all_counted(self, unit_env):
        # Arrange
        service = await unit_env.get(FactService)
        fact = await service.create_fact("Venus spins backwards.")

        # Act
        await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE)
        await service.apply_vote(fact.id, VoterId("bob"), VoteChoice.AGREE)
        updated = await service.apply_vote(
            fact.id, VoterId("carol"), VoteChoice.DISAGREE
        )

        # Assert
        assert updated.agrees == 2
        assert updated.disagrees == 1
        stored = await service.get_fact_by_id(fact.id)
        assert stored == updated

    @pytest.mark.asyncio
    async def test_duplicate_vote_leaves_counters_unchanged(self, unit_env):
        """A second vote by the same voter is rejected with their recorded choice."""
        # Arrange
        service = await unit_env.get(FactService)
        fact = await service.create_fact("Venus spins backwards.")
        await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE)

        # Act & Assert
        with pytest.raises(DuplicateVoteError) as exc_info:
            await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.DISAGREE)

        assert exc_info.value.previous_choice is VoteChoice.AGREE
        stored = await service.get_fact_by_id(fact.id)
        assert stored.agrees == 1
        assert stored.disagrees == 0

    @pytest.mark.asyncio
    async def test_vote_on_unknown_fact(self, unit_env):
        service = await unit_env.get(FactService)

        with pytest.raises(NotFoundError):
            await service.apply_vote(FactId(uuid4()), VoterId("alice"), VoteChoice.AGREE)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("voter_id", ["", "   ", "v" * 256])
    async def test_invalid_voter_id_rejected(self, unit_env, voter_id):
        service = await unit_env.get(FactService)
        fact = await service.create_fact("Venus spins backwards.")

        with pytest.raises(ValidationError):
            await service.apply_vote(fact.id, VoterId(voter_id), VoteChoice.AGREE)

        stored = await service.get_fact_by_id(fact.id)
        assert stored.total_votes == 0

    @pytest.mark.asyncio
    async def test_voter_id_is_stripped(self, unit_env):
        service = await unit_env.get(FactService)
        fact = await service.create_fact("Venus spins backwards.")
        await service.apply_vote(fact.id, VoterId(" alice "), VoteChoice.AGREE)

        with pytest.raises(DuplicateVoteError):
            await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE)

    @pytest.mark.asyncio
    async def test_gives_up_when_fact_stays_contended(self, unit_env):
        # Arrange
        repo = ContendedFactRepository()
        fact = make_fact()
        await repo.save(fact)
        service = FactService(fact_repository=repo, max_vote_attempts=3)

        # Act & Assert
        with pytest.raises(ContentionError, match="busy"):
            await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE)

        stored = await repo.find_by_id(fact.id)
        assert stored.total_votes == 0


class TestApplyVoteAllowChange:
    """Tests for apply_vote when voters may change their vote."""

    @pytest.mark.asyncio
    async def test_changed_vote_moves_between_counters(self, unit_env):
        # Arrange
        repo = await unit_env.get(FactRepository)
        service = FactService(
            fact_repository=repo, vote_policy=VotePolicy.ALLOW_CHANGE
        )
        fact = await service.create_fact("Venus spins backwards.")
        await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE)

        # Act
        updated = await service.apply_vote(
            fact.id, VoterId("alice"), VoteChoice.DISAGREE
        )

        # Assert
        assert updated.agrees == 0
        assert updated.disagrees == 1

    @pytest.mark.asyncio
    async def test_repeated_choice_is_still_duplicate(self, unit_env):
        repo = await unit_env.get(FactRepository)
        service = FactService(
            fact_repository=repo, vote_policy=VotePolicy.ALLOW_CHANGE
        )
        fact = await service.create_fact("Venus spins backwards.")
        await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE)

        with pytest.raises(DuplicateVoteError):
            await service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE)

        stored = await service.get_fact_by_id(fact.id)
        assert stored.agrees == 1


class TestConcurrentVotes:
    """Concurrent votes must never double count a voter or lose a vote."""

    @pytest.mark.asyncio
    async def test_concurrent_distinct_voters_are_all_counted(self, unit_env):
        # Arrange
        service = await unit_env.get(FactService)
        fact = await service.create_fact("Venus spins backwards.")
        voters = [VoterId(f"voter-{i}") for i in range(20)]

        # Act
        await asyncio.gather(
            *(
                service.apply_vote(
                    fact.id,
                    voter,
                    VoteChoice.AGREE if i % 2 == 0 else VoteChoice.DISAGREE,
                )
                for i, voter in enumerate(voters)
            )
        )

        # Assert
        stored = await service.get_fact_by_id(fact.id)
        assert stored.agrees == 10
        assert stored.disagrees == 10
        assert set(stored.voters) == set(voters)

    @pytest.mark.asyncio
    async def test_concurrent_conflicting_votes_locked(self, unit_env):
        """Exactly one of two racing votes by the same voter is recorded."""
        # Arrange
        repo = await unit_env.get(FactRepository)
        service = FactService(fact_repository=repo, vote_policy=VotePolicy.LOCKED)
        fact = await service.create_fact("Venus spins backwards.")

        # Act
        results = await asyncio.gather(
            service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE),
            service.apply_vote(fact.id, VoterId("alice"), VoteChoice.DISAGREE),
            return_exceptions=True,
        )

        # Assert
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], DuplicateVoteError)
        stored = await service.get_fact_by_id(fact.id)
        assert stored.total_votes == 1

    @pytest.mark.asyncio
    async def test_concurrent_conflicting_votes_allow_change(self, unit_env):
        """Both racing votes apply in some order; the voter counts once."""
        # Arrange
        repo = await unit_env.get(FactRepository)
        service = FactService(
            fact_repository=repo, vote_policy=VotePolicy.ALLOW_CHANGE
        )
        fact = await service.create_fact("Venus spins backwards.")

        # Act
        results = await asyncio.gather(
            service.apply_vote(fact.id, VoterId("alice"), VoteChoice.AGREE),
            service.apply_vote(fact.id, VoterId("alice"), VoteChoice.DISAGREE),
            return_exceptions=True,
        )

        # Assert
        assert not [r for r in results if isinstance(r, Exception)]
        stored = await service.get_fact_by_id(fact.id)
        assert stored.total_votes == 1
        assert stored.version == 2

    @pytest.mark.asyncio
    async def test_burst_larger_than_retry_budget_is_all_counted(self, unit_env):
        """Votes queue on the fact lock instead of using up write attempts."""
        # Arrange
        repo = await unit_env.get(FactRepository)
        service = FactService(fact_repository=repo, max_vote_attempts=2)
        fact = await service.create_fact("Venus spins backwards.")

        # Act
        results = await asyncio.gather(
            *(
                service.apply_vote(fact.id, VoterId(f"voter-{i}"), VoteChoice.AGREE)
                for i in range(12)
            ),
            return_exceptions=True,
        )

        # Assert
        assert not [r for r in results if isinstance(r, Exception)]
        stored = await service.get_fact_by_id(fact.id)
        assert stored.agrees == 12
        assert stored.version == 12
