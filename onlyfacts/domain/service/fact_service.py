"""Fact domain service."""

from uuid import uuid4

import logfire

from onlyfacts.domain.error import (
    ContentionError,
    DuplicateVoteError,
    NotFoundError,
    ValidationError,
)
from onlyfacts.domain.model.fact import Fact, utc_now
from onlyfacts.domain.repository import FactRepository
from onlyfacts.domain.value import FactId, VoteChoice, VotePolicy, VoterId

from .base import Service

MAX_CONTENT_LENGTH = 2000
MAX_VOTER_ID_LENGTH = 255


class FactService(Service):
    """Domain service for fact operations."""

    def __init__(
        self,
        fact_repository: FactRepository,
        vote_policy: VotePolicy = VotePolicy.LOCKED,
        max_vote_attempts: int = 10,
    ) -> None:
        """Initialize fact service.

        Args:
            fact_repository: Fact repository
            vote_policy: Whether voters may change a recorded vote
            max_vote_attempts: Optimistic write attempts per vote before
                giving up on a contended fact
        """
        self.fact_repository = fact_repository
        self.vote_policy = vote_policy
        self.max_vote_attempts = max_vote_attempts

    async def create_fact(self, content: str) -> Fact:
        """Publish a new fact.

        The new fact becomes the current fact, since it has the latest
        published_at.

        Args:
            content: Fact text

        Returns:
            Saved fact

        Raises:
            ValidationError: If content is empty, blank or too long
        """
        content = content.strip()
        if not content:
            raise ValidationError("Fact content must not be empty")
        if len(content) > MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Fact content must be at most {MAX_CONTENT_LENGTH} characters"
            )

        with logfire.span("fact_service.create_fact", length=len(content)):
            fact = Fact(
                id=FactId(uuid4()),
                content=content,
                published_at=utc_now(),
            )
            saved = await self.fact_repository.save(fact)
            logfire.info("Fact published", fact_id=str(saved.id))
            return saved

    async def get_current_fact(self) -> Fact | None:
        """Get the most recently published fact.

        Returns:
            Current fact, or None if nothing has been published yet
        """
        with logfire.span("fact_service.get_current_fact"):
            fact = await self.fact_repository.find_current()
            if fact is None:
                logfire.info("No fact published yet")
            return fact

    async def get_fact_by_id(self, fact_id: FactId) -> Fact:
        """Get a fact by ID.

        Args:
            fact_id: Fact ID

        Returns:
            The fact

        Raises:
            NotFoundError: If no fact has this ID
        """
        with logfire.span("fact_service.get_fact_by_id", fact_id=str(fact_id)):
            fact = await self.fact_repository.find_by_id(fact_id)
            if fact is None:
                logfire.warn("Fact not found", fact_id=str(fact_id))
                raise NotFoundError("Fact", str(fact_id))
            return fact

    async def apply_vote(
        self, fact_id: FactId, voter_id: VoterId, choice: VoteChoice
    ) -> Fact:
        """Record a voter's choice on a fact.

        Read, check and write run while holding the fact's write lock, so
        concurrent votes on one fact are applied one after another and each
        is checked against the ledger left by the previous one. A voter can
        therefore never be counted twice, and no burst of distinct voters is
        turned away. The version-guarded write stays as a second line of
        defence; a conflict there is retried up to max_vote_attempts times.

        Args:
            fact_id: Fact ID
            voter_id: Self-asserted voter identifier
            choice: Agree or disagree

        Returns:
            The fact with the vote applied

        Raises:
            ValidationError: If voter_id is empty or too long
            NotFoundError: If no fact has this ID
            DuplicateVoteError: If the voter already has a recorded vote that
                the active policy does not let them replace
            ContentionError: If every write attempt hit a version conflict
        """
        voter_id = VoterId(voter_id.strip())
        if not voter_id:
            raise ValidationError("Voter ID must not be empty")
        if len(voter_id) > MAX_VOTER_ID_LENGTH:
            raise ValidationError(
                f"Voter ID must be at most {MAX_VOTER_ID_LENGTH} characters"
            )

        with logfire.span(
            "fact_service.apply_vote",
            fact_id=str(fact_id),
            voter_id=voter_id,
            choice=choice.value,
            policy=self.vote_policy.value,
        ):
            for attempt in range(1, self.max_vote_attempts + 1):
                async with self.fact_repository.locked(fact_id) as fact:
                    if fact is None:
                        logfire.warn("Fact not found", fact_id=str(fact_id))
                        raise NotFoundError("Fact", str(fact_id))

                    try:
                        updated = fact.with_vote(voter_id, choice, self.vote_policy)
                    except DuplicateVoteError as e:
                        logfire.warn(
                            "Duplicate vote attempt",
                            fact_id=str(fact_id),
                            voter_id=voter_id,
                            previous_choice=e.previous_choice.value,
                        )
                        raise

                    if await self.fact_repository.compare_and_swap(fact, updated):
                        logfire.info(
                            "Vote recorded",
                            fact_id=str(fact_id),
                            voter_id=voter_id,
                            choice=choice.value,
                            changed_from=(
                                fact.voters[voter_id].value
                                if voter_id in fact.voters
                                else None
                            ),
                            attempt=attempt,
                        )
                        return updated

                logfire.warn(
                    "Version conflict under fact lock, retrying vote",
                    fact_id=str(fact_id),
                    attempt=attempt,
                )

            logfire.error(
                "Vote abandoned after repeated write conflicts",
                fact_id=str(fact_id),
                attempts=self.max_vote_attempts,
            )
            raise ContentionError(str(fact_id), self.max_vote_attempts)
