"""Fact aggregate root.

A fact is the single votable piece of content. The current fact is the one
published most recently; visitors agree or disagree with it once each.
"""

from datetime import datetime, timezone

from pydantic import Field, model_validator

from onlyfacts.domain.error import DuplicateVoteError
from onlyfacts.domain.model.common import DomainModel
from onlyfacts.domain.value import FactId, VoteChoice, VotePolicy, VoterId


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Fact(DomainModel):
    """Fact aggregate root.

    Business rules:
    - content and published_at never change after creation
    - agrees/disagrees are a denormalized tally of the voters ledger and must
      always match it exactly
    - a voter appears at most once in the ledger
    - version increases by one with every persisted vote (optimistic locking)
    """

    id: FactId
    content: str = Field(min_length=1, max_length=2000)
    published_at: datetime = Field(default_factory=utc_now)
    agrees: int = Field(default=0, ge=0)
    disagrees: int = Field(default=0, ge=0)
    voters: dict[VoterId, VoteChoice] = Field(default_factory=dict)
    version: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_tally_matches_voters(self) -> "Fact":
        """Validate that the counters agree with the voter ledger."""
        agrees = sum(1 for c in self.voters.values() if c is VoteChoice.AGREE)
        disagrees = len(self.voters) - agrees
        if self.agrees != agrees or self.disagrees != disagrees:
            raise ValueError(
                f"Tally ({self.agrees} agree, {self.disagrees} disagree) does not "
                f"match voters ({agrees} agree, {disagrees} disagree)"
            )
        return self

    @property
    def total_votes(self) -> int:
        """Number of voters who have voted on this fact."""
        return self.agrees + self.disagrees

    def choice_of(self, voter_id: VoterId) -> VoteChoice | None:
        """Return the recorded choice of a voter, if any."""
        return self.voters.get(voter_id)

    def with_vote(
        self, voter_id: VoterId, choice: VoteChoice, policy: VotePolicy
    ) -> "Fact":
        """Return a copy of this fact with the vote applied.

        Counters and the voter ledger change together; this fact is untouched.

        Args:
            voter_id: Self-asserted voter identifier
            choice: The voter's choice
            policy: Whether a recorded choice may be changed

        Returns:
            New Fact with the vote applied and version incremented

        Raises:
            DuplicateVoteError: If the voter repeats their recorded choice, or
                votes again under the locked policy
        """
        previous = self.voters.get(voter_id)

        if previous is not None and (
            previous is choice or policy is VotePolicy.LOCKED
        ):
            raise DuplicateVoteError(
                fact_id=str(self.id), voter_id=voter_id, previous_choice=previous
            )

        agrees, disagrees = self.agrees, self.disagrees
        if previous is VoteChoice.AGREE:
            agrees -= 1
        elif previous is VoteChoice.DISAGREE:
            disagrees -= 1

        if choice is VoteChoice.AGREE:
            agrees += 1
        else:
            disagrees += 1

        # Re-validate rather than model_copy so the tally check runs again
        return Fact(
            id=self.id,
            content=self.content,
            published_at=self.published_at,
            agrees=agrees,
            disagrees=disagrees,
            voters={**self.voters, voter_id: choice},
            version=self.version + 1,
        )
