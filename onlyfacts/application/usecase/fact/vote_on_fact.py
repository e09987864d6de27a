"""Vote on fact use case."""

from pydantic import BaseModel

from onlyfacts.domain.service import FactService
from onlyfacts.domain.value import VoteChoice, VoterId

from .common import FactResponse, parse_fact_id


class VoteOnFactRequest(BaseModel):
    """Vote on fact request."""

    fact_id: str  # UUID string
    voter_id: str  # Client-generated, unauthenticated
    choice: VoteChoice


class VoteOnFactUseCase:
    """Use case for agreeing or disagreeing with a fact."""

    def __init__(self, fact_service: FactService) -> None:
        """Initialize vote on fact use case.

        Args:
            fact_service: Fact domain service
        """
        self.fact_service = fact_service

    async def execute(self, request: VoteOnFactRequest) -> FactResponse:
        """Execute vote flow.

        Args:
            request: Vote request

        Returns:
            The fact with updated tallies

        Raises:
            NotFoundError: If the fact does not exist or the ID is malformed
            ValidationError: If the voter ID is empty or too long
            DuplicateVoteError: If the voter's vote cannot be recorded again
            ContentionError: If the fact stayed contended
        """
        fact = await self.fact_service.apply_vote(
            fact_id=parse_fact_id(request.fact_id),
            voter_id=VoterId(request.voter_id),
            choice=request.choice,
        )
        return FactResponse.from_fact(fact)
