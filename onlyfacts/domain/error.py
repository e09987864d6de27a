"""Domain layer errors."""

from onlyfacts.domain.value import VoteChoice


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateVoteError(DomainError):
    """Raised when a voter already has a recorded choice on a fact.

    Carries the recorded choice so the client can reconcile its local state.
    """

    def __init__(self, fact_id: str, voter_id: str, previous_choice: VoteChoice):
        self.fact_id = fact_id
        self.voter_id = voter_id
        self.previous_choice = previous_choice
        super().__init__(
            f"Voter {voter_id} already voted {previous_choice.value} on fact {fact_id}"
        )


class ContentionError(DomainError):
    """A fact stayed contended for every write attempt.

    Transient: the client should back off and retry the vote.
    """

    def __init__(self, fact_id: str, attempts: int):
        self.fact_id = fact_id
        self.attempts = attempts
        super().__init__(
            f"Fact {fact_id} is busy, vote could not be recorded after "
            f"{attempts} attempts; retry shortly"
        )
