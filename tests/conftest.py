"""Test configuration and fixtures."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from onlyfacts.domain.model import Fact
from onlyfacts.domain.value import FactId, VoteChoice, VoterId

# Keep telemetry local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)


def make_fact(
    content: str = "Honey never spoils.",
    published_at: datetime | None = None,
    voters: dict[str, VoteChoice] | None = None,
) -> Fact:
    """Helper function to build a consistent Fact for tests.

    Counters are derived from voters so the tally invariant holds.

    Args:
        content: Fact text
        published_at: Publish time (now if omitted)
        voters: Voter ID -> choice

    Returns:
        Valid Fact domain model
    """
    voters = {VoterId(k): v for k, v in (voters or {}).items()}
    agrees = sum(1 for c in voters.values() if c is VoteChoice.AGREE)
    return Fact(
        id=FactId(uuid4()),
        content=content,
        published_at=published_at or datetime.now(timezone.utc),
        agrees=agrees,
        disagrees=len(voters) - agrees,
        voters=voters,
    )
