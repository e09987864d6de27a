"""Shared fact use case models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from onlyfacts.domain.error import NotFoundError
from onlyfacts.domain.model import Fact
from onlyfacts.domain.value import FactId


class FactResponse(BaseModel):
    """Public view of a fact.

    Serialized with camelCase names (publishedAt). The voter ledger is never
    exposed: other visitors' choices stay private.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    content: str
    published_at: datetime
    agrees: int
    disagrees: int

    @classmethod
    def from_fact(cls, fact: Fact) -> "FactResponse":
        """Build the public view of a fact."""
        return cls(
            id=str(fact.id),
            content=fact.content,
            published_at=fact.published_at,
            agrees=fact.agrees,
            disagrees=fact.disagrees,
        )


def parse_fact_id(raw: str) -> FactId:
    """Parse a fact ID from a request.

    A malformed ID cannot name an existing fact, so it is reported as
    not found rather than as bad input.

    Raises:
        NotFoundError: If raw is not a UUID
    """
    try:
        return FactId(UUID(raw))
    except ValueError:
        raise NotFoundError("Fact", raw)
