"""Domain value objects for OnlyFacts."""

from onlyfacts.domain.value.identifiers import FactId, VoterId
from onlyfacts.domain.value.types import VoteChoice, VotePolicy

__all__ = [
    # Identifiers
    "FactId",
    "VoterId",
    # Types
    "VoteChoice",
    "VotePolicy",
]
