"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from onlyfacts.domain.model import Fact
from onlyfacts.domain.value import FactId, VoteChoice, VoterId


def row_to_fact(row: Dict[str, Any], vote_rows: Iterable[Dict[str, Any]]) -> Fact:
    """Convert a facts row and its fact_votes rows to a Fact domain model.

    Args:
        row: facts row as dict
        vote_rows: fact_votes rows of this fact as dicts

    Returns:
        Fact domain model
    """
    return Fact(
        id=FactId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        content=row["content"],
        published_at=row["published_at"],
        agrees=row["agrees"],
        disagrees=row["disagrees"],
        voters={
            VoterId(vote["voter_id"]): VoteChoice(vote["choice"]) for vote in vote_rows
        },
        version=row["version"],
    )


def fact_to_dict(fact: Fact) -> Dict[str, Any]:
    """Convert Fact domain model to a facts table dict.

    The voter ledger lives in fact_votes and is not part of the result.

    Args:
        fact: Fact domain model

    Returns:
        Dict suitable for database insertion
    """
    return fact.model_dump(exclude={"voters"})


def votes_to_dicts(fact: Fact) -> list[Dict[str, Any]]:
    """Convert a Fact's voter ledger to fact_votes table dicts.

    Args:
        fact: Fact domain model

    Returns:
        One dict per voter
    """
    return [
        {"fact_id": fact.id, "voter_id": voter_id, "choice": choice.value}
        for voter_id, choice in fact.voters.items()
    ]


def changed_votes(current: Fact, updated: Fact) -> list[Dict[str, Any]]:
    """fact_votes dicts for voter entries that are new or different in updated.

    Args:
        current: Fact before the vote
        updated: Fact after the vote

    Returns:
        Dicts for every new or changed voter entry
    """
    return [
        vote
        for vote in votes_to_dicts(updated)
        if current.voters.get(vote["voter_id"]) is not VoteChoice(vote["choice"])
    ]
