"""Strongly typed identifiers for OnlyFacts domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

FactId = NewType("FactId", UUID)

# Self-asserted by the client (generated and kept in browser local storage)
VoterId = NewType("VoterId", str)
