"""Repository interfaces for OnlyFacts domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from onlyfacts.domain.repository.fact import FactRepository

__all__ = [
    "FactRepository",
]
