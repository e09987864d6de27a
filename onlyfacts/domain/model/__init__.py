"""Domain model entities for OnlyFacts."""

from onlyfacts.domain.model.fact import Fact

__all__ = [
    "Fact",
]
