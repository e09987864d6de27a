"""In-memory repository implementations for testing."""

from .fact import InMemoryFactRepository, InMemoryFactStore

__all__ = [
    "InMemoryFactRepository",
    "InMemoryFactStore",
]
