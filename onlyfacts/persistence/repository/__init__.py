"""PostgreSQL repository implementations."""

from onlyfacts.persistence.repository.fact import PostgresFactRepository

__all__ = [
    "PostgresFactRepository",
]
