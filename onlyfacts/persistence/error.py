"""Persistence layer errors."""


class PersistenceError(Exception):
    """Base persistence error."""

    pass


class StorageUnavailableError(PersistenceError):
    """Storage cannot serve requests right now.

    Transient: callers should back off and retry.
    """

    pass
