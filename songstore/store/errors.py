"""Exceptions raised by the catalog, index and maintenance components.

Lookup misses are not errors: they come back as ``(SongInfo(), False)``
or an empty couple list.
"""


class StoreError(Exception):
    """Base class for storage layer failures."""


class StoreConnectionError(StoreError):
    """Raised when the database cannot be opened or the client is closed."""


class QueryError(StoreError):
    """Raised when a statement against the database fails."""


class TransactionError(QueryError):
    """Raised when a batch write fails; nothing from the batch was applied."""


class InvalidInputError(StoreError, ValueError):
    """Raised for arguments rejected before any storage access."""
