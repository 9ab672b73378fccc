"""
Custom exception hierarchy for the portfolio engine.

This module defines domain-specific exceptions for better error handling.
"""


class FolioSyncError(Exception):
    """Base exception for all portfolio engine errors."""

    pass


class ValidationError(FolioSyncError):
    """Raised when input validation fails."""

    pass


class ConfigurationError(FolioSyncError):
    """Raised when configuration is invalid."""

    pass


class CacheError(FolioSyncError):
    """Raised when the local cache cannot read or write an entry."""

    pass


class ItemNotFoundError(ValidationError):
    """Raised when a mutation targets an id missing from the collection."""

    def __init__(self, item_id: str, collection: str = "collection"):
        self.item_id = item_id
        self.collection = collection
        super().__init__(f"Item not found in {collection}: {item_id}")


class RemoteStoreError(FolioSyncError):
    """Raised when the remote store rejects or fails an operation."""

    def __init__(self, message: str, operation: str = "operation"):
        self.operation = operation
        super().__init__(message)
