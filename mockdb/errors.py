"""
Exception taxonomy for mockdb.

Decode failures in the substrate never surface as exceptions; everything
below is something a caller is expected to react to.
"""

from __future__ import annotations


class MockDbError(Exception):
    """Base class for all mockdb errors."""


class StorageWriteError(MockDbError):
    """A collection could not be serialized or written (strict mode only)."""

    def __init__(self, collection: str, reason: str) -> None:
        super().__init__(f"Failed to save collection '{collection}': {reason}")
        self.collection = collection
        self.reason = reason


class DocumentNotFoundError(MockDbError, LookupError):
    """update/remove targeted an id that is not in the persisted collection."""

    def __init__(self, collection: str, document_id: str) -> None:
        super().__init__("Document not found")
        self.collection = collection
        self.document_id = document_id

    def __str__(self) -> str:
        return f"Document not found: {self.collection}/{self.document_id}"


class MissingIdentityError(MockDbError):
    """An owner-scoped operation was attempted without an actor identity."""


class SyncError(MockDbError):
    """A simulated cross-role sync failed."""

    def __init__(self, role: str, owner_id: str, data_type: str) -> None:
        super().__init__(f"Sync failed for {role} {owner_id}, type: {data_type}")
        self.role = role
        self.owner_id = owner_id
        self.data_type = data_type


__all__ = [
    "MockDbError",
    "StorageWriteError",
    "DocumentNotFoundError",
    "MissingIdentityError",
    "SyncError",
]
