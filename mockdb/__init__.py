"""
mockdb - client-local emulation of a remote document database.

This package keeps named collections of schema-flexible records in a
persistent key-value substrate and exposes them through:

- A collection store with filtered reads and CRUD writes
- An owner-scoped realtime store with notification, health-alert and
  health-metrics operations
- A cross-role synchronization service with a live-sync listener registry

Simulated network latency goes through an injectable delay so tests run
without real waits.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from mockdb.config import Settings, get_settings
from mockdb.domain.models import FilterPredicate, SyncEvent
from mockdb.errors import (
    DocumentNotFoundError,
    MissingIdentityError,
    MockDbError,
    StorageWriteError,
    SyncError,
)
from mockdb.identity import IdentityProvider, SessionIdentity
from mockdb.infrastructure import (
    CollectionSubstrate,
    FileBackend,
    InMemoryBackend,
    build_substrate,
)
from mockdb.stores import CollectionStore, RealtimeStore, StoreState, sort_by_timestamp
from mockdb.sync import DataSyncService, Role, SyncOperations
from mockdb.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "FilterPredicate",
    "SyncEvent",
    # Errors
    "MockDbError",
    "DocumentNotFoundError",
    "MissingIdentityError",
    "StorageWriteError",
    "SyncError",
    # Identity
    "IdentityProvider",
    "SessionIdentity",
    # Storage
    "CollectionSubstrate",
    "FileBackend",
    "InMemoryBackend",
    "build_substrate",
    # Stores
    "CollectionStore",
    "RealtimeStore",
    "StoreState",
    "sort_by_timestamp",
    # Sync
    "DataSyncService",
    "Role",
    "SyncOperations",
    # Logging
    "configure_logging",
    "get_logger",
]
