"""
Synchronization package for mockdb.

Exports the cross-role sync service and the helpers built on top of it.
"""

from mockdb.sync.operations import SyncOperations
from mockdb.sync.service import DataSyncService, Role

__all__ = ["DataSyncService", "Role", "SyncOperations"]
