"""
Stores package for mockdb.

This module re-exports the store contract and the concrete stores so
downstream code can import from `mockdb.stores` directly.
"""

from mockdb.stores.abstract import DocumentStore, StoreState
from mockdb.stores.collection import CollectionStore
from mockdb.stores.ordering import sort_by_timestamp
from mockdb.stores.realtime import RealtimeStore

__all__ = [
    # Contract
    "DocumentStore",
    "StoreState",
    # Concrete stores
    "CollectionStore",
    "RealtimeStore",
    # Helpers
    "sort_by_timestamp",
]
