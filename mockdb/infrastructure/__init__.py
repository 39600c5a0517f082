"""
Infrastructure package for mockdb.

Centralizes persistence concerns: key-value backends and the collection
substrate layered on top of them. Keep this layer focused on I/O and
serialization, decoupled from store and sync logic.
"""

from mockdb.infrastructure.backends import FileBackend, InMemoryBackend, KeyValueBackend
from mockdb.infrastructure.substrate import CollectionSubstrate, build_substrate

__all__ = [
    "CollectionSubstrate",
    "FileBackend",
    "InMemoryBackend",
    "KeyValueBackend",
    "build_substrate",
]
