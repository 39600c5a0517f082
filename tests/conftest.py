"""
Pytest configuration for mockdb.

Provides fixtures for:
- In-memory and on-disk substrates
- A mutable actor identity
- Zero-wait and gated latency
- Store and sync service factories wired to the above
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from mockdb.identity import SessionIdentity
from mockdb.infrastructure.backends import FileBackend, InMemoryBackend
from mockdb.infrastructure.substrate import CollectionSubstrate
from mockdb.stores.collection import CollectionStore
from mockdb.stores.realtime import RealtimeStore
from mockdb.sync.service import DataSyncService
from mockdb.utils.latency import GatedDelay, no_delay

OWNER_ID = "u1"


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def substrate(backend: InMemoryBackend) -> CollectionSubstrate:
    return CollectionSubstrate(backend)


@pytest.fixture
def file_substrate(tmp_path: Path) -> CollectionSubstrate:
    """
    Substrate persisted under a temporary directory.

    Build a second substrate on the same directory to simulate a restart.
    """
    return CollectionSubstrate(FileBackend(tmp_path / "store"))


@pytest.fixture
def identity() -> SessionIdentity:
    return SessionIdentity(OWNER_ID)


@pytest.fixture
def gated_delay() -> GatedDelay:
    return GatedDelay()


@pytest.fixture
def make_store(
    substrate: CollectionSubstrate, identity: SessionIdentity
) -> Callable[..., CollectionStore]:
    def _make(name: str = "chat_messages", filters: Any = None, **kwargs: Any) -> CollectionStore:
        kwargs.setdefault("substrate", substrate)
        kwargs.setdefault("identity", identity)
        kwargs.setdefault("delay", no_delay)
        return CollectionStore(name, filters, **kwargs)

    return _make


@pytest.fixture
def make_realtime(
    substrate: CollectionSubstrate, identity: SessionIdentity
) -> Callable[..., RealtimeStore]:
    def _make(path: str = "notifications", user_id: str | None = None, **kwargs: Any) -> RealtimeStore:
        kwargs.setdefault("substrate", substrate)
        kwargs.setdefault("identity", identity)
        kwargs.setdefault("delay", no_delay)
        return RealtimeStore(path, user_id, **kwargs)

    return _make


@pytest.fixture
def sync_service() -> DataSyncService:
    return DataSyncService(delay=no_delay, latency_seconds=0)
