"""
Persistent key-value substrate for named collections.

Each collection is stored as one JSON array under the key
``<prefix><collection name>`` (``mock_notifications`` by default). There is no
append or partial-write mode: callers load the whole collection, transform
it and save the whole collection back.

Failure policy:
- ``load`` never raises. A missing key, undecodable payload or backend read
  failure is logged and treated as "no data yet".
- ``save`` logs and drops the write on failure. With ``strict_writes`` the
  failure is raised as ``StorageWriteError`` instead.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional

from mockdb.config import get_settings
from mockdb.domain.models import Record
from mockdb.errors import StorageWriteError
from mockdb.infrastructure.backends import FileBackend, InMemoryBackend, KeyValueBackend
from mockdb.utils.logging import get_logger

log = get_logger(__name__)


class CollectionSubstrate:
    """
    Load/save helpers that map collection names onto a ``KeyValueBackend``.

    Parameters
    ----------
    backend : KeyValueBackend
        Blob store holding the serialized collections.
    key_prefix : str
        Prefix joined to the collection name to form the storage key.
    strict_writes : bool
        Raise ``StorageWriteError`` on a failed save instead of logging it.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        key_prefix: str = "mock_",
        strict_writes: bool = False,
    ) -> None:
        self.backend = backend
        self.key_prefix = key_prefix
        self.strict_writes = strict_writes

    def collection_key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def load(self, name: str) -> List[Record]:
        """
        Return the stored records for ``name`` in insertion order.

        Returns an empty list when the collection is missing or unreadable.
        """
        key = self.collection_key(name)
        try:
            raw = self.backend.get_item(key)
        except (OSError, ValueError) as exc:
            log.warning(
                "Error loading mock storage",
                extra={"collection": name, "key": key, "error": str(exc)},
            )
            return []
        if raw is None:
            return []

        try:
            decoded: Any = json.loads(raw)
        except ValueError as exc:
            log.warning(
                "Error loading mock storage",
                extra={"collection": name, "key": key, "error": str(exc)},
            )
            return []

        if not isinstance(decoded, list):
            log.warning(
                "Ignoring non-list payload in mock storage",
                extra={"collection": name, "key": key, "type": type(decoded).__name__},
            )
            return []

        records = [item for item in decoded if isinstance(item, dict)]
        if len(records) != len(decoded):
            log.warning(
                "Dropped non-object entries from mock storage",
                extra={"collection": name, "dropped": len(decoded) - len(records)},
            )
        return records

    def save(self, name: str, records: Iterable[Record]) -> None:
        """
        Serialize ``records`` and overwrite the stored collection.

        Raises
        ------
        StorageWriteError
            Only when ``strict_writes`` is enabled.
        """
        key = self.collection_key(name)
        try:
            payload = json.dumps(list(records))
            self.backend.set_item(key, payload)
        except (TypeError, ValueError, OSError) as exc:
            log.warning(
                "Error saving mock storage",
                extra={"collection": name, "key": key, "error": str(exc)},
            )
            if self.strict_writes:
                raise StorageWriteError(name, str(exc)) from exc

    def drop(self, name: str) -> None:
        """Remove a collection entirely."""
        self.backend.remove_item(self.collection_key(name))

    def collections(self) -> List[str]:
        """Names of all persisted collections, sorted."""
        prefix = self.key_prefix
        return sorted(key[len(prefix):] for key in self.backend.keys() if key.startswith(prefix))


def build_substrate(
    storage_dir: Optional[str] = None,
    in_memory: bool = False,
    strict_writes: Optional[bool] = None,
) -> CollectionSubstrate:
    """
    Construct a substrate from settings.

    Parameters
    ----------
    storage_dir : str | None
        Directory for the FileBackend. Defaults to settings.storage_dir.
    in_memory : bool
        Use an InMemoryBackend instead of the filesystem.
    strict_writes : bool | None
        Override settings.strict_writes.
    """
    settings = get_settings()
    backend: KeyValueBackend
    if in_memory:
        backend = InMemoryBackend()
    else:
        backend = FileBackend(storage_dir or settings.storage_dir)
    return CollectionSubstrate(
        backend,
        key_prefix=settings.key_prefix,
        strict_writes=settings.strict_writes if strict_writes is None else strict_writes,
    )


__all__ = ["CollectionSubstrate", "build_substrate"]
