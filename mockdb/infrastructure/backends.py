"""
Key-value backends for the persistent substrate.

A backend is a durable string-keyed blob store. ``InMemoryBackend`` keeps
values in a dict for tests and ephemeral runs; ``FileBackend`` keeps one file
per key under a directory so collections survive a process restart.

File I/O includes retry logic for transient OS failures using tenacity.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, runtime_checkable

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from mockdb.utils.logging import get_logger

log = get_logger(__name__)

_transient_io = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
    retry=retry_if_exception_type((PermissionError, BlockingIOError, InterruptedError)),
    reraise=True,
)


@runtime_checkable
class KeyValueBackend(Protocol):
    """
    Minimal blob store contract used by ``CollectionSubstrate``.

    Values are strings; ``get_item`` returns None for a missing key.
    """

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


class InMemoryBackend:
    """Dict-backed backend. Contents live as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class FileBackend:
    """
    Directory-backed backend: key ``k`` lives in ``<root>/k.json``.

    Writes land in a temp file in the same directory and are renamed over the
    target, so a reader never observes a half-written value.
    """

    suffix = ".json"

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key '{key}'")
        return self.root / f"{key}{self.suffix}"

    @_transient_io
    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @_transient_io
    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("Wrote storage key", extra={"key": key, "path": str(path)})

    @_transient_io
    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            p.name[: -len(self.suffix)]
            for p in self.root.iterdir()
            if p.is_file() and p.name.endswith(self.suffix) and not p.name.startswith(".")
        )


__all__ = ["KeyValueBackend", "InMemoryBackend", "FileBackend"]
