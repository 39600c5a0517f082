"""
Store interfaces and the consumer contract for mockdb.

UI-facing code reads a store through ``StoreState`` and writes through the
``DocumentStore`` operations. Concrete stores (collection, realtime) should
satisfy the ``DocumentStore`` protocol.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, TypedDict, runtime_checkable

from mockdb.domain.models import Record


class StoreState(TypedDict):
    """
    Readable state exposed to consumers.

    ``loading`` is True until the first load resolves (or after ``refresh``);
    ``error`` carries the message of the last failed operation.
    """

    data: List[Record]
    loading: bool
    error: Optional[str]


@runtime_checkable
class DocumentStore(Protocol):
    """
    CRUD contract shared by collection-backed stores.

    Attributes
    ----------
    collection_name : str
        Name of the backing collection.
    """

    collection_name: str

    def state(self) -> StoreState:
        ...

    async def load(self) -> None:
        ...

    async def add(self, record: Mapping[str, Any]) -> str:
        """Store a new record and return its generated id."""
        ...

    async def update(self, document_id: str, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into an existing record; raise if it is missing."""
        ...

    async def remove(self, document_id: str) -> None:
        ...

    async def get_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        ...

    def refresh(self) -> None:
        ...


__all__ = ["StoreState", "DocumentStore"]
