"""
Collection store: CRUD and filtered reads over one named collection.

The store holds two copies of the same logical state: the persisted JSON
array in the substrate and the filtered in-memory ``data`` list. Every
mutation writes the substrate first and only then updates ``data``.

Usage:
    store = CollectionStore(
        "chat_messages",
        [("userId", "==", "u1")],
        substrate=substrate,
        identity=identity,
    )
    await store.load()
    message_id = await store.add({"userId": "u1", "message": "hi", "sender": "user"})
    await store.update(message_id, {"read": True})
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from mockdb.config import get_settings
from mockdb.domain.models import FilterLike, FilterPredicate, Record, coerce_filters
from mockdb.errors import DocumentNotFoundError, MockDbError
from mockdb.identity import IdentityProvider
from mockdb.infrastructure.substrate import CollectionSubstrate
from mockdb.stores.abstract import StoreState
from mockdb.stores.filters import apply_filters, matches_all
from mockdb.utils.ids import generate_id, utc_now_iso
from mockdb.utils.latency import Delay, asyncio_delay
from mockdb.utils.logging import get_logger

log = get_logger(__name__)


def _index_of(records: Sequence[Record], document_id: str) -> Optional[int]:
    for index, record in enumerate(records):
        if record.get("id") == document_id:
            return index
    return None


class CollectionStore:
    """
    Generic document store over one collection, scoped to the current actor.

    Parameters
    ----------
    collection_name : str
        Name of the backing collection.
    filters : sequence | None
        Predicates applied as a logical AND on every read.
    substrate : CollectionSubstrate
        Persistent storage for the serialized collection.
    identity : IdentityProvider
        Source of the current actor id. Without one, reads resolve empty.
    delay : Delay | None
        Awaitable used to simulate network latency on the initial load.
    latency_seconds : float | None
        Simulated load latency. Defaults to settings.collection_latency.
    """

    creation_field: str = "createdAt"

    def __init__(
        self,
        collection_name: str,
        filters: Optional[Sequence[FilterLike]] = None,
        *,
        substrate: CollectionSubstrate,
        identity: IdentityProvider,
        delay: Optional[Delay] = None,
        latency_seconds: Optional[float] = None,
    ) -> None:
        self.collection_name = collection_name
        self._filters: Tuple[FilterPredicate, ...] = coerce_filters(filters)
        self.substrate = substrate
        self.identity = identity
        self._delay = delay or asyncio_delay
        self.latency_seconds = (
            get_settings().collection_latency if latency_seconds is None else latency_seconds
        )

        self.data: List[Record] = []
        self.loading: bool = True
        self.error: Optional[str] = None

        self._generation = 0
        self._loaded_scope: Optional[str] = None
        self._tasks: Set["asyncio.Task[None]"] = set()

    # ------------------------------------------------------------------ reads

    @property
    def filters(self) -> Tuple[FilterPredicate, ...]:
        return self._filters

    def active_filters(self) -> Tuple[FilterPredicate, ...]:
        """Predicates applied on reads, including any implicit scoping."""
        return self._filters

    def _scope_identity(self) -> Optional[str]:
        return self.identity.current_user_id

    def state(self) -> StoreState:
        """
        Snapshot of the readable state.

        Without an actor the result is empty and resolved. When the actor
        differs from the one the data was loaded for, the held records are
        withheld and the state reads as loading until the next ``load()``.
        """
        scope = self._scope_identity()
        if scope is None:
            return StoreState(data=[], loading=False, error=None)
        if scope != self._loaded_scope:
            return StoreState(data=[], loading=True, error=self.error)
        return StoreState(
            data=[dict(record) for record in self.data],
            loading=self.loading,
            error=self.error,
        )

    async def load(self) -> None:
        """
        Run the initial load: wait out the simulated latency, then read.

        Starting a load supersedes any load still in flight. A load whose
        parameters changed while it waited discards its result.
        """
        self._generation += 1
        generation = self._generation
        scope = self._scope_identity()

        if scope is None:
            self._resolve_anonymous()
            return

        self.loading = True
        await self._delay(self.latency_seconds)

        if generation == self._generation and self._scope_identity() is None:
            self._resolve_anonymous()
            return
        if generation != self._generation or self._scope_identity() != scope:
            log.debug(
                "Discarding superseded load",
                extra={"collection": self.collection_name, "generation": generation},
            )
            return

        try:
            items = apply_filters(self.substrate.load(self.collection_name), self.active_filters())
        except Exception as exc:  # noqa: BLE001 - reads degrade to error state, never raise
            log.exception("Mock store load failed", extra={"collection": self.collection_name})
            self._loaded_scope = scope
            self.error = str(exc)
            self.loading = False
            return

        self.data = items
        self._loaded_scope = scope
        self.loading = False
        self.error = None
        log.debug(
            "Collection loaded",
            extra={"collection": self.collection_name, "records": len(items)},
        )

    def _resolve_anonymous(self) -> None:
        self.data = []
        self.loading = False
        self.error = None
        self._loaded_scope = None

    def schedule_load(self) -> "asyncio.Task[None]":
        """
        Start ``load()`` in the background on the running loop.

        The store holds a reference to each task until it finishes.
        """
        task = asyncio.get_running_loop().create_task(self.load())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def get_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Look a record up in the persisted collection; None if absent."""
        try:
            items = self.substrate.load(self.collection_name)
            index = _index_of(items, document_id)
        except Exception as exc:  # noqa: BLE001 - lookups degrade to error state, never raise
            log.exception(
                "Mock store lookup failed",
                extra={"collection": self.collection_name, "id": document_id},
            )
            self.error = str(exc)
            return None
        return None if index is None else dict(items[index])

    # -------------------------------------------------------- invalidation

    def _invalidate(self) -> None:
        self._generation += 1
        self.loading = True

    def set_collection(self, collection_name: str) -> None:
        if collection_name != self.collection_name:
            self.collection_name = collection_name
            self._invalidate()

    def set_filters(self, filters: Optional[Sequence[FilterLike]]) -> None:
        coerced = coerce_filters(filters)
        if coerced != self._filters:
            self._filters = coerced
            self._invalidate()

    def refresh(self) -> None:
        """Return to the loading state; the next ``load()`` re-reads storage."""
        self._invalidate()

    # --------------------------------------------------------------- writes

    def _new_record(self, record: Mapping[str, Any]) -> Record:
        fields = {k: v for k, v in record.items() if k != "id"}
        return {"id": generate_id(), **fields, self.creation_field: utc_now_iso()}

    def _persist(self, collection_name: str, records: List[Record]) -> None:
        try:
            self.substrate.save(collection_name, records)
        except MockDbError as exc:
            self.error = str(exc)
            raise

    def _not_found(self, document_id: str) -> DocumentNotFoundError:
        exc = DocumentNotFoundError(self.collection_name, document_id)
        self.error = str(exc)
        log.warning(
            "Document not found",
            extra={"collection": self.collection_name, "id": document_id},
        )
        return exc

    def _append_in_memory(self, record: Record) -> None:
        if matches_all(record, self.active_filters()):
            self.data.append(dict(record))

    async def add(self, record: Mapping[str, Any]) -> str:
        """
        Append a new record and return its generated id.

        Any ``id`` or creation timestamp supplied by the caller is replaced.
        """
        new_record = self._new_record(record)
        items = self.substrate.load(self.collection_name)
        items.append(new_record)
        self._persist(self.collection_name, items)
        self._append_in_memory(new_record)
        log.debug(
            "Record added",
            extra={"collection": self.collection_name, "id": new_record["id"]},
        )
        return new_record["id"]

    async def update(self, document_id: str, fields: Mapping[str, Any]) -> None:
        """
        Merge ``fields`` into the record and stamp ``updatedAt``.

        Raises
        ------
        DocumentNotFoundError
            If no record with ``document_id`` exists; nothing is modified.
        """
        items = self.substrate.load(self.collection_name)
        index = _index_of(items, document_id)
        if index is None:
            raise self._not_found(document_id)

        changes = {k: v for k, v in fields.items() if k != "id"}
        merged = {**items[index], **changes, "updatedAt": utc_now_iso()}
        items[index] = merged
        self._persist(self.collection_name, items)

        in_memory = [record for record in self.data if record.get("id") != document_id]
        if matches_all(merged, self.active_filters()):
            # keep storage order: place it before the first held record stored after it
            positions = {item.get("id"): i for i, item in enumerate(items)}
            at = next(
                (i for i, record in enumerate(in_memory) if positions.get(record.get("id"), -1) > index),
                len(in_memory),
            )
            in_memory.insert(at, dict(merged))
        self.data = in_memory

    async def remove(self, document_id: str) -> None:
        """
        Delete the record with ``document_id``.

        Raises
        ------
        DocumentNotFoundError
            If no record with ``document_id`` exists; nothing is modified.
        """
        items = self.substrate.load(self.collection_name)
        if _index_of(items, document_id) is None:
            raise self._not_found(document_id)

        self._persist(
            self.collection_name, [item for item in items if item.get("id") != document_id]
        )
        self.data = [record for record in self.data if record.get("id") != document_id]


__all__ = ["CollectionStore"]
