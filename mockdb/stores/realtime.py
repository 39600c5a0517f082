"""
Owner-scoped realtime store with notification and health-event operations.

Reads are always narrowed to ``userId == owner``, where the owner is the id
passed at construction or, failing that, the current actor. Loads use a
shorter simulated latency than ``CollectionStore`` to model a lower-latency
channel.

The notification, alert and metrics helpers write straight into their own
collections (``notifications``, ``health_alerts``, ``health_metrics``)
whatever path the store itself is bound to.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

from mockdb.config import get_settings
from mockdb.domain.models import (
    HEALTH_ALERTS,
    HEALTH_METRICS,
    NOTIFICATIONS,
    FilterLike,
    FilterPredicate,
    HealthAlertDraft,
    HealthMetricsUpdate,
    NotificationDraft,
    Record,
    draft_fields,
)
from mockdb.errors import MissingIdentityError
from mockdb.identity import IdentityProvider
from mockdb.infrastructure.substrate import CollectionSubstrate
from mockdb.stores.collection import CollectionStore
from mockdb.stores.filters import matches_all
from mockdb.utils.ids import generate_id, utc_now_iso
from mockdb.utils.latency import Delay
from mockdb.utils.logging import get_logger

log = get_logger(__name__)

_SYSTEM_FIELDS = ("id", "userId")


class RealtimeStore(CollectionStore):
    """
    ``CollectionStore`` bound to a path and scoped to one owner.

    Parameters
    ----------
    path : str
        Collection the store reads and writes.
    user_id : str | None
        Owner to scope to. Defaults to the current actor at call time.
    latency_seconds : float | None
        Simulated load latency. Defaults to settings.realtime_latency.
    """

    creation_field: str = "timestamp"

    def __init__(
        self,
        path: str,
        user_id: Optional[str] = None,
        *,
        substrate: CollectionSubstrate,
        identity: IdentityProvider,
        filters: Optional[Sequence[FilterLike]] = None,
        delay: Optional[Delay] = None,
        latency_seconds: Optional[float] = None,
    ) -> None:
        super().__init__(
            path,
            filters,
            substrate=substrate,
            identity=identity,
            delay=delay,
            latency_seconds=(
                get_settings().realtime_latency if latency_seconds is None else latency_seconds
            ),
        )
        self._user_id = user_id

    @property
    def path(self) -> str:
        return self.collection_name

    @property
    def owner_id(self) -> Optional[str]:
        return self._user_id or self.identity.current_user_id

    def set_owner(self, user_id: Optional[str]) -> None:
        if user_id != self._user_id:
            self._user_id = user_id
            self._invalidate()

    def _scope_identity(self) -> Optional[str]:
        return self.owner_id

    def active_filters(self) -> Tuple[FilterPredicate, ...]:
        owner = FilterPredicate(field="userId", operator="==", value=self.owner_id)
        return (owner,) + self.filters

    def _require_owner(self) -> str:
        owner = self.owner_id
        if owner is None:
            self.error = "No owner identity available"
            raise MissingIdentityError(self.error)
        return owner

    def _new_record(self, record: Mapping[str, Any]) -> Record:
        owner = self._require_owner()
        new_record = super()._new_record(record)
        new_record["userId"] = owner
        return new_record

    def _append_to(self, collection_name: str, record: Record) -> str:
        items = self.substrate.load(collection_name)
        items.append(record)
        self._persist(collection_name, items)
        if collection_name == self.collection_name and matches_all(record, self.active_filters()):
            self.data.append(dict(record))
        log.info(
            "Record added",
            extra={"collection": collection_name, "id": record["id"], "owner": record.get("userId")},
        )
        return record["id"]

    async def mark_as_read(self, document_id: str) -> None:
        await self.update(document_id, {"read": True, "readAt": utc_now_iso()})

    async def acknowledge_alert(self, document_id: str) -> None:
        await self.update(document_id, {"acknowledged": True, "acknowledgedAt": utc_now_iso()})

    async def add_notification(self, notification: Mapping[str, Any]) -> str:
        """Raise an unread notification for the owner and return its id."""
        owner = self._require_owner()
        fields = draft_fields(NotificationDraft.model_validate(dict(notification)))
        record: Record = {
            "userId": owner,
            **{k: v for k, v in fields.items() if k not in _SYSTEM_FIELDS},
            "timestamp": utc_now_iso(),
            "read": False,
            "id": generate_id(),
        }
        return self._append_to(NOTIFICATIONS, record)

    async def add_health_alert(self, alert: Mapping[str, Any]) -> str:
        """Raise an unacknowledged health alert for the owner and return its id."""
        owner = self._require_owner()
        fields = draft_fields(HealthAlertDraft.model_validate(dict(alert)))
        record: Record = {
            "userId": owner,
            **{k: v for k, v in fields.items() if k not in _SYSTEM_FIELDS},
            "timestamp": utc_now_iso(),
            "acknowledged": False,
            "id": generate_id(),
        }
        return self._append_to(HEALTH_ALERTS, record)

    async def update_health_metrics(self, metrics: Mapping[str, Any]) -> str:
        """
        Upsert the owner's single health-metrics record and return its id.

        An existing record keeps its position and id; the new readings are
        merged over it. Otherwise a new record is appended.
        """
        owner = self._require_owner()
        fields = draft_fields(HealthMetricsUpdate.model_validate(dict(metrics)))
        changes = {k: v for k, v in fields.items() if k not in _SYSTEM_FIELDS}
        now = utc_now_iso()

        items = self.substrate.load(HEALTH_METRICS)
        existing = next(
            (index for index, item in enumerate(items) if item.get("userId") == owner), None
        )
        if existing is None:
            record: Record = {"id": generate_id(), "userId": owner, **changes, "updatedAt": now}
            items.append(record)
        else:
            record = {**items[existing], **changes, "userId": owner, "updatedAt": now}
            record.setdefault("id", generate_id())
            items[existing] = record
        self._persist(HEALTH_METRICS, items)

        # The scoped view of health_metrics holds at most the owner's one record.
        if self.collection_name == HEALTH_METRICS:
            self.data = [dict(record)] if matches_all(record, self.active_filters()) else []
        log.info(
            "Health metrics updated",
            extra={"owner": owner, "id": record["id"], "created": existing is None},
        )
        return record["id"]


__all__ = ["RealtimeStore"]
