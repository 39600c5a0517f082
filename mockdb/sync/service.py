"""
Cross-role data synchronization service.

``DataSyncService`` simulates propagating a write to the other roles that
care about it (patient, doctor, lab): each sync waits out a simulated round
trip and then records a ``SyncEvent``. It also keeps the registry of live
sync listeners, at most one per ``(role, user id)`` pair.

The service is constructed explicitly and passed to whoever needs it; a
process that wants a single shared instance creates one at startup.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from mockdb.config import get_settings
from mockdb.domain.models import SyncEvent
from mockdb.errors import SyncError
from mockdb.utils.latency import Delay, asyncio_delay
from mockdb.utils.logging import get_logger

log = get_logger(__name__)

Unsubscribe = Callable[[], None]
ListenerKey = Tuple[str, str]


class Role(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    LAB = "lab"


class DataSyncService:
    """
    Record simulated syncs and own the live-sync listener registry.

    Parameters
    ----------
    delay : Delay | None
        Awaitable used to simulate the network round trip.
    latency_seconds : float | None
        Simulated round-trip time. Defaults to settings.sync_latency.
    """

    def __init__(
        self,
        delay: Optional[Delay] = None,
        latency_seconds: Optional[float] = None,
    ) -> None:
        self._delay = delay or asyncio_delay
        self.latency_seconds = (
            get_settings().sync_latency if latency_seconds is None else latency_seconds
        )
        self.history: List[SyncEvent] = []
        self._listeners: Dict[ListenerKey, Unsubscribe] = {}

    async def _sync(self, role: Role, owner_id: str, data_type: str, payload: Any) -> SyncEvent:
        context = {"role": role.value, "owner_id": owner_id, "data_type": data_type}
        try:
            await self._delay(self.latency_seconds)
            event = SyncEvent(
                role=role.value,
                owner_id=owner_id,
                data_type=data_type,
                payload=payload,
                synced_at=datetime.now(timezone.utc),
            )
        except Exception as exc:
            log.exception(f"Error syncing {role.value} data", extra=context)
            if isinstance(exc, SyncError):
                raise
            raise SyncError(role.value, owner_id, data_type) from exc

        self.history.append(event)
        log.info(f"Mock data synced for {role.value} {owner_id}, type: {data_type}", extra=context)
        return event

    async def sync_patient_data(self, patient_id: str, data_type: str, payload: Any) -> SyncEvent:
        return await self._sync(Role.PATIENT, patient_id, data_type, payload)

    async def sync_doctor_data(self, doctor_id: str, data_type: str, payload: Any) -> SyncEvent:
        return await self._sync(Role.DOCTOR, doctor_id, data_type, payload)

    async def sync_lab_data(self, lab_id: str, data_type: str, payload: Any) -> SyncEvent:
        return await self._sync(Role.LAB, lab_id, data_type, payload)

    # ------------------------------------------------------------ listeners

    @staticmethod
    def _key(user_id: str, role: Union[Role, str]) -> ListenerKey:
        return (Role(role).value, user_id)

    @staticmethod
    def _invoke(key: ListenerKey, unsubscribe: Unsubscribe) -> None:
        try:
            unsubscribe()
        except Exception:  # noqa: BLE001 - one bad callback must not block the rest
            log.exception(
                "Realtime sync unsubscribe failed",
                extra={"role": key[0], "user_id": key[1]},
            )

    def setup_realtime_sync(
        self,
        user_id: str,
        role: Union[Role, str],
        unsubscribe: Optional[Unsubscribe] = None,
    ) -> None:
        """
        Register the live-sync listener for ``(role, user_id)``.

        A listener already registered for the pair is unsubscribed first.
        """
        key = self._key(user_id, role)
        previous = self._listeners.pop(key, None)
        if previous is not None:
            self._invoke(key, previous)

        log.info(
            f"Mock real-time sync setup for {key[0]} {user_id}",
            extra={"role": key[0], "user_id": user_id},
        )

        def _default_unsubscribe() -> None:
            log.info(
                f"Mock real-time sync cleanup for {key[0]} {user_id}",
                extra={"role": key[0], "user_id": user_id},
            )

        self._listeners[key] = unsubscribe or _default_unsubscribe

    def teardown_realtime_sync(self, user_id: str, role: Union[Role, str]) -> bool:
        """Unsubscribe one listener. Returns False if none was registered."""
        key = self._key(user_id, role)
        unsubscribe = self._listeners.pop(key, None)
        if unsubscribe is None:
            return False
        self._invoke(key, unsubscribe)
        return True

    def active_listeners(self) -> List[ListenerKey]:
        return list(self._listeners)

    def cleanup(self) -> None:
        """Invoke every registered unsubscribe callback and clear the registry."""
        listeners, self._listeners = self._listeners, {}
        for key, unsubscribe in listeners.items():
            self._invoke(key, unsubscribe)


__all__ = ["DataSyncService", "Role", "Unsubscribe"]
