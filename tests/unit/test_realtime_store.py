from __future__ import annotations

import pytest
from pydantic import ValidationError

from mockdb.config import get_settings
from mockdb.domain.models import HEALTH_ALERTS, HEALTH_METRICS, NOTIFICATIONS
from mockdb.errors import DocumentNotFoundError, MissingIdentityError
from mockdb.identity import SessionIdentity
from mockdb.stores.realtime import RealtimeStore

DOSE_REMINDER = {"type": "dose", "title": "Reminder", "message": "Take pill", "priority": "high"}


def test_realtime_latency_is_shorter_than_collection_latency(substrate, identity) -> None:
    store = RealtimeStore(NOTIFICATIONS, substrate=substrate, identity=identity)
    settings = get_settings()

    assert store.latency_seconds == settings.realtime_latency
    assert store.latency_seconds < settings.collection_latency


@pytest.mark.asyncio
async def test_reads_are_scoped_to_owner(make_realtime, substrate) -> None:
    substrate.save(
        NOTIFICATIONS,
        [
            {"id": "1", "userId": "u1", "title": "mine"},
            {"id": "2", "userId": "u2", "title": "theirs"},
            {"id": "3", "title": "unowned"},
        ],
    )
    store = make_realtime()
    await store.load()

    assert [r["id"] for r in store.data] == ["1"]


@pytest.mark.asyncio
async def test_explicit_user_id_overrides_current_actor(make_realtime, substrate) -> None:
    substrate.save(NOTIFICATIONS, [{"id": "1", "userId": "u1"}, {"id": "2", "userId": "u2"}])
    store = make_realtime(user_id="u2")
    await store.load()

    assert store.owner_id == "u2"
    assert [r["id"] for r in store.data] == ["2"]


@pytest.mark.asyncio
async def test_add_stamps_owner_and_timestamp(make_realtime, substrate) -> None:
    store = make_realtime("dose_tracking")
    await store.load()

    record_id = await store.add({"medication": "aspirin", "userId": "someone-else"})
    stored = substrate.load("dose_tracking")[0]

    assert stored["id"] == record_id
    assert stored["userId"] == "u1"
    assert "timestamp" in stored
    assert store.data == [stored]


@pytest.mark.asyncio
async def test_notification_scenario(make_realtime, substrate) -> None:
    store = make_realtime(NOTIFICATIONS)
    await store.load()

    notification_id = await store.add_notification(DOSE_REMINDER)
    stored = substrate.load(NOTIFICATIONS)

    assert len(stored) == 1
    notification = stored[0]
    assert notification["id"] == notification_id
    assert notification["userId"] == "u1"
    assert notification["read"] is False
    assert notification["timestamp"]
    assert notification["priority"] == "high"
    assert store.data == [notification]

    await store.mark_as_read(notification_id)
    updated = await store.get_by_id(notification_id)

    assert updated["read"] is True
    assert "readAt" in updated
    assert updated["message"] == "Take pill"
    assert store.data[0]["read"] is True


@pytest.mark.asyncio
async def test_add_notification_bypasses_store_path(make_realtime, substrate) -> None:
    store = make_realtime("chat_messages")
    await store.load()

    await store.add_notification({"type": "chat", "title": "New", "message": "You have mail"})

    assert len(substrate.load(NOTIFICATIONS)) == 1
    assert substrate.load("chat_messages") == []
    assert store.data == []


@pytest.mark.asyncio
async def test_add_notification_keeps_extra_fields_and_rejects_bad_priority(make_realtime) -> None:
    store = make_realtime()

    notification_id = await store.add_notification({**DOSE_REMINDER, "medicationId": "med-7"})

    assert (await store.get_by_id(notification_id))["medicationId"] == "med-7"
    with pytest.raises(ValidationError):
        await store.add_notification({**DOSE_REMINDER, "priority": "urgent"})


@pytest.mark.asyncio
async def test_mark_as_read_missing_id_raises_not_found(make_realtime) -> None:
    store = make_realtime()

    with pytest.raises(DocumentNotFoundError):
        await store.mark_as_read("missing")

    assert "Document not found" in store.error


@pytest.mark.asyncio
async def test_health_alert_lifecycle(make_realtime, substrate) -> None:
    store = make_realtime(HEALTH_ALERTS)
    await store.load()

    alert_id = await store.add_health_alert(
        {"type": "heart_rate", "message": "Resting heart rate high", "severity": "medium"}
    )
    alert = substrate.load(HEALTH_ALERTS)[0]

    assert alert["acknowledged"] is False
    assert alert["userId"] == "u1"
    assert "timestamp" in alert

    await store.acknowledge_alert(alert_id)
    acknowledged = await store.get_by_id(alert_id)

    assert acknowledged["acknowledged"] is True
    assert "acknowledgedAt" in acknowledged
    assert acknowledged["severity"] == "medium"


@pytest.mark.asyncio
async def test_acknowledge_alert_missing_id_raises_not_found(make_realtime) -> None:
    store = make_realtime(HEALTH_ALERTS)

    with pytest.raises(DocumentNotFoundError):
        await store.acknowledge_alert("missing")


@pytest.mark.asyncio
async def test_health_metrics_upsert_keeps_one_record_per_owner(make_realtime, substrate) -> None:
    store = make_realtime(HEALTH_METRICS)
    await store.load()

    first_id = await store.update_health_metrics({"heartRate": 70, "weight": 80.5})
    second_id = await store.update_health_metrics({"heartRate": 75, "steps": 9000})
    records = [r for r in substrate.load(HEALTH_METRICS) if r["userId"] == "u1"]

    assert first_id == second_id
    assert len(records) == 1
    assert records[0]["heartRate"] == 75
    assert records[0]["weight"] == 80.5
    assert records[0]["steps"] == 9000
    assert "updatedAt" in records[0]
    assert store.data == records


@pytest.mark.asyncio
async def test_health_metrics_upsert_preserves_position(substrate, identity) -> None:
    substrate.save(
        HEALTH_METRICS,
        [
            {"id": "m1", "userId": "u0", "heartRate": 60},
            {"id": "m2", "userId": "u1", "heartRate": 65},
            {"id": "m3", "userId": "u2", "heartRate": 70},
        ],
    )
    store = RealtimeStore("notifications", substrate=substrate, identity=identity, latency_seconds=0)

    await store.update_health_metrics({"heartRate": 90, "userId": "spoofed", "id": "spoofed"})
    records = substrate.load(HEALTH_METRICS)

    assert [r["id"] for r in records] == ["m1", "m2", "m3"]
    assert records[1]["heartRate"] == 90
    assert records[1]["userId"] == "u1"


@pytest.mark.asyncio
async def test_health_metrics_for_new_owner_appends(make_realtime, substrate) -> None:
    substrate.save(HEALTH_METRICS, [{"id": "m0", "userId": "u0", "heartRate": 60}])
    store = make_realtime(HEALTH_METRICS, user_id="u9")

    new_id = await store.update_health_metrics({"heartRate": 88})
    records = substrate.load(HEALTH_METRICS)

    assert [r["id"] for r in records] == ["m0", new_id]
    assert records[1]["userId"] == "u9"


@pytest.mark.asyncio
async def test_domain_operations_require_owner(substrate) -> None:
    store = RealtimeStore(NOTIFICATIONS, substrate=substrate, identity=SessionIdentity(None))

    with pytest.raises(MissingIdentityError):
        await store.add_notification(DOSE_REMINDER)
    with pytest.raises(MissingIdentityError):
        await store.update_health_metrics({"heartRate": 70})
    with pytest.raises(MissingIdentityError):
        await store.add({"anything": True})

    assert substrate.collections() == []


@pytest.mark.asyncio
async def test_owner_change_invalidates_state(make_realtime, substrate) -> None:
    substrate.save(NOTIFICATIONS, [{"id": "1", "userId": "u1"}, {"id": "2", "userId": "u2"}])
    store = make_realtime()
    await store.load()

    store.set_owner("u2")
    assert store.loading is True

    await store.load()
    assert [r["id"] for r in store.data] == ["2"]


@pytest.mark.asyncio
async def test_none_valued_extra_fields_are_kept(make_realtime, substrate) -> None:
    store = make_realtime()

    await store.add_notification({**DOSE_REMINDER, "actionUrl": None})
    notification = substrate.load(NOTIFICATIONS)[0]

    assert "actionUrl" in notification
    assert notification["actionUrl"] is None
    assert notification["priority"] == "high"


@pytest.mark.asyncio
async def test_unset_priority_is_not_stored(make_realtime, substrate) -> None:
    store = make_realtime()

    await store.add_notification({"type": "chat", "title": "New", "message": "Hello"})

    assert "priority" not in substrate.load(NOTIFICATIONS)[0]


@pytest.mark.asyncio
async def test_health_metrics_reading_can_be_cleared(make_realtime, substrate) -> None:
    store = make_realtime(HEALTH_METRICS)

    await store.update_health_metrics({"heartRate": 70, "bloodSugar": 5.4})
    await store.update_health_metrics({"bloodSugar": None})
    record = substrate.load(HEALTH_METRICS)[0]

    assert record["bloodSugar"] is None
    assert record["heartRate"] == 70


@pytest.mark.asyncio
async def test_sign_out_empties_state_of_identity_scoped_store(
    make_realtime, substrate, identity: SessionIdentity
) -> None:
    substrate.save(NOTIFICATIONS, [{"id": "1", "userId": "u1"}])
    store = make_realtime()
    await store.load()
    assert len(store.state()["data"]) == 1

    identity.sign_out()

    assert store.state() == {"data": [], "loading": False, "error": None}
