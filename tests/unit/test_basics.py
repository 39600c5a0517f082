import re
from datetime import datetime, timezone

from mockdb import config
from mockdb.stores.ordering import parse_timestamp, sort_by_timestamp
from mockdb.utils.ids import generate_id, utc_now_iso

ID_PATTERN = re.compile(r"^mock-\d{13}-[0-9a-z]{9}$")


def test_get_settings_defaults():
    settings = config.Settings()
    assert settings.key_prefix == "mock_"
    assert settings.strict_writes is False
    assert settings.realtime_latency_ms < settings.collection_latency_ms
    assert settings.collection_latency == settings.collection_latency_ms / 1000.0
    assert settings.sync_latency_ms > 0


def test_get_settings_is_cached():
    assert config.get_settings() is config.get_settings()


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MOCKDB_STRICT_WRITES", "true")
    monkeypatch.setenv("MOCKDB_REALTIME_LATENCY_MS", "25")
    settings = config.Settings()
    assert settings.strict_writes is True
    assert settings.realtime_latency == 0.025


def test_generate_id_shape_and_uniqueness():
    ids = {generate_id() for _ in range(500)}
    assert len(ids) == 500
    assert all(ID_PATTERN.match(value) for value in ids)


def test_utc_now_iso_is_parseable_utc():
    parsed = parse_timestamp(utc_now_iso())
    assert parsed is not None
    assert parsed.tzinfo is not None
    assert abs((datetime.now(timezone.utc) - parsed).total_seconds()) < 5


def test_sort_by_timestamp_falls_back_to_client_timestamp():
    records = [
        {"id": "b", "createdAt": "2024-01-02T00:00:00.000Z"},
        {"id": "c", "timestamp": "2024-01-01T12:00:00Z"},
        {"id": "a", "createdAt": "2024-01-01T00:00:00+00:00"},
        {"id": "none"},
    ]

    ordered = [r["id"] for r in sort_by_timestamp(records)]

    assert ordered == ["none", "a", "c", "b"]
    assert [r["id"] for r in sort_by_timestamp(records, reverse=True)][0] == "b"


def test_parse_timestamp_accepts_epoch_millis_and_rejects_garbage():
    assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(True) is None
    assert parse_timestamp(None) is None
