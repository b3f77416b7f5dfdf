"""Tests for the bounded operation log and settings storage."""

import json

import pytest

from opstracker.core.errors import StorageError
from opstracker.models.admin import DEFAULT_ALERT_EMAIL, DEFAULT_THRESHOLD_PERCENT, AdminSettings
from opstracker.models.operation import LOCAL_ENGINE_MODEL, OperationInput, OperationStatus
from opstracker.storage.backends import MemoryJsonStore
from opstracker.storage.log_store import LOG_RETENTION, EventLogStore

LOGS_KEY = "opstracker:logs"
SETTINGS_KEY = "opstracker:settings"


def make_entry(tool: str = "Word to PDF", **overrides) -> OperationInput:
    data = {
        "tool": tool,
        "model": LOCAL_ENGINE_MODEL,
        "status": OperationStatus.SUCCESS,
        "latency_ms": 250,
        "file_count": 1,
        "file_formats": ["docx"],
    }
    data.update(overrides)
    return OperationInput(**data)


class FailingWriteStore(MemoryJsonStore):
    """Backend whose writes always fail."""

    async def set_json(self, key, value):
        raise StorageError("disk full", key=key)


@pytest.mark.asyncio
async def test_append_assigns_id_and_timestamp(store, clock) -> None:
    record = await store.append(make_entry())

    assert record.id
    assert record.timestamp == clock.now
    assert record.is_alert is False
    assert record.tool == "Word to PDF"


@pytest.mark.asyncio
async def test_list_returns_most_recent_first(store, clock) -> None:
    first = await store.append(make_entry("First"))
    clock.advance(10)
    second = await store.append(make_entry("Second"))

    records = await store.list_records()

    assert [r.id for r in records] == [second.id, first.id]


@pytest.mark.asyncio
async def test_retention_keeps_newest_hundred(store, clock) -> None:
    appended = []
    for idx in range(150):
        record = await store.append(make_entry(f"op-{idx}"))
        appended.append(record.id)
        clock.advance(1)

    records = await store.list_records()

    assert len(records) == LOG_RETENTION
    assert [r.id for r in records] == list(reversed(appended))[:LOG_RETENTION]
    assert records[-1].tool == "op-50"


@pytest.mark.asyncio
async def test_negative_counts_are_normalized(store) -> None:
    record = await store.append(make_entry(latency_ms=-40, file_count=-2))

    assert record.latency_ms == 0
    assert record.file_count == 0


@pytest.mark.asyncio
async def test_alert_records_get_alert_ids(store) -> None:
    record = await store.append(make_entry("System Alert"), is_alert=True)

    assert record.is_alert is True
    assert record.id.startswith("alert-")


@pytest.mark.asyncio
async def test_persisted_layout_uses_camel_case(store, backend) -> None:
    await store.append(make_entry(error_message=None))
    await store.put_settings(AdminSettings(alert_email="ops@example.com", threshold_percent=60))

    logs = json.loads(backend.raw[LOGS_KEY])
    settings = json.loads(backend.raw[SETTINGS_KEY])

    assert set(logs[0]) >= {"id", "timestamp", "latencyMs", "fileCount", "fileFormats", "isAlert"}
    assert logs[0]["status"] == "success"
    assert settings == {
        "alertEmail": "ops@example.com",
        "thresholdPercent": 60,
        "lastAlertSentAt": None,
    }


@pytest.mark.asyncio
async def test_list_reads_fresh_state(store, backend) -> None:
    await store.append(make_entry())
    backend.raw[LOGS_KEY] = "[]"

    assert await store.list_records() == []


@pytest.mark.asyncio
async def test_corrupt_log_reads_as_empty(store, backend) -> None:
    backend.raw[LOGS_KEY] = "{not json"

    assert await store.list_records() == []

    record = await store.append(make_entry())
    assert [r.id for r in await store.list_records()] == [record.id]


@pytest.mark.asyncio
async def test_malformed_records_are_skipped(store, backend) -> None:
    good = await store.append(make_entry())
    logs = json.loads(backend.raw[LOGS_KEY])
    logs.append({"tool": "missing everything else"})
    backend.raw[LOGS_KEY] = json.dumps(logs)

    records = await store.list_records()

    assert [r.id for r in records] == [good.id]


@pytest.mark.asyncio
async def test_default_settings_when_none_persisted(store) -> None:
    settings = await store.get_settings()

    assert settings.threshold_percent == DEFAULT_THRESHOLD_PERCENT == 80
    assert settings.alert_email == DEFAULT_ALERT_EMAIL
    assert settings.last_alert_sent_at is None


@pytest.mark.asyncio
async def test_corrupt_settings_fall_back_to_defaults(store, backend) -> None:
    backend.raw[SETTINGS_KEY] = "null-ish"

    assert await store.get_settings() == AdminSettings()


@pytest.mark.asyncio
async def test_put_settings_replaces_value(store) -> None:
    await store.put_settings(AdminSettings(threshold_percent=50, last_alert_sent_at=123))
    await store.put_settings(AdminSettings(alert_email="new@example.com"))

    settings = await store.get_settings()

    assert settings.alert_email == "new@example.com"
    assert settings.threshold_percent == 80
    assert settings.last_alert_sent_at is None


@pytest.mark.asyncio
async def test_clear_removes_records_and_keeps_settings(store) -> None:
    custom = AdminSettings(alert_email="ops@example.com", threshold_percent=40)
    await store.put_settings(custom)
    await store.append(make_entry())

    await store.clear()

    assert await store.list_records() == []
    assert await store.get_settings() == custom


@pytest.mark.asyncio
async def test_write_failure_propagates(clock) -> None:
    store = EventLogStore(FailingWriteStore(), clock=clock)

    with pytest.raises(StorageError):
        await store.append(make_entry())
    with pytest.raises(StorageError):
        await store.put_settings(AdminSettings())


@pytest.mark.asyncio
async def test_key_prefix_isolates_logs(backend, clock) -> None:
    tenant_a = EventLogStore(backend, key_prefix="a", clock=clock)
    tenant_b = EventLogStore(backend, key_prefix="b", clock=clock)

    await tenant_a.append(make_entry())

    assert len(await tenant_a.list_records()) == 1
    assert await tenant_b.list_records() == []
    assert "a:logs" in backend.raw


@pytest.mark.asyncio
async def test_load_settings_flags_backend_failures_only(clock) -> None:
    class UnreachableStore(MemoryJsonStore):
        async def get_json(self, key):
            raise StorageError("Redis read failed: timeout", key=key)

    corrupt = MemoryJsonStore()
    corrupt.raw[SETTINGS_KEY] = "{broken"

    assert await EventLogStore(MemoryJsonStore(), clock=clock).load_settings() == (AdminSettings(), True)
    assert await EventLogStore(corrupt, clock=clock).load_settings() == (AdminSettings(), True)
    assert await EventLogStore(UnreachableStore(), clock=clock).load_settings() == (AdminSettings(), False)
