"""Pytest configuration and fixtures."""

import pytest

from opstracker.engine.tracker import UsageTracker
from opstracker.models.notification import AlertNotice
from opstracker.notification.channels.base import NotificationChannel
from opstracker.notification.notifier import AlertNotifier
from opstracker.storage.backends import MemoryJsonStore
from opstracker.storage.log_store import EventLogStore

START_MS = 1_767_225_600_000  # 2026-01-01T00:00:00Z


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingChannel(NotificationChannel):
    """Channel that keeps every notice it receives."""

    def __init__(self, fail_with: Exception | None = None):
        self.notices: list[AlertNotice] = []
        self._fail_with = fail_with

    @property
    def channel_type(self) -> str:
        return "recording"

    async def send(self, notice: AlertNotice) -> bool:
        self.notices.append(notice)
        if self._fail_with is not None:
            raise self._fail_with
        return True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> MemoryJsonStore:
    return MemoryJsonStore()


@pytest.fixture
def store(backend: MemoryJsonStore, clock: FakeClock) -> EventLogStore:
    return EventLogStore(backend, clock=clock)


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def failing_channel() -> RecordingChannel:
    return RecordingChannel(fail_with=ConnectionError("smtp down"))


@pytest.fixture
def tracker(store: EventLogStore, channel: RecordingChannel) -> UsageTracker:
    return UsageTracker(store, notifier=AlertNotifier([channel]))


@pytest.fixture
def sample_operation_data() -> dict:
    """Operation payload as a converter reports it."""
    return {
        "tool": "JPG to PDF",
        "model": "Local Engine",
        "status": "success",
        "latencyMs": 840,
        "fileCount": 3,
        "fileFormats": ["jpg", "JPG", "png"],
    }
