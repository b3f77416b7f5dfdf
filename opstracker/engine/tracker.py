"""Usage tracker: records operations, serves snapshots, raises usage alerts."""

import asyncio
from enum import Enum

from opstracker.core.clock import Clock
from opstracker.core.logging import get_logger
from opstracker.engine.metrics import compute_snapshot
from opstracker.models.admin import AdminSettings
from opstracker.models.operation import (
    ALERT_MODEL,
    OperationInput,
    OperationRecord,
    OperationStatus,
)
from opstracker.models.snapshot import StatsSnapshot
from opstracker.notification.notifier import AlertNotifier
from opstracker.observability.metrics import (
    ALERTS_DISPATCHED,
    ALERTS_SUPPRESSED,
    CURRENT_RPM,
    OPERATIONS_RECORDED,
)
from opstracker.storage.log_store import EventLogStore

logger = get_logger(__name__)

ALERT_COOLDOWN_MS = 600_000
ALERT_TOOL_LABEL = "System Alert"


class AlertOutcome(str, Enum):
    """Result of one alert evaluation."""

    BELOW_THRESHOLD = "below_threshold"
    COOLDOWN = "cooldown"
    DISPATCHED = "dispatched"


class UsageTracker:
    """Facade over the event log used by converters and the dashboard.

    Every recorded operation is followed by an alert evaluation, so alert
    state never lags the log by more than one append. Writers are
    serialized on one lock, which makes the debounce check-then-act atomic
    within this process.
    """

    def __init__(
        self,
        store: EventLogStore,
        notifier: AlertNotifier | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._notifier = notifier
        self._clock = clock or store.clock
        self._lock = asyncio.Lock()

    @property
    def notifier(self) -> AlertNotifier | None:
        return self._notifier

    async def record_operation(self, entry: OperationInput) -> OperationRecord:
        """Append an operation and evaluate the alert policy.

        Raises:
            StorageError: If the log could not be written
        """
        async with self._lock:
            record = await self._store.append(entry)
            OPERATIONS_RECORDED.labels(status=record.status.value).inc()
            logger.debug(
                "Operation recorded",
                record_id=record.id,
                tool=record.tool,
                status=record.status.value,
                latency_ms=record.latency_ms,
            )
            await self._evaluate_alert(self._clock())
        return record

    async def compute_snapshot(self, now: int | None = None) -> StatsSnapshot:
        """Compute the current snapshot. Never raises on storage faults."""
        records = await self._store.list_records()
        snapshot = compute_snapshot(records, self._clock() if now is None else now)
        CURRENT_RPM.set(snapshot.rpm)
        return snapshot

    async def evaluate_alert(self, now: int | None = None) -> AlertOutcome:
        """Run the alert policy against the current log."""
        async with self._lock:
            return await self._evaluate_alert(self._clock() if now is None else now)

    async def list_logs(self) -> list[OperationRecord]:
        return await self._store.list_records()

    async def clear_logs(self) -> None:
        async with self._lock:
            await self._store.clear()
        logger.info("Operation log cleared")

    async def storage_available(self) -> bool:
        return await self._store.ping()

    async def get_settings(self) -> AdminSettings:
        return await self._store.get_settings()

    async def put_settings(self, settings: AdminSettings) -> None:
        async with self._lock:
            await self._store.put_settings(settings)
        logger.info(
            "Admin settings updated",
            alert_email=settings.alert_email,
            threshold_percent=settings.threshold_percent,
        )

    async def _evaluate_alert(self, now: int) -> AlertOutcome:
        snapshot = await self.compute_snapshot(now)
        settings, settings_writable = await self._store.load_settings()
        usage_percent = snapshot.usage_percent

        if usage_percent < settings.effective_threshold:
            return AlertOutcome.BELOW_THRESHOLD

        last_sent = settings.last_alert_sent_at
        if last_sent is not None and now - last_sent <= ALERT_COOLDOWN_MS:
            ALERTS_SUPPRESSED.labels(reason=AlertOutcome.COOLDOWN.value).inc()
            logger.debug(
                "Alert suppressed",
                usage_percent=usage_percent,
                last_alert_sent_at=last_sent,
            )
            return AlertOutcome.COOLDOWN

        await self._dispatch_alert(now, usage_percent, settings, settings_writable)
        return AlertOutcome.DISPATCHED

    async def _dispatch_alert(
        self,
        now: int,
        usage_percent: float,
        settings: AdminSettings,
        settings_writable: bool = True,
    ) -> None:
        # Log record and debounce stamp are written before delivery and are
        # kept whatever the channels report.
        alert = await self._store.append(
            OperationInput(
                tool=ALERT_TOOL_LABEL,
                model=ALERT_MODEL,
                status=OperationStatus.ERROR,
                latency_ms=0,
                file_count=0,
                file_formats=[],
                error_message=(
                    f"CRITICAL: {usage_percent:.1f}% usage. "
                    f"Notification sent to {settings.alert_email}."
                ),
            ),
            is_alert=True,
        )
        if settings_writable:
            await self._store.put_settings(settings.model_copy(update={"last_alert_sent_at": now}))
        else:
            # Stamping defaults would replace the admin's unread settings
            logger.warning("Alert cooldown not stamped, settings unreadable", record_id=alert.id)
        ALERTS_DISPATCHED.inc()

        logger.warning(
            "Usage alert dispatched",
            record_id=alert.id,
            usage_percent=round(usage_percent, 1),
            threshold_percent=settings.effective_threshold,
            destination=settings.alert_email,
        )

        if self._notifier is not None:
            await self._notifier.notify(usage_percent, settings.alert_email)
