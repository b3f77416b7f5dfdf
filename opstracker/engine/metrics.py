"""Pure snapshot computation over the operation log."""

from math import floor
from typing import Iterable

from opstracker.core.clock import now_ms
from opstracker.models.operation import OperationRecord, OperationStatus
from opstracker.models.snapshot import HealthState, StatsSnapshot

MAX_RPM = 15
RATE_WINDOW_MS = 60_000
RECENT_LOGS_LIMIT = 20

CRITICAL_ERROR_RATE = 50.0
CRITICAL_LOAD_RATIO = 0.95
DEGRADED_ERROR_RATE = 15.0
DEGRADED_LOAD_RATIO = 0.8


def compute_snapshot(records: Iterable[OperationRecord], now: int | None = None) -> StatsSnapshot:
    """Compute usage and health from newest-first records.

    Alert records only show up in ``recent_logs``; every count, rate and
    distribution is taken over real operations.
    """
    if now is None:
        now = now_ms()
    records_list = list(records)
    operations = [record for record in records_list if not record.is_alert]

    total = len(operations)
    rpm = sum(1 for record in operations if now - record.timestamp < RATE_WINDOW_MS)
    successes = [record for record in operations if record.status == OperationStatus.SUCCESS]
    error_count = sum(1 for record in operations if record.status == OperationStatus.ERROR)

    success_rate = len(successes) * 100 / total if total > 0 else 0.0
    error_rate = error_count * 100 / total if total > 0 else 0.0
    avg_latency = (
        _round_half_up(sum(record.latency_ms for record in successes) / len(successes))
        if successes
        else 0
    )

    format_distribution: dict[str, int] = {}
    for record in operations:
        for fmt in record.file_formats:
            ext = fmt.lower()
            format_distribution[ext] = format_distribution.get(ext, 0) + 1

    return StatsSnapshot(
        generated_at=now,
        total=total,
        total_files=sum(record.file_count for record in operations),
        format_distribution=format_distribution,
        rpm=rpm,
        limit=MAX_RPM,
        usage_percent=rpm * 100 / MAX_RPM,
        success_rate=success_rate,
        error_count=error_count,
        error_rate=error_rate,
        avg_latency_ms=avg_latency,
        health=classify_health(error_rate, rpm / MAX_RPM),
        recent_logs=records_list[:RECENT_LOGS_LIMIT],
    )


def classify_health(error_rate: float, load_ratio: float) -> HealthState:
    """Map error rate (percent) and load ratio onto a health state.

    Critical is checked first. There is no hysteresis: the result depends
    only on the current values.
    """
    if error_rate > CRITICAL_ERROR_RATE or load_ratio > CRITICAL_LOAD_RATIO:
        return HealthState.CRITICAL
    if error_rate > DEGRADED_ERROR_RATE or load_ratio > DEGRADED_LOAD_RATIO:
        return HealthState.DEGRADED
    return HealthState.HEALTHY


def _round_half_up(value: float) -> int:
    return int(floor(value + 0.5))
