from opstracker.engine.metrics import MAX_RPM, classify_health, compute_snapshot
from opstracker.models.operation import OperationRecord, OperationStatus
from opstracker.models.snapshot import HealthState

NOW = 1_767_225_600_000


def make_record(
    age_ms: int = 1_000,
    status: OperationStatus = OperationStatus.SUCCESS,
    latency_ms: int = 100,
    file_formats: list[str] | None = None,
    is_alert: bool = False,
    record_id: str = "rec",
) -> OperationRecord:
    formats = ["pdf"] if file_formats is None else file_formats
    return OperationRecord(
        id=record_id,
        timestamp=NOW - age_ms,
        tool="Compress PDF",
        model="Local Engine",
        status=status,
        latency_ms=latency_ms,
        file_count=len(formats),
        file_formats=formats,
        is_alert=is_alert,
    )


def test_empty_log_yields_zeroed_healthy_snapshot():
    snapshot = compute_snapshot([], now=NOW)

    assert snapshot.total == 0
    assert snapshot.rpm == 0
    assert snapshot.success_rate == 0
    assert snapshot.error_rate == 0
    assert snapshot.avg_latency_ms == 0
    assert snapshot.format_distribution == {}
    assert snapshot.health == HealthState.HEALTHY
    assert snapshot.limit == MAX_RPM
    assert snapshot.recent_logs == []


def test_rate_window_is_strict_sixty_seconds():
    records = [make_record(age_ms=1_000), make_record(age_ms=59_000), make_record(age_ms=61_000)]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.rpm == 2
    assert snapshot.total == 3


def test_record_exactly_sixty_seconds_old_is_outside_window():
    snapshot = compute_snapshot([make_record(age_ms=60_000)], now=NOW)

    assert snapshot.rpm == 0


def test_average_latency_excludes_failures():
    records = [
        make_record(latency_ms=100),
        make_record(status=OperationStatus.ERROR, latency_ms=9999),
    ]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.avg_latency_ms == 100
    assert snapshot.success_rate == 50
    assert snapshot.error_count == 1


def test_average_latency_rounds_half_up():
    records = [make_record(latency_ms=100), make_record(latency_ms=101)]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.avg_latency_ms == 101


def test_format_distribution_folds_case_per_entry():
    records = [
        make_record(file_formats=["PDF", "pdf"]),
        make_record(file_formats=["Docx"]),
    ]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.format_distribution == {"pdf": 2, "docx": 1}
    assert snapshot.total_files == 3


def test_alert_records_only_appear_in_recent_logs():
    alert = make_record(
        status=OperationStatus.ERROR,
        latency_ms=0,
        file_formats=[],
        is_alert=True,
        record_id="alert-1",
    )
    records = [alert, make_record(latency_ms=300)]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.total == 1
    assert snapshot.rpm == 1
    assert snapshot.error_count == 0
    assert snapshot.success_rate == 100
    assert snapshot.recent_logs[0].id == "alert-1"
    assert len(snapshot.recent_logs) == 2


def test_recent_logs_keeps_newest_twenty_in_order():
    records = [make_record(record_id=f"rec-{idx}") for idx in range(30)]

    snapshot = compute_snapshot(records, now=NOW)

    assert [r.id for r in snapshot.recent_logs] == [f"rec-{idx}" for idx in range(20)]


def test_full_rate_capacity_is_critical():
    records = [make_record(age_ms=idx * 1_000) for idx in range(MAX_RPM)]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.rpm == 15
    assert snapshot.usage_percent == 100
    assert snapshot.health == HealthState.CRITICAL


def test_load_boundaries():
    at_eighty = compute_snapshot([make_record() for _ in range(12)], now=NOW)
    above_eighty = compute_snapshot([make_record() for _ in range(13)], now=NOW)

    assert at_eighty.health == HealthState.HEALTHY
    assert above_eighty.health == HealthState.DEGRADED


def test_error_rate_of_exactly_half_is_not_critical():
    records = [
        make_record(age_ms=120_000),
        make_record(age_ms=120_000, status=OperationStatus.ERROR),
    ]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.error_rate == 50
    assert snapshot.health == HealthState.DEGRADED


def test_error_rate_above_half_is_critical():
    records = [make_record(age_ms=120_000, status=OperationStatus.ERROR) for _ in range(51)]
    records += [make_record(age_ms=120_000) for _ in range(49)]

    snapshot = compute_snapshot(records, now=NOW)

    assert snapshot.error_rate > 50
    assert snapshot.health == HealthState.CRITICAL


def test_classify_health_thresholds():
    assert classify_health(0.0, 0.0) == HealthState.HEALTHY
    assert classify_health(15.0, 0.8) == HealthState.HEALTHY
    assert classify_health(15.1, 0.0) == HealthState.DEGRADED
    assert classify_health(0.0, 0.81) == HealthState.DEGRADED
    assert classify_health(50.0, 0.95) == HealthState.DEGRADED
    assert classify_health(51.0, 0.0) == HealthState.CRITICAL
    assert classify_health(0.0, 0.96) == HealthState.CRITICAL


def test_snapshot_is_a_pure_function_of_records():
    records = [
        make_record(file_formats=["xlsx"]),
        make_record(status=OperationStatus.ERROR, age_ms=70_000),
    ]

    assert compute_snapshot(records, now=NOW) == compute_snapshot(records, now=NOW)
