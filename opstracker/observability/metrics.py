"""Prometheus metrics definitions."""

from prometheus_client import Counter, Gauge

# Operation metrics
OPERATIONS_RECORDED = Counter(
    "opstracker_operations_recorded_total",
    "Total number of operations recorded",
    ["status"],
)

CURRENT_RPM = Gauge(
    "opstracker_requests_per_minute",
    "Real operations in the trailing minute at the last snapshot",
)

# Alert metrics
ALERTS_DISPATCHED = Counter(
    "opstracker_alerts_dispatched_total",
    "Total usage alerts dispatched",
)

ALERTS_SUPPRESSED = Counter(
    "opstracker_alerts_suppressed_total",
    "Usage alerts suppressed while over threshold",
    ["reason"],
)

# Notification metrics
NOTIFICATIONS_SENT = Counter(
    "opstracker_notifications_sent_total",
    "Total alert notifications sent",
    ["channel", "status"],
)
