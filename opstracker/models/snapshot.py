"""Derived usage snapshot models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from opstracker.models.operation import OperationRecord


class HealthState(str, Enum):
    """Health gauge derived from error rate and load."""

    HEALTHY = "Healthy"
    DEGRADED = "Degraded"
    CRITICAL = "Critical"


class StatsSnapshot(BaseModel):
    """Point-in-time view of the event log. Recomputed on every request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    generated_at: int = Field(..., description="Reference time in epoch milliseconds")
    total: int = Field(default=0, ge=0, description="Real (non-alert) records")
    total_files: int = Field(default=0, ge=0)
    format_distribution: dict[str, int] = Field(default_factory=dict)
    rpm: int = Field(default=0, ge=0, description="Real records in the trailing minute")
    limit: int = Field(..., description="Rate capacity in requests per minute")
    usage_percent: float = Field(default=0.0, ge=0.0)
    success_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    error_count: int = Field(default=0, ge=0)
    error_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    avg_latency_ms: int = Field(default=0, ge=0, description="Mean latency of successful records")
    health: HealthState = HealthState.HEALTHY
    recent_logs: list[OperationRecord] = Field(default_factory=list)
