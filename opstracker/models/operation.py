"""Operation record domain models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Conventional backend labels reported by callers
LOCAL_ENGINE_MODEL = "Local Engine"
ERROR_STATE_MODEL = "Error State"
ALERT_MODEL = "N/A"


class OperationStatus(str, Enum):
    """Outcome of a completed operation."""

    SUCCESS = "success"
    ERROR = "error"


class OperationInput(BaseModel):
    """Operation outcome as reported by a converter or the model proxy.

    Stored and served with camelCase keys (``latencyMs``, ``fileFormats``)
    so persisted blobs stay readable by the browser dashboard.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tool: str = Field(..., min_length=1, description="Operation label, e.g. 'JPG to PDF'")
    model: str = Field(..., description="Execution backend, e.g. 'Local Engine'")
    status: OperationStatus = Field(..., description="Operation outcome")
    latency_ms: int = Field(default=0, description="Caller-measured duration in milliseconds")
    file_count: int = Field(default=0, description="Number of input files")
    file_formats: list[str] = Field(
        default_factory=list,
        description="Extension of each input file",
    )
    error_message: str | None = Field(default=None, description="Failure detail")

    @field_validator("latency_ms", "file_count")
    @classmethod
    def clamp_negative(cls, value: int) -> int:
        """Negative counts are normalized to zero rather than rejected."""
        return max(value, 0)


class OperationRecord(OperationInput):
    """An operation as stored in the event log. Never edited after append."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Record identifier")
    timestamp: int = Field(..., description="Append time in epoch milliseconds")
    is_alert: bool = Field(default=False, description="Synthetic record written by the alert path")
