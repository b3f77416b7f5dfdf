"""Alert notification domain models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class AlertNotice(BaseModel):
    """Usage alert handed to notification channels."""

    notice_id: str = Field(..., description="Notice unique identifier")
    destination: str = Field(..., description="Alert recipient")
    usage_percent: float = Field(..., ge=0.0, description="Usage of rate capacity at dispatch")
    message: str = Field(..., description="Notification message content")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def subject(self) -> str:
        return f"Usage alert: {self.usage_percent:.1f}% of capacity"
