"""Admin settings domain model."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_ALERT_EMAIL = "alerts@example.com"
DEFAULT_THRESHOLD_PERCENT = 80

MIN_THRESHOLD_PERCENT = 10
MAX_THRESHOLD_PERCENT = 95


class AdminSettings(BaseModel):
    """Process-wide alerting configuration.

    The threshold is stored as given; range policing belongs to the UI.
    Comparisons go through ``effective_threshold``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    alert_email: str = Field(
        default=DEFAULT_ALERT_EMAIL,
        description="Destination of usage alert notifications",
    )
    threshold_percent: int = Field(
        default=DEFAULT_THRESHOLD_PERCENT,
        description="Usage percentage of the rate capacity that triggers an alert",
    )
    last_alert_sent_at: int | None = Field(
        default=None,
        description="Epoch milliseconds of the most recent alert dispatch",
    )

    @property
    def effective_threshold(self) -> int:
        return min(max(self.threshold_percent, MIN_THRESHOLD_PERCENT), MAX_THRESHOLD_PERCENT)
