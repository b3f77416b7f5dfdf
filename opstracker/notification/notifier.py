"""Best-effort fan-out of usage alerts to notification channels."""

import uuid

from opstracker.core.config import Settings, get_settings
from opstracker.core.logging import get_logger
from opstracker.models.notification import AlertNotice
from opstracker.notification.channels.base import NotificationChannel
from opstracker.notification.channels.console import ConsoleChannel
from opstracker.notification.channels.email import EmailChannel
from opstracker.observability.metrics import NOTIFICATIONS_SENT

logger = get_logger(__name__)


class AlertNotifier:
    """Sends an alert on every configured channel.

    Delivery is fire-and-forget from the tracker's point of view: channel
    failures are logged and counted, never raised.
    """

    def __init__(self, channels: list[NotificationChannel]):
        """Initialize notifier.

        Args:
            channels: Channels to deliver on, in order
        """
        self._channels = channels

    @property
    def channels(self) -> list[NotificationChannel]:
        return list(self._channels)

    async def notify(self, usage_percent: float, destination: str) -> int:
        """Deliver a usage alert.

        Args:
            usage_percent: Usage of rate capacity when the alert fired
            destination: Alert recipient

        Returns:
            Number of channels that reported success
        """
        notice = AlertNotice(
            notice_id=f"notice_{uuid.uuid4().hex[:12]}",
            destination=destination,
            usage_percent=usage_percent,
            message=self._build_message(usage_percent, destination),
        )

        sent = 0
        for channel in self._channels:
            try:
                success = await channel.send(notice)
            except Exception as e:
                logger.error(
                    "Channel send error",
                    channel=channel.channel_type,
                    error=str(e),
                )
                success = False

            NOTIFICATIONS_SENT.labels(
                channel=channel.channel_type,
                status="sent" if success else "failed",
            ).inc()
            if success:
                sent += 1

        logger.info(
            "Alert notification processed",
            notice_id=notice.notice_id,
            success=sent,
            failed=len(self._channels) - sent,
        )
        return sent

    async def close(self) -> None:
        """Clean up channel resources."""
        for channel in self._channels:
            await channel.close()

    def _build_message(self, usage_percent: float, destination: str) -> str:
        lines = [
            "**Usage alert**",
            "",
            f"Request rate has reached **{usage_percent:.1f}%** of capacity.",
            f"Further alerts to {destination} are paused for 10 minutes.",
        ]
        return "\n".join(lines)


def build_notifier(settings: Settings | None = None) -> AlertNotifier:
    """Create a notifier for the channels named in settings."""
    settings = settings or get_settings()
    channels: list[NotificationChannel] = []
    for name in settings.alert_channels:
        if name == "email":
            channels.append(EmailChannel(settings))
        elif name == "console":
            channels.append(ConsoleChannel())
        else:
            logger.warning("Unknown channel type", channel=name)
    return AlertNotifier(channels)
