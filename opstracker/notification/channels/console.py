"""Console notification channel."""

from opstracker.core.logging import get_logger
from opstracker.models.notification import AlertNotice
from opstracker.notification.channels.base import NotificationChannel

logger = get_logger(__name__)


class ConsoleChannel(NotificationChannel):
    """Writes alerts to the application log. Always succeeds."""

    @property
    def channel_type(self) -> str:
        return "console"

    async def send(self, notice: AlertNotice) -> bool:
        logger.warning(
            "[API ALERT] Email alert triggered",
            destination=notice.destination,
            usage=f"{notice.usage_percent:.1f}%",
            notice_id=notice.notice_id,
        )
        return True
