"""Email notification channel."""

import html
import re
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from opstracker.core.config import Settings, get_settings
from opstracker.core.logging import get_logger
from opstracker.models.notification import AlertNotice
from opstracker.notification.channels.base import NotificationChannel

logger = get_logger(__name__)


class EmailChannel(NotificationChannel):
    """Sends alerts over SMTP to the configured alert address."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()

    @property
    def channel_type(self) -> str:
        return "email"

    async def send(self, notice: AlertNotice) -> bool:
        """Send the alert to ``notice.destination``.

        Args:
            notice: Alert notice

        Returns:
            True if sent successfully
        """
        if not notice.destination:
            logger.warning("Email alert missing recipient", notice_id=notice.notice_id)
            return False

        if not self._settings.smtp_host:
            logger.warning("SMTP not configured")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = notice.subject
        msg["From"] = self._settings.smtp_from or self._settings.smtp_user
        msg["To"] = notice.destination

        msg.attach(MIMEText(notice.message, "plain", "utf-8"))
        msg.attach(MIMEText(self._to_html(notice.message), "html", "utf-8"))

        try:
            await aiosmtplib.send(
                msg,
                hostname=self._settings.smtp_host,
                port=self._settings.smtp_port,
                username=self._settings.smtp_user or None,
                password=self._settings.smtp_password or None,
                use_tls=not self._settings.smtp_use_tls,
                start_tls=self._settings.smtp_use_tls,
                timeout=self._settings.smtp_timeout,
            )
            logger.info("Email sent", recipient=notice.destination, notice_id=notice.notice_id)
            return True

        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Email send failed", recipient=notice.destination, error=str(e))
            return False

    def _to_html(self, message: str) -> str:
        """Render the plain-text alert, with **bold** spans, as HTML."""
        body = html.escape(message).replace("\n", "<br>")
        body = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", body)
        return f"<html><body>{body}</body></html>"
