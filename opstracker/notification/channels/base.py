"""Channel interface for usage alert delivery."""

from abc import ABC, abstractmethod

from opstracker.models.notification import AlertNotice


class NotificationChannel(ABC):
    """One way of getting an alert to a person.

    ``send`` reports failure by returning False; the notifier also guards
    against channels that raise.
    """

    @property
    @abstractmethod
    def channel_type(self) -> str:
        """Label used in logs and the notifications metric."""

    @abstractmethod
    async def send(self, notice: AlertNotice) -> bool:
        """Deliver ``notice`` to ``notice.destination``."""

    async def close(self) -> None:
        """Release connections held by the channel."""
        return None
