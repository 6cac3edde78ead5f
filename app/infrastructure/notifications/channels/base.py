"""Channel sender abstract base class.

Push, email, SMS, websocket and in-app senders all implement this
interface. The dispatcher only ever talks to senders through it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from infrastructure.notifications.models import (
    ChannelMessage,
    DeliveryStatus,
    NotificationChannel,
)
from infrastructure.operations import OperationResult


class ChannelSender(ABC):
    """Abstract base class for delivery channels.

    Send contract:
    - return None or True: delivered (logged with success_status)
    - return False: failed (logged FAILED)
    - raise ChannelSkipped: deliberately not attempted (logged SKIPPED)
    - raise anything else: failed (logged FAILED with the error text)

    Senders are built once at startup with their SDK clients injected.

    Example Implementation:
        class InAppChannel(ChannelSender):

            @property
            def channel(self) -> NotificationChannel:
                return NotificationChannel.IN_APP

            async def send(self, user_id, message):
                return None
    """

    @property
    @abstractmethod
    def channel(self) -> NotificationChannel:
        """Channel this sender delivers on."""

    @property
    def channel_name(self) -> str:
        return self.channel.value

    @property
    def success_status(self) -> DeliveryStatus:
        """Status logged when send() succeeds."""
        return DeliveryStatus.SENT

    @abstractmethod
    async def send(self, user_id: str, message: ChannelMessage) -> Optional[bool]:
        """Deliver message to user_id on this channel."""

    async def health_check(self) -> OperationResult:
        """Report whether the channel can deliver (credentials, transport).

        Returns:
            OperationResult: SUCCESS when ready, an error status otherwise
        """
        return OperationResult.success(message=f"{self.channel_name} ready")

    async def aclose(self) -> None:
        """Release transport resources at shutdown."""
        return None
