"""In-app channel. The notification record itself is the delivery."""

from typing import Optional

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.models import (
    ChannelMessage,
    DeliveryStatus,
    NotificationChannel,
)


class InAppChannel(ChannelSender):
    @property
    def channel(self) -> NotificationChannel:
        return NotificationChannel.IN_APP

    @property
    def success_status(self) -> DeliveryStatus:
        return DeliveryStatus.DELIVERED

    async def send(self, user_id: str, message: ChannelMessage) -> Optional[bool]:
        return None
