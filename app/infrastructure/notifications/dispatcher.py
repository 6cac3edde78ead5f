"""Notification dispatcher with preference-aware multi-channel fan-out.

send_notification() is the single entry point used by booking, payment,
review and admin workflows:

1. Persist the notification record (the in-app delivery)
2. Resolve channels from overrides, or from templates and user preferences
3. Fan out to every resolved channel concurrently
4. Write exactly one delivery log entry per attempted channel

Channel failures are logged and audited, never raised to the caller and
never allowed to cancel sibling channels.

Usage Example:
    from infrastructure.notifications import (
        NotificationDispatcher,
        NotificationPayload,
        NotificationType,
    )

    notification_id = await dispatcher.send_notification(
        user_id="user-123",
        notification_type=NotificationType.BOOKING_CONFIRMED,
        payload=NotificationPayload(
            title="Booking Confirmed!",
            body="Chef Marie confirmed your dinner on June 3.",
            data={"bookingId": "b-1", "url": "/dashboard?tab=bookings"},
        ),
    )
"""

import asyncio
from typing import Dict, Iterable, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.models import (
    ChannelMessage,
    ChannelSkipped,
    DeliveryStatus,
    NotificationChannel,
    NotificationPayload,
    NotificationRecord,
    NotificationType,
    SendOptions,
)
from infrastructure.notifications.preferences import PreferenceStore
from infrastructure.notifications.records import NotificationStore
from infrastructure.notifications.templates import get_notification_template
from infrastructure.operations import OperationResult

logger = get_module_logger()

ALL_CHANNELS: List[str] = [
    NotificationChannel.PUSH.value,
    NotificationChannel.EMAIL.value,
    NotificationChannel.SMS.value,
    NotificationChannel.WEBSOCKET.value,
    NotificationChannel.IN_APP.value,
]


def _dedupe(channels: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for channel in channels:
        if channel not in seen:
            seen.add(channel)
            ordered.append(channel)
    return ordered


class NotificationDispatcher:
    """Multi-channel notification dispatcher.

    Attributes:
        senders: Dict mapping channel name to its ChannelSender
        channel_timeout_seconds: Upper bound on one sender call; expiry is
            logged as FAILED

    Example:
        dispatcher = NotificationDispatcher(
            records=NotificationStore(database),
            preferences=PreferenceStore(database),
            delivery_log=DeliveryLog(database),
            senders=[InAppChannel(), WebSocketChannel(registry)],
        )
    """

    def __init__(
        self,
        records: NotificationStore,
        preferences: PreferenceStore,
        delivery_log: DeliveryLog,
        senders: Iterable[ChannelSender],
        channel_timeout_seconds: float = 10.0,
    ):
        self.records = records
        self.preferences = preferences
        self.delivery_log = delivery_log
        self.senders: Dict[str, ChannelSender] = {
            sender.channel_name: sender for sender in senders
        }
        self.channel_timeout_seconds = channel_timeout_seconds

        logger.info(
            "initialized_notification_dispatcher",
            channels=list(self.senders.keys()),
            channel_timeout_seconds=channel_timeout_seconds,
        )

    async def send_notification(
        self,
        user_id: str,
        notification_type: NotificationType,
        payload: NotificationPayload,
        options: Optional[SendOptions] = None,
    ) -> Optional[str]:
        """Create a notification and deliver it on every resolved channel.

        Args:
            user_id: Recipient
            notification_type: One of NotificationType
            payload: Title, body and optional overrides
            options: Channel override list or skip_preferences

        Returns:
            The notification id, or None if the record could not be created
            (in which case no channel is attempted).
        """
        options = options or SendOptions()
        notification_type = NotificationType(notification_type)
        template = get_notification_template(notification_type)

        try:
            record = await self.records.create(
                user_id=user_id,
                notification_type=notification_type,
                title=payload.title,
                body=payload.body,
                data=payload.data or {},
                category=payload.category or template.category,
                priority=payload.priority or template.priority,
            )
        except Exception as e:
            logger.error(
                "notification_create_failed",
                user_id=user_id,
                notification_type=notification_type.value,
                error=str(e),
                exc_info=True,
            )
            return None

        logger.info(
            "notification_created",
            notification_id=record.id,
            user_id=user_id,
            notification_type=notification_type.value,
        )

        channels = await self.resolve_channels(user_id, notification_type, options)
        await self._fan_out(record, payload, channels)

        logger.info(
            "notification_dispatched",
            notification_id=record.id,
            user_id=user_id,
            channels=channels,
        )
        return record.id

    async def resolve_channels(
        self,
        user_id: str,
        notification_type: NotificationType,
        options: Optional[SendOptions] = None,
    ) -> List[str]:
        """Channels to attempt for this send.

        - options.channels: exactly that list, deduplicated in order
        - options.skip_preferences: all five channels
        - otherwise IN_APP and PUSH follow the user's preference, EMAIL and
          SMS need both the template flag and the preference, WEBSOCKET is
          always included
        """
        options = options or SendOptions()
        if options.channels is not None:
            return _dedupe(options.channels)
        if options.skip_preferences:
            return list(ALL_CHANNELS)

        template = get_notification_template(notification_type)
        candidates = [NotificationChannel.IN_APP, NotificationChannel.PUSH]
        if template.email_enabled:
            candidates.append(NotificationChannel.EMAIL)
        if template.sms_enabled:
            candidates.append(NotificationChannel.SMS)

        enabled = await asyncio.gather(
            *(
                self.preferences.is_channel_enabled(user_id, notification_type, channel)
                for channel in candidates
            )
        )
        channels = [
            channel.value for channel, on in zip(candidates, enabled) if on
        ]
        channels.append(NotificationChannel.WEBSOCKET.value)
        return channels

    async def _fan_out(
        self,
        record: NotificationRecord,
        payload: NotificationPayload,
        channels: List[str],
    ) -> None:
        message = ChannelMessage(
            notification_id=record.id,
            type=record.type,
            title=record.title,
            body=record.body,
            data=record.data,
            tag=f"{record.type.value}-{record.id}",
            category=record.category,
            priority=record.priority,
            require_interaction=bool(payload.require_interaction),
            actions=payload.actions or [],
        )
        await asyncio.gather(
            *(self._dispatch_channel(record.user_id, name, message) for name in channels)
        )

    async def _dispatch_channel(
        self, user_id: str, channel_name: str, message: ChannelMessage
    ) -> None:
        """Run one sender and log its outcome. Never raises."""
        status, error = await self._attempt(user_id, channel_name, message)
        await self.delivery_log.log(message.notification_id, channel_name, status, error)

    async def _attempt(
        self, user_id: str, channel_name: str, message: ChannelMessage
    ) -> tuple[DeliveryStatus, Optional[str]]:
        sender = self.senders.get(channel_name)
        if sender is None:
            logger.warning(
                "channel_not_found",
                channel_name=channel_name,
                available_channels=list(self.senders.keys()),
            )
            return DeliveryStatus.FAILED, f"Unknown channel: {channel_name}"

        try:
            outcome = await asyncio.wait_for(
                sender.send(user_id, message), timeout=self.channel_timeout_seconds
            )
        except ChannelSkipped as skipped:
            logger.info(
                "channel_skipped",
                channel_name=channel_name,
                notification_id=message.notification_id,
                reason=skipped.reason,
            )
            return DeliveryStatus.SKIPPED, skipped.reason
        except asyncio.TimeoutError:
            logger.error(
                "channel_timed_out",
                channel_name=channel_name,
                notification_id=message.notification_id,
                timeout_seconds=self.channel_timeout_seconds,
            )
            return (
                DeliveryStatus.FAILED,
                f"Timed out after {self.channel_timeout_seconds}s",
            )
        except Exception as e:
            logger.error(
                "channel_dispatch_failed",
                channel_name=channel_name,
                notification_id=message.notification_id,
                error=str(e),
                exc_info=True,
            )
            return DeliveryStatus.FAILED, str(e) or type(e).__name__

        if outcome is False:
            logger.warning(
                "channel_send_returned_failure",
                channel_name=channel_name,
                notification_id=message.notification_id,
            )
            return DeliveryStatus.FAILED, f"{channel_name} send failed"

        logger.info(
            "channel_delivered",
            channel_name=channel_name,
            notification_id=message.notification_id,
        )
        return sender.success_status, None

    async def health_check(self) -> Dict[str, OperationResult]:
        """Health of every registered channel, keyed by channel name."""
        names = list(self.senders.keys())
        results = await asyncio.gather(
            *(self.senders[name].health_check() for name in names),
            return_exceptions=True,
        )
        health: Dict[str, OperationResult] = {}
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error("channel_health_check_failed", channel_name=name, error=str(result))
                health[name] = OperationResult.transient_error(
                    message=f"Health check failed: {result}",
                    error_code="HEALTH_CHECK_ERROR",
                )
            else:
                health[name] = result
        return health
