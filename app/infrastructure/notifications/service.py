"""Notification service for dependency injection.

Wires stores, channel senders and the dispatcher from settings, and gives
route handlers and workflows one object to depend on.
"""

from typing import TYPE_CHECKING, Dict, Iterable, Optional

import httpx

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels import (
    ChannelSender,
    ConnectionRegistry,
    EmailChannel,
    InAppChannel,
    PushChannel,
    SMSChannel,
    WebSocketChannel,
)
from infrastructure.notifications.contacts import UserContactDirectory
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    NotificationPayload,
    NotificationType,
    SendOptions,
)
from infrastructure.notifications.preferences import PreferenceStore
from infrastructure.notifications.records import NotificationStore
from infrastructure.notifications.subscriptions import PushSubscriptionStore
from infrastructure.operations import OperationResult
from infrastructure.persistence import Database
from infrastructure.resilience import CircuitBreaker, register_circuit_breaker

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


class NotificationService:
    """Class-based notification service.

    Thin facade: delivery is delegated to NotificationDispatcher, reads and
    writes to the stores.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.get("/unread-count")
        async def unread_count(service: NotificationServiceDep, user_id: CurrentUserId):
            return {"count": await service.records.get_unread_count(user_id)}

        # Direct instantiation
        service = NotificationService(settings, database, ConnectionRegistry())
        await service.send_notification(user_id, NotificationType.ACCOUNT_UPDATE, payload)
    """

    def __init__(
        self,
        settings: "Settings",
        database: Database,
        registry: ConnectionRegistry,
        senders: Optional[Iterable[ChannelSender]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Settings instance (passed from provider).
            database: Shared Database.
            registry: Open websocket connections.
            senders: Channel senders to use instead of the ones built from settings.
            http_client: Shared AsyncClient for HTTP-based providers.
        """
        self._settings = settings
        self.registry = registry
        self.records = NotificationStore(database)
        self.preferences = PreferenceStore(database)
        self.delivery_log = DeliveryLog(database)
        self.subscriptions = PushSubscriptionStore(database)
        self.contacts = UserContactDirectory(database)

        if senders is None:
            senders = self._build_senders(http_client)
        senders = list(senders)
        self._push = next((s for s in senders if isinstance(s, PushChannel)), None)

        self.dispatcher = NotificationDispatcher(
            records=self.records,
            preferences=self.preferences,
            delivery_log=self.delivery_log,
            senders=senders,
            channel_timeout_seconds=settings.notifications.CHANNEL_TIMEOUT_SECONDS,
        )

    def _build_senders(
        self, http_client: Optional[httpx.AsyncClient]
    ) -> list[ChannelSender]:
        notification_settings = self._settings.notifications

        sms_breaker = CircuitBreaker(
            name="twilio_sms",
            failure_threshold=notification_settings.PROVIDER_FAILURE_THRESHOLD,
            timeout_seconds=notification_settings.CIRCUIT_TIMEOUT_SECONDS,
        )
        email_breaker = CircuitBreaker(
            name="smtp_email",
            failure_threshold=notification_settings.PROVIDER_FAILURE_THRESHOLD,
            timeout_seconds=notification_settings.CIRCUIT_TIMEOUT_SECONDS,
        )
        register_circuit_breaker(sms_breaker)
        register_circuit_breaker(email_breaker)

        return [
            PushChannel(self._settings.push, self.subscriptions),
            EmailChannel(
                self._settings.email,
                self.contacts,
                public_base_url=notification_settings.PUBLIC_BASE_URL,
                circuit_breaker=email_breaker,
            ),
            SMSChannel(
                self._settings.sms,
                self.contacts,
                http_client=http_client,
                circuit_breaker=sms_breaker,
            ),
            WebSocketChannel(
                self.registry, event_name=notification_settings.WEBSOCKET_EVENT
            ),
            InAppChannel(),
        ]

    async def send_notification(
        self,
        user_id: str,
        notification_type: NotificationType,
        payload: NotificationPayload,
        options: Optional[SendOptions] = None,
    ) -> Optional[str]:
        """See NotificationDispatcher.send_notification."""
        return await self.dispatcher.send_notification(
            user_id, notification_type, payload, options
        )

    def get_vapid_public_key(self) -> str:
        if self._push is not None:
            return self._push.vapid_public_key
        return self._settings.push.VAPID_PUBLIC_KEY

    async def health_check(self) -> Dict[str, OperationResult]:
        return await self.dispatcher.health_check()

    async def aclose(self) -> None:
        """Release sender transports at shutdown.

        A sender that fails to close is logged and the others are still closed.
        """
        for name, sender in self.dispatcher.senders.items():
            try:
                await sender.aclose()
            except Exception as e:  # pylint: disable=broad-except
                logger.error("channel_close_failed", channel_name=name, error=str(e))
        logger.info("notification_service_closed")
