"""Push channel implementation: VAPID web push and Firebase Cloud Messaging.

Browsers subscribe through the Push API and are reached with pywebpush;
mobile devices register FCM tokens and are reached with firebase_admin.
Both SDKs are blocking and run in worker threads.
"""

import asyncio
import json
from typing import Any, Dict, Optional, TYPE_CHECKING

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError
from pywebpush import WebPushException, webpush

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.models import (
    ChannelMessage,
    ChannelSkipped,
    NotificationChannel,
    NotificationPriority,
    PushSubscription,
)
from infrastructure.notifications.subscriptions import PushSubscriptionStore
from infrastructure.operations import OperationResult, OperationStatus, classify_http_error

if TYPE_CHECKING:
    from infrastructure.configuration.integrations import PushSettings

logger = get_module_logger()

DEFAULT_ICON = "/pwa-192x192.png"
DEFAULT_BADGE = "/pwa-64x64.png"


class PushDeliveryError(Exception):
    """Raised when no subscription of the user accepted the notification."""


def build_push_payload(message: ChannelMessage) -> Dict[str, Any]:
    """JSON body understood by the service worker."""
    data = dict(message.data)
    data.setdefault("notificationId", message.notification_id)
    data.setdefault("type", message.type.value)
    return {
        "title": message.title,
        "body": message.body,
        "icon": message.data.get("icon") or DEFAULT_ICON,
        "badge": message.data.get("badge") or DEFAULT_BADGE,
        "data": data,
        "tag": message.tag,
        "requireInteraction": message.require_interaction,
        "actions": [action.model_dump(exclude_none=True) for action in message.actions],
    }


def _fcm_data(payload: Dict[str, Any]) -> Dict[str, str]:
    """FCM data values must be strings."""
    return {
        key: value if isinstance(value, str) else json.dumps(value)
        for key, value in payload["data"].items()
    }


def _initialize_firebase(credentials_path: Optional[str]) -> bool:
    """Initialize the default Firebase app once; False if it cannot be."""
    if firebase_admin._apps:
        return True
    try:
        cred = (
            credentials.Certificate(credentials_path)
            if credentials_path
            else credentials.ApplicationDefault()
        )
        firebase_admin.initialize_app(cred)
    except (ValueError, OSError, FirebaseError) as e:
        logger.error("firebase_initialization_failed", error=str(e))
        return False
    logger.info("firebase_initialized")
    return True


class PushChannel(ChannelSender):
    """Push notification channel.

    Capability flags are computed once at construction:
    - web_push_capable: both VAPID keys configured
    - fcm_capable: FCM enabled and the Firebase app initialized

    Subscriptions the push service reports as gone (404/410, FCM
    "unregistered") are deleted.
    """

    def __init__(
        self,
        settings: "PushSettings",
        subscriptions: PushSubscriptionStore,
        fcm_capable: Optional[bool] = None,
    ):
        self._settings = settings
        self._subscriptions = subscriptions
        self.web_push_capable = settings.web_push_configured
        if fcm_capable is None:
            fcm_capable = settings.FCM_ENABLED and _initialize_firebase(
                settings.FCM_CREDENTIALS_PATH
            )
        self.fcm_capable = fcm_capable

        if not self.web_push_capable:
            logger.warning(
                "vapid_keys_not_configured",
                hint="generate keys with `vapid --gen` and set VAPID_PUBLIC_KEY/VAPID_PRIVATE_KEY",
            )
        logger.info(
            "initialized_push_channel",
            web_push_capable=self.web_push_capable,
            fcm_capable=self.fcm_capable,
        )

    @property
    def channel(self) -> NotificationChannel:
        return NotificationChannel.PUSH

    @property
    def vapid_public_key(self) -> str:
        """Public key browsers need to create a subscription."""
        return self._settings.VAPID_PUBLIC_KEY

    def _can_deliver(self, subscription: PushSubscription) -> bool:
        return self.fcm_capable if subscription.is_fcm else self.web_push_capable

    async def send(self, user_id: str, message: ChannelMessage) -> Optional[bool]:
        if not (self.web_push_capable or self.fcm_capable):
            raise ChannelSkipped("Push transport not configured")

        subscriptions = [
            s
            for s in await self._subscriptions.get_user_subscriptions(user_id)
            if self._can_deliver(s)
        ]
        if not subscriptions:
            raise ChannelSkipped("No push subscriptions")

        payload = build_push_payload(message)
        outcomes = await asyncio.gather(
            *(self._deliver(user_id, s, payload, message) for s in subscriptions)
        )
        delivered = sum(1 for ok in outcomes if ok)
        if delivered == 0:
            raise PushDeliveryError(
                f"Push delivery failed for all {len(subscriptions)} subscriptions"
            )

        logger.info(
            "push_sent",
            user_id=user_id,
            notification_id=message.notification_id,
            delivered=delivered,
            subscriptions=len(subscriptions),
        )
        return True

    async def _deliver(
        self,
        user_id: str,
        subscription: PushSubscription,
        payload: Dict[str, Any],
        message: ChannelMessage,
    ) -> bool:
        if subscription.is_fcm:
            return await self._deliver_fcm(user_id, subscription, payload, message)
        return await self._deliver_web(user_id, subscription, payload)

    async def _deliver_web(
        self, user_id: str, subscription: PushSubscription, payload: Dict[str, Any]
    ) -> bool:
        try:
            await asyncio.to_thread(
                webpush,
                subscription_info={
                    "endpoint": subscription.endpoint,
                    "keys": {"p256dh": subscription.p256dh, "auth": subscription.auth},
                },
                data=json.dumps(payload),
                vapid_private_key=self._settings.VAPID_PRIVATE_KEY,
                vapid_claims={"sub": self._settings.VAPID_SUBJECT},
            )
        except (WebPushException, OSError) as e:
            result = classify_http_error(e, provider="web_push")
            if result.status == OperationStatus.NOT_FOUND:
                logger.info("push_subscription_expired", user_id=user_id)
                await self._subscriptions.remove_endpoint(subscription.endpoint)
            else:
                logger.error(
                    "web_push_failed",
                    user_id=user_id,
                    error=result.message,
                    error_code=result.error_code,
                )
            return False
        return True

    async def _deliver_fcm(
        self,
        user_id: str,
        subscription: PushSubscription,
        payload: Dict[str, Any],
        message: ChannelMessage,
    ) -> bool:
        urgent = message.priority.rank >= NotificationPriority.HIGH.rank
        fcm_message = messaging.Message(
            token=subscription.endpoint,
            notification=messaging.Notification(
                title=payload["title"], body=payload["body"]
            ),
            data=_fcm_data(payload),
            android=messaging.AndroidConfig(
                priority="high" if urgent else "normal",
                notification=messaging.AndroidNotification(tag=message.tag),
            ),
        )
        try:
            await asyncio.to_thread(messaging.send, fcm_message)
        except messaging.UnregisteredError:
            logger.info("fcm_token_unregistered", user_id=user_id)
            await self._subscriptions.remove_endpoint(subscription.endpoint)
            return False
        except FirebaseError as e:
            logger.error("fcm_send_failed", user_id=user_id, error=str(e))
            return False
        return True

    async def health_check(self) -> OperationResult:
        if not (self.web_push_capable or self.fcm_capable):
            return OperationResult.permanent_error(
                message="No push transport configured",
                error_code="PUSH_NOT_CONFIGURED",
            )
        return OperationResult.success(
            message="Push transport ready",
            data={
                "web_push_capable": self.web_push_capable,
                "fcm_capable": self.fcm_capable,
            },
        )
