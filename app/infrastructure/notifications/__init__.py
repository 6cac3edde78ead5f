"""Notification dispatch pipeline.

Records a notification, resolves delivery channels from templates and user
preferences, fans out to push, email, SMS, websocket and in-app senders
concurrently, and audits every attempt in the delivery log.

Usage:
    from infrastructure.notifications import (
        NotificationPayload,
        NotificationType,
        SendOptions,
    )
    from infrastructure.services import get_notification_service

    service = get_notification_service()
    notification_id = await service.send_notification(
        user_id="user-123",
        notification_type=NotificationType.PAYMENT_FAILED,
        payload=NotificationPayload(
            title="Payment Failed",
            body="We couldn't process your payment. Please update your card.",
            data={"bookingId": "b-1", "url": "/dashboard?tab=bookings"},
        ),
    )

    # Bypass preferences for account-critical messages
    await service.send_notification(
        user_id, NotificationType.ACCOUNT_UPDATE, payload,
        SendOptions(channels=["email", "in_app"]),
    )
"""

from infrastructure.notifications.models import (
    ChannelMessage,
    ChannelPreferences,
    ChannelPreferencesUpdate,
    ChannelSkipped,
    DeliveryLogEntry,
    DeliveryStatus,
    NotificationAction,
    NotificationCategory,
    NotificationChannel,
    NotificationPayload,
    NotificationPriority,
    NotificationRecord,
    NotificationTemplate,
    NotificationType,
    PushSubscription,
    SendOptions,
    UserContact,
)
from infrastructure.notifications.templates import (
    get_default_preferences,
    get_notification_template,
)
from infrastructure.notifications.preferences import PreferenceStore
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.records import NotificationStore
from infrastructure.notifications.subscriptions import PushSubscriptionStore
from infrastructure.notifications.contacts import UserContactDirectory
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.service import NotificationService

__all__ = [
    # Models
    "ChannelMessage",
    "ChannelPreferences",
    "ChannelPreferencesUpdate",
    "ChannelSkipped",
    "DeliveryLogEntry",
    "DeliveryStatus",
    "NotificationAction",
    "NotificationCategory",
    "NotificationChannel",
    "NotificationPayload",
    "NotificationPriority",
    "NotificationRecord",
    "NotificationTemplate",
    "NotificationType",
    "PushSubscription",
    "SendOptions",
    "UserContact",
    # Templates
    "get_default_preferences",
    "get_notification_template",
    # Stores
    "PreferenceStore",
    "DeliveryLog",
    "NotificationStore",
    "PushSubscriptionStore",
    "UserContactDirectory",
    # Dispatch
    "NotificationDispatcher",
    "NotificationService",
]
