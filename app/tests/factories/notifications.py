"""Factories for notification pipeline tests."""

from typing import Any, Dict, Optional

from infrastructure.configuration import Settings
from infrastructure.configuration.infrastructure import (
    DatabaseSettings,
    NotificationSettings,
    ServerSettings,
)
from infrastructure.configuration.integrations import (
    EmailSettings,
    PushSettings,
    SmsSettings,
)
from infrastructure.notifications import (
    ChannelMessage,
    NotificationCategory,
    NotificationPayload,
    NotificationPriority,
    NotificationType,
)


def make_payload(
    title: str = "Booking Confirmed!",
    body: str = "Chef Marie confirmed your booking for June 3.",
    data: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> NotificationPayload:
    return NotificationPayload(
        title=title,
        body=body,
        data=data if data is not None else {"bookingId": "b-1"},
        **kwargs,
    )


def make_message(
    notification_id: str = "n-1",
    notification_type: NotificationType = NotificationType.BOOKING_CONFIRMED,
    title: str = "Booking Confirmed!",
    body: str = "Chef Marie confirmed your booking for June 3.",
    data: Optional[Dict[str, Any]] = None,
    priority: NotificationPriority = NotificationPriority.HIGH,
    **kwargs,
) -> ChannelMessage:
    return ChannelMessage(
        notification_id=notification_id,
        type=notification_type,
        title=title,
        body=body,
        data=data if data is not None else {"url": "/dashboard?tab=bookings"},
        tag=f"{notification_type.value}-{notification_id}",
        category=kwargs.pop("category", NotificationCategory.BOOKING),
        priority=priority,
        **kwargs,
    )


def make_settings(
    push: Optional[Dict[str, Any]] = None,
    email: Optional[Dict[str, Any]] = None,
    sms: Optional[Dict[str, Any]] = None,
    notifications: Optional[Dict[str, Any]] = None,
    database: Optional[Dict[str, Any]] = None,
    server: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> Settings:
    """Settings with every provider unconfigured unless overridden.

    Dotenv loading is disabled so a developer's .env never leaks into tests.
    """
    no_env = {"_env_file": None}
    return Settings(
        push=PushSettings(**no_env, **(push or {})),
        email=EmailSettings(**no_env, **(email or {})),
        sms=SmsSettings(**no_env, **(sms or {})),
        notifications=NotificationSettings(**no_env, **(notifications or {})),
        database=DatabaseSettings(**no_env, **(database or {})),
        server=ServerSettings(**no_env, **(server or {})),
        _env_file=None,
        **kwargs,
    )
