"""Request and response bodies for the v1 notification API."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from infrastructure.notifications import (
    ChannelPreferences,
    ChannelPreferencesUpdate,
    DeliveryLogEntry,
    NotificationPayload,
    NotificationRecord,
    NotificationType,
    SendOptions,
)


class SendNotificationRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    type: NotificationType
    payload: NotificationPayload
    options: Optional[SendOptions] = None


class SendNotificationResponse(BaseModel):
    notification_id: str


class NotificationListResponse(BaseModel):
    notifications: List[NotificationRecord]
    limit: int
    offset: int


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int


class DeliveryLogResponse(BaseModel):
    notification_id: str
    deliveries: List[DeliveryLogEntry]


class PreferencesResponse(BaseModel):
    preferences: Dict[NotificationType, ChannelPreferences]


class BulkPreferencesUpdate(BaseModel):
    preferences: Dict[NotificationType, ChannelPreferencesUpdate]


class PushSubscriptionKeys(BaseModel):
    p256dh: str
    auth: str


class PushSubscribeRequest(BaseModel):
    """Browser PushSubscription.toJSON() body, or an FCM device token."""

    endpoint: str = Field(..., min_length=1)
    keys: Optional[PushSubscriptionKeys] = None
    kind: str = Field(default="web", pattern="^(web|fcm)$")


class PushUnsubscribeRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)
