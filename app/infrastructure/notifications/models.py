"""Notification pipeline core models.

Enums for the closed notification vocabulary plus the Pydantic models that
flow between callers, the dispatcher, channel senders and the stores.

Uses Pydantic BaseModel for:
- Runtime validation of caller payloads and API bodies
- from_attributes conversion of ORM rows into read models
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationType(str, Enum):
    """Every event the marketplace notifies about."""

    BOOKING_REQUESTED = "booking_requested"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"
    BOOKING_REMINDER = "booking_reminder"
    BOOKING_REJECTED = "booking_rejected"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_REFUNDED = "payment_refunded"
    MESSAGE_RECEIVED = "message_received"
    REVIEW_RECEIVED = "review_received"
    REVIEW_RESPONSE = "review_response"
    CHEF_APPLICATION_APPROVED = "chef_application_approved"
    CHEF_APPLICATION_REJECTED = "chef_application_rejected"
    SYSTEM_ANNOUNCEMENT = "system_announcement"
    ACCOUNT_UPDATE = "account_update"


class NotificationCategory(str, Enum):
    BOOKING = "booking"
    PAYMENT = "payment"
    MESSAGE = "message"
    REVIEW = "review"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    """Notification priority levels, ordered low < normal < high < urgent.

    Only affects client-side treatment (sound, require interaction).
    """

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    NotificationPriority.LOW: 0,
    NotificationPriority.NORMAL: 1,
    NotificationPriority.HIGH: 2,
    NotificationPriority.URGENT: 3,
}


class NotificationChannel(str, Enum):
    """Delivery channels a notification can fan out to."""

    PUSH = "push"
    EMAIL = "email"
    SMS = "sms"
    WEBSOCKET = "websocket"
    IN_APP = "in_app"


class DeliveryStatus(str, Enum):
    """Outcome recorded in the delivery log.

    PENDING exists for completeness; rows are written once with their final
    status. SKIPPED means the sender deliberately did not attempt delivery
    (feature disabled, no verified phone, no push subscription).
    """

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    SKIPPED = "skipped"


class ChannelSkipped(Exception):
    """Raised by a sender that deliberately does not attempt delivery.

    The dispatcher records a SKIPPED delivery log entry with the reason.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotificationTemplate(BaseModel):
    """Static per-type defaults. Instances are frozen."""

    model_config = ConfigDict(frozen=True)

    category: NotificationCategory
    priority: NotificationPriority
    email_enabled: bool
    sms_enabled: bool


class ChannelPreferences(BaseModel):
    """A user's opt-in flags for one notification type."""

    push: bool
    email: bool
    sms: bool
    in_app: bool

    def is_enabled(self, channel: NotificationChannel) -> bool:
        """Flag for channel; WEBSOCKET has no preference and is always on."""
        if channel == NotificationChannel.WEBSOCKET:
            return True
        return bool(getattr(self, channel.value))


class ChannelPreferencesUpdate(BaseModel):
    """Partial preference update; None leaves the stored value as is."""

    push: Optional[bool] = None
    email: Optional[bool] = None
    sms: Optional[bool] = None
    in_app: Optional[bool] = None


class NotificationAction(BaseModel):
    """Action button shown on push notifications."""

    action: str
    title: str
    icon: Optional[str] = None


class NotificationPayload(BaseModel):
    """Caller-supplied content for one notification.

    Attributes:
        title: Headline (push title, email subject, SMS prefix)
        body: Message text
        data: Free-form JSON, e.g. {"bookingId": "...", "url": "/dashboard?tab=bookings"}
        category: Overrides the type's template category
        priority: Overrides the type's template priority
        require_interaction: Push notification stays until dismissed
        actions: Push action buttons

    Example:
        payload = NotificationPayload(
            title="Booking Confirmed!",
            body="Chef Marie confirmed your booking for June 3.",
            data={"bookingId": "b-1", "url": "/dashboard?tab=bookings"},
        )
    """

    title: str = Field(..., min_length=1)
    body: str
    data: Optional[Dict[str, Any]] = None
    category: Optional[NotificationCategory] = None
    priority: Optional[NotificationPriority] = None
    require_interaction: Optional[bool] = None
    actions: Optional[List[NotificationAction]] = None


class SendOptions(BaseModel):
    """Per-send routing overrides.

    Attributes:
        channels: Exact channel list to attempt; bypasses preferences and
            templates. Names that match no sender are logged as FAILED.
        skip_preferences: Attempt every channel regardless of preferences.
    """

    channels: Optional[List[str]] = None
    skip_preferences: bool = False

    @field_validator("channels", mode="before")
    @classmethod
    def channel_names(cls, v: Any) -> Any:
        if v is None:
            return v
        return [c.value if isinstance(c, Enum) else c for c in v]


class ChannelMessage(BaseModel):
    """What every channel sender receives for one notification."""

    notification_id: str
    type: NotificationType
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    tag: str
    category: NotificationCategory
    priority: NotificationPriority
    require_interaction: bool = False
    actions: List[NotificationAction] = Field(default_factory=list)


class NotificationRecord(BaseModel):
    """The durable logical notification, as shown in the in-app list."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: NotificationType
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    category: NotificationCategory
    priority: NotificationPriority
    is_read: bool = False
    created_at: datetime


class DeliveryLogEntry(BaseModel):
    """One attempted (notification, channel) delivery."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    notification_id: str
    channel: str
    status: DeliveryStatus
    error_message: Optional[str] = None
    created_at: datetime


class PushSubscription(BaseModel):
    """A browser web-push subscription or an FCM device token."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    kind: str = "web"
    endpoint: str
    p256dh: Optional[str] = None
    auth: Optional[str] = None
    created_at: datetime

    @property
    def is_fcm(self) -> bool:
        return self.kind == "fcm"


class UserContact(BaseModel):
    """Contact details read from the account subsystem's users table."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    phone_verified: bool = False
