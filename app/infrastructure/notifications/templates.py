"""Static notification templates and default channel preferences.

Both maps are read-only. Callers that need a mutable copy go through
get_default_preferences() / get_default_channel_preferences(), which build
fresh objects on every call.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from infrastructure.notifications.models import (
    ChannelPreferences,
    NotificationCategory as C,
    NotificationPriority as P,
    NotificationTemplate,
    NotificationType as T,
)


def _template(
    category: C, priority: P, email: bool, sms: bool
) -> NotificationTemplate:
    return NotificationTemplate(
        category=category, priority=priority, email_enabled=email, sms_enabled=sms
    )


NOTIFICATION_TEMPLATES: Mapping[T, NotificationTemplate] = MappingProxyType(
    {
        T.BOOKING_REQUESTED: _template(C.BOOKING, P.NORMAL, True, False),
        T.BOOKING_CONFIRMED: _template(C.BOOKING, P.HIGH, True, True),
        T.BOOKING_CANCELLED: _template(C.BOOKING, P.HIGH, True, True),
        T.BOOKING_COMPLETED: _template(C.BOOKING, P.NORMAL, True, False),
        T.BOOKING_REMINDER: _template(C.BOOKING, P.HIGH, True, True),
        T.BOOKING_REJECTED: _template(C.BOOKING, P.NORMAL, True, False),
        T.PAYMENT_PENDING: _template(C.PAYMENT, P.NORMAL, True, False),
        T.PAYMENT_SUCCESS: _template(C.PAYMENT, P.HIGH, True, False),
        T.PAYMENT_FAILED: _template(C.PAYMENT, P.URGENT, True, True),
        T.PAYMENT_REFUNDED: _template(C.PAYMENT, P.NORMAL, True, False),
        T.MESSAGE_RECEIVED: _template(C.MESSAGE, P.NORMAL, False, False),
        T.REVIEW_RECEIVED: _template(C.REVIEW, P.NORMAL, True, False),
        T.REVIEW_RESPONSE: _template(C.REVIEW, P.NORMAL, True, False),
        T.CHEF_APPLICATION_APPROVED: _template(C.SYSTEM, P.HIGH, True, False),
        T.CHEF_APPLICATION_REJECTED: _template(C.SYSTEM, P.NORMAL, True, False),
        T.SYSTEM_ANNOUNCEMENT: _template(C.SYSTEM, P.LOW, True, False),
        T.ACCOUNT_UPDATE: _template(C.SYSTEM, P.NORMAL, True, False),
    }
)

# (push, email, sms, in_app)
_DEFAULT_CHANNELS: Mapping[T, Tuple[bool, bool, bool, bool]] = MappingProxyType(
    {
        T.BOOKING_REQUESTED: (True, True, False, True),
        T.BOOKING_CONFIRMED: (True, True, True, True),
        T.BOOKING_CANCELLED: (True, True, True, True),
        T.BOOKING_COMPLETED: (True, True, False, True),
        T.BOOKING_REMINDER: (True, False, True, True),
        T.BOOKING_REJECTED: (True, True, False, True),
        T.PAYMENT_PENDING: (True, True, False, True),
        T.PAYMENT_SUCCESS: (True, True, False, True),
        T.PAYMENT_FAILED: (True, True, True, True),
        T.PAYMENT_REFUNDED: (True, True, False, True),
        T.MESSAGE_RECEIVED: (True, False, False, True),
        T.REVIEW_RECEIVED: (True, True, False, True),
        T.REVIEW_RESPONSE: (True, True, False, True),
        T.CHEF_APPLICATION_APPROVED: (True, True, False, True),
        T.CHEF_APPLICATION_REJECTED: (True, True, False, True),
        T.SYSTEM_ANNOUNCEMENT: (False, True, False, True),
        T.ACCOUNT_UPDATE: (True, True, False, True),
    }
)


def get_notification_template(notification_type: T) -> NotificationTemplate:
    """Template for a type. Raises KeyError for values outside the enum."""
    return NOTIFICATION_TEMPLATES[T(notification_type)]


def get_default_channel_preferences(notification_type: T) -> ChannelPreferences:
    """Fresh ChannelPreferences holding the static default for one type."""
    push, email, sms, in_app = _DEFAULT_CHANNELS[T(notification_type)]
    return ChannelPreferences(push=push, email=email, sms=sms, in_app=in_app)


def get_default_preferences() -> Dict[T, ChannelPreferences]:
    """A mutable copy of the full default preference map."""
    return {t: get_default_channel_preferences(t) for t in T}
