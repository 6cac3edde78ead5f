"""Structlog processors for the notification service.

Delivery code logs provider configuration and subscription details, and
those can carry VAPID keys, Twilio auth tokens or push subscription
secrets. Masking therefore walks nested dicts and runs before rendering.

Usage:
    from infrastructure.logging.formatters import add_app_info, mask_sensitive_data
"""

from typing import Any, Optional

EventDict = dict[str, Any]

REDACTED = "***REDACTED***"

# Matched as substrings of lower-cased keys
SENSITIVE_PATTERNS = frozenset(
    {
        # HTTP and session credentials
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "cookie",
        "session_id",
        "bearer",
        # Push and SMS providers
        "private_key",
        "vapid",
        "p256dh",
        "auth_key",
    }
)


def add_app_info(app_name: str, app_version: str = "unknown"):
    """Processor stamping app_name and app_version on every event."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def _mask(value: Any, patterns: frozenset[str], mask_value: str) -> Any:
    if not isinstance(value, dict):
        return value
    masked = {}
    for key, item in value.items():
        if item is not None and any(p in str(key).lower() for p in patterns):
            masked[key] = mask_value
        else:
            masked[key] = _mask(item, patterns, mask_value)
    return masked


def mask_sensitive_data(
    mask_value: str = REDACTED,
    additional_patterns: Optional[frozenset[str]] = None,
):
    """Processor replacing values whose key looks like a credential.

    Nested dicts (for example a subscription's ``keys``) are masked too.
    None values are left alone so "not configured" stays visible.

    Args:
        mask_value: Replacement for sensitive values.
        additional_patterns: Extra key substrings to treat as sensitive.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        return _mask(event_dict, patterns, mask_value)

    return processor


def truncate_large_values(max_length: int = 500):
    """Processor cutting string values longer than ``max_length``.

    Notification bodies and provider error responses can be long.
    """

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor


def redact_phone_number(phone_number: Optional[str]) -> Optional[str]:
    """Keep only the last four digits of a phone number for logging.

    Example:
        redact_phone_number("+15555551234")  # "+*******1234"
    """
    if not phone_number:
        return phone_number
    prefix = "+" if phone_number.startswith("+") else ""
    hidden = max(len(phone_number) - len(prefix) - 4, 0)
    return f"{prefix}{'*' * hidden}{phone_number[-4:]}"
