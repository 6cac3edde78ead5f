"""Notification dispatch infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class NotificationSettings(InfrastructureSettings):
    """Notification dispatcher configuration.

    Environment Variables:
        NOTIFICATION_CHANNEL_TIMEOUT_SECONDS: Upper bound for a single channel
            send before it is logged as failed (default: 10)
        NOTIFICATION_WEBSOCKET_EVENT: Event name pushed to connected sockets
        NOTIFICATION_PUBLIC_BASE_URL: Base URL used for links in emails
        NOTIFICATION_PROVIDER_FAILURE_THRESHOLD: Consecutive SMS or SMTP failures before a
            circuit opens
        NOTIFICATION_CIRCUIT_TIMEOUT_SECONDS: Seconds an open circuit waits
            before probing the provider again
    """

    CHANNEL_TIMEOUT_SECONDS: float = Field(
        default=10.0, alias="NOTIFICATION_CHANNEL_TIMEOUT_SECONDS"
    )
    WEBSOCKET_EVENT: str = Field(
        default="notification:new", alias="NOTIFICATION_WEBSOCKET_EVENT"
    )
    PUBLIC_BASE_URL: str = Field(
        default="http://localhost:5000", alias="NOTIFICATION_PUBLIC_BASE_URL"
    )
    PROVIDER_FAILURE_THRESHOLD: int = Field(
        default=5, alias="NOTIFICATION_PROVIDER_FAILURE_THRESHOLD"
    )
    CIRCUIT_TIMEOUT_SECONDS: int = Field(
        default=60, alias="NOTIFICATION_CIRCUIT_TIMEOUT_SECONDS"
    )
