"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the
notification service using Pydantic BaseSettings with domain-based
organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    database_url = settings.database.DATABASE_URL
    sms_enabled = settings.sms.NOTIFICATIONS_SMS_ENABLED
    timeout = settings.notifications.CHANNEL_TIMEOUT_SECONDS

    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings, settings

__all__ = ["Settings", "settings"]
