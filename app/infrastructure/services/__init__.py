"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    NotificationServiceDep,
    ConnectionRegistryDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_database,
    get_connection_registry,
    get_notification_service,
)

__all__ = [
    "SettingsDep",
    "NotificationServiceDep",
    "ConnectionRegistryDep",
    "get_settings",
    "get_database",
    "get_connection_registry",
    "get_notification_service",
]
