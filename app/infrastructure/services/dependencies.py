"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.notifications.channels import ConnectionRegistry
from infrastructure.notifications.service import NotificationService
from infrastructure.services.providers import (
    get_settings,
    get_connection_registry,
    get_notification_service,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Notification facade: dispatcher, stores and channel health
NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]

# Open websocket connections per user
ConnectionRegistryDep = Annotated[
    ConnectionRegistry, Depends(get_connection_registry)
]

__all__ = [
    "SettingsDep",
    "NotificationServiceDep",
    "ConnectionRegistryDep",
]
