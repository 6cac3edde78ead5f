"""Infrastructure modules for the notification service.

Centralized infrastructure components:
- configuration: Settings management (settings)
- logging: Structured logging (get_module_logger, logger)
- notifications: Notification dispatch pipeline
- operations: Operation results and error classification
- persistence: Database engine and table models
- resilience: Circuit breakers
- services: Dependency injection services (SettingsDep, get_settings)
"""

# Configuration
from infrastructure.configuration import settings

# Observability
from infrastructure.logging import get_module_logger, logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# Dependency Injection Services
from infrastructure.services import (
    SettingsDep,
    NotificationServiceDep,
    get_settings,
    get_notification_service,
)

__all__ = [
    # Configuration
    "settings",
    # Observability
    "get_module_logger",
    "logger",
    # Operations
    "OperationResult",
    "OperationStatus",
    # Dependency Injection Services
    "SettingsDep",
    "NotificationServiceDep",
    "get_settings",
    "get_notification_service",
]
