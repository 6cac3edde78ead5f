"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.notifications.channels import ConnectionRegistry
from infrastructure.notifications.service import NotificationService
from infrastructure.persistence import Database


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.

    Infrastructure packages should use this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            ...

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_database() -> Database:
    """
    Get the application-scoped Database (engine and session factory).

    Returns:
        Database: Engine configured from settings.database.
    """
    settings = get_settings()
    return Database(
        settings.database.DATABASE_URL,
        echo=settings.database.DATABASE_ECHO,
        pool_size=settings.database.DATABASE_POOL_SIZE,
    )


@lru_cache
def get_connection_registry() -> ConnectionRegistry:
    """
    Get the process-wide registry of open notification websockets.

    Shared by the websocket route (registers sockets) and the websocket
    channel (sends to them).
    """
    return ConnectionRegistry()


@lru_cache
def get_notification_service() -> NotificationService:
    """
    Get the application-scoped NotificationService.

    Channel senders and their SDK clients are built once, here.

    Usage:
        @router.post("/send")
        async def send(service: NotificationServiceDep, body: SendRequest):
            return await service.send_notification(...)
    """
    return NotificationService(
        settings=get_settings(),
        database=get_database(),
        registry=get_connection_registry(),
    )
