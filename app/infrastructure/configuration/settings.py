"""Top-level Settings: application values plus one section per concern."""

from typing import Dict, Type

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.infrastructure import (
    DatabaseSettings,
    NotificationSettings,
    ServerSettings,
)
from infrastructure.configuration.integrations import (
    EmailSettings,
    PushSettings,
    SmsSettings,
)

# Section attribute -> settings class; each reads its own variables
SECTIONS: Dict[str, Type[BaseSettings]] = {
    "push": PushSettings,
    "email": EmailSettings,
    "sms": SmsSettings,
    "database": DatabaseSettings,
    "notifications": NotificationSettings,
    "server": ServerSettings,
}


class Settings(BaseSettings):
    """Notification service settings.

    Delivery providers live under ``push``, ``email`` and ``sms``; the
    service itself under ``database``, ``notifications`` and ``server``.
    Sections not passed explicitly are loaded from the environment.

    Environment Variables:
        PREFIX: Deployment prefix such as "dev-"; empty means production
        LOG_LEVEL: DEBUG, INFO, WARNING or ERROR
        GIT_SHA: Commit deployed, reported by /version
        APP_NAME: Stamped on every log entry

    Example:
        ```python
        from infrastructure.configuration import settings

        if settings.sms.is_configured:
            sender = settings.sms.TWILIO_PHONE_NUMBER
        timeout = settings.notifications.CHANNEL_TIMEOUT_SECONDS
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"
    APP_NAME: str = "chef-notifications"

    push: PushSettings
    email: EmailSettings
    sms: SmsSettings

    database: DatabaseSettings
    notifications: NotificationSettings
    server: ServerSettings

    def __init__(self, **kwargs):
        for name, section_class in SECTIONS.items():
            if name not in kwargs:
                kwargs[name] = section_class()
        super().__init__(**kwargs)

    @property
    def is_production(self) -> bool:
        return not self.PREFIX


settings = Settings()
