"""Base classes for settings groups.

Each group reads its own variables from the process environment and an
optional ``.env`` file. Variable names are case sensitive and match the
field aliases (``SMTP_HOST``, ``TWILIO_AUTH_TOKEN``, ...).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
    populate_by_name=True,
)


class IntegrationSettings(BaseSettings):
    """Settings for a delivery provider (web push/FCM, SMTP, Twilio).

    An unconfigured provider is not an error; its channel skips instead.
    """

    model_config = _ENV_CONFIG


class InfrastructureSettings(BaseSettings):
    """Settings for the service itself (database, dispatch, HTTP server)."""

    model_config = _ENV_CONFIG
