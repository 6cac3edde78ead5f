"""SMTP email settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class EmailSettings(IntegrationSettings):
    """SMTP configuration for notification emails.

    Environment Variables:
        SMTP_HOST: SMTP server hostname (empty disables the email channel)
        SMTP_PORT: SMTP server port (default: 587)
        SMTP_USER: SMTP username
        SMTP_PASSWORD: SMTP password or app password
        SMTP_USE_TLS: Upgrade the connection with STARTTLS (default: True)
        EMAIL_FROM: From header (default: "Dine Maison <noreply@dinemaison.com>")
        SMTP_TIMEOUT_SECONDS: Socket timeout for SMTP operations
    """

    SMTP_HOST: str = Field(default="", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, alias="SMTP_PORT")
    SMTP_USER: str = Field(default="", alias="SMTP_USER")
    SMTP_PASSWORD: str = Field(default="", alias="SMTP_PASSWORD")
    SMTP_USE_TLS: bool = Field(default=True, alias="SMTP_USE_TLS")
    EMAIL_FROM: str = Field(
        default="Dine Maison <noreply@dinemaison.com>", alias="EMAIL_FROM"
    )
    SMTP_TIMEOUT_SECONDS: int = Field(default=10, alias="SMTP_TIMEOUT_SECONDS")

    @property
    def is_configured(self) -> bool:
        """An SMTP host is set."""
        return bool(self.SMTP_HOST.strip())
