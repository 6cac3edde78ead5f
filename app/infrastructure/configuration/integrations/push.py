"""Push notification gateway settings (VAPID web push and Firebase Cloud Messaging)."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class PushSettings(IntegrationSettings):
    """Push gateway configuration.

    Web push requires both VAPID keys. Mobile push through FCM is only
    attempted when FCM_ENABLED is true; credentials fall back to Google
    application default credentials when FCM_CREDENTIALS_PATH is unset.

    Environment Variables:
        VAPID_PUBLIC_KEY: Public VAPID key handed to browsers for subscription
        VAPID_PRIVATE_KEY: Private VAPID key used to sign push requests
        VAPID_SUBJECT: Contact URI sent with VAPID claims
        FCM_ENABLED: Enable Firebase Cloud Messaging for mobile devices
        FCM_CREDENTIALS_PATH: Path to a Firebase service account JSON file

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.push.web_push_configured:
            public_key = settings.push.VAPID_PUBLIC_KEY
        ```
    """

    VAPID_PUBLIC_KEY: str = Field(default="", alias="VAPID_PUBLIC_KEY")
    VAPID_PRIVATE_KEY: str = Field(default="", alias="VAPID_PRIVATE_KEY")
    VAPID_SUBJECT: str = Field(
        default="mailto:support@dinemaison.com", alias="VAPID_SUBJECT"
    )
    FCM_ENABLED: bool = Field(default=False, alias="FCM_ENABLED")
    FCM_CREDENTIALS_PATH: str | None = Field(default=None, alias="FCM_CREDENTIALS_PATH")

    @property
    def web_push_configured(self) -> bool:
        """Both VAPID keys are present."""
        return bool(self.VAPID_PUBLIC_KEY and self.VAPID_PRIVATE_KEY)
