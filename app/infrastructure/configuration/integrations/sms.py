"""SMS provider (Twilio) settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SmsSettings(IntegrationSettings):
    """Twilio SMS configuration.

    SMS is opt-in at the deployment level: nothing is sent unless
    NOTIFICATIONS_SMS_ENABLED is true and all Twilio credentials are present.

    Environment Variables:
        NOTIFICATIONS_SMS_ENABLED: Global SMS kill switch (default: False)
        TWILIO_ACCOUNT_SID: Twilio account SID
        TWILIO_AUTH_TOKEN: Twilio auth token
        TWILIO_PHONE_NUMBER: Sender phone number (E.164)
        TWILIO_API_URL: Twilio REST API base URL
    """

    NOTIFICATIONS_SMS_ENABLED: bool = Field(
        default=False, alias="NOTIFICATIONS_SMS_ENABLED"
    )
    TWILIO_ACCOUNT_SID: str | None = Field(default=None, alias="TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN: str | None = Field(default=None, alias="TWILIO_AUTH_TOKEN")
    TWILIO_PHONE_NUMBER: str | None = Field(default=None, alias="TWILIO_PHONE_NUMBER")
    TWILIO_API_URL: str = Field(
        default="https://api.twilio.com/2010-04-01", alias="TWILIO_API_URL"
    )

    @property
    def is_configured(self) -> bool:
        """SMS is enabled and every Twilio credential is present."""
        return bool(
            self.NOTIFICATIONS_SMS_ENABLED
            and self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_PHONE_NUMBER
        )
