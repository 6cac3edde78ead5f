"""SMS channel implementation using the Twilio Messages REST API."""

from typing import Optional, TYPE_CHECKING

import httpx

from infrastructure.logging import get_module_logger, redact_phone_number
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.contacts import UserContactDirectory
from infrastructure.notifications.models import (
    ChannelMessage,
    ChannelSkipped,
    NotificationChannel,
)
from infrastructure.operations import OperationResult, classify_http_error
from infrastructure.resilience import CircuitBreaker, CircuitBreakerOpenError

if TYPE_CHECKING:
    from infrastructure.configuration.integrations import SmsSettings

logger = get_module_logger()

SMS_MAX_LENGTH = 160
MIN_PHONE_LENGTH = 10


def format_sms_body(title: str, body: str) -> str:
    """Render "<title>: <body>", truncated to one SMS segment."""
    message = f"{title}: {body}"
    if len(message) > SMS_MAX_LENGTH:
        return message[: SMS_MAX_LENGTH - 3] + "..."
    return message


def normalize_phone_number(phone_number: str) -> Optional[str]:
    """E.164-ish normalization; None for numbers too short to be valid.

    Numbers without a leading "+" are assumed to be North American.
    """
    phone = (phone_number or "").strip()
    if len(phone) < MIN_PHONE_LENGTH:
        return None
    return phone if phone.startswith("+") else f"+1{phone}"


class SMSChannel(ChannelSender):
    """SMS notification channel using Twilio.

    Only users with a verified phone number receive SMS. Sends are
    guarded by a circuit breaker so a Twilio outage fails fast.
    """

    def __init__(
        self,
        settings: "SmsSettings",
        contacts: UserContactDirectory,
        http_client: Optional[httpx.AsyncClient] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        """Initialize Twilio SMS channel.

        Args:
            settings: SMS settings (kill switch and Twilio credentials).
            contacts: Lookup for the user's phone number.
            http_client: Shared AsyncClient; one is created if omitted.
            circuit_breaker: Breaker around Twilio calls.
        """
        self._settings = settings
        self._contacts = contacts
        self._enabled = settings.is_configured
        self._http_client = http_client or httpx.AsyncClient(timeout=10.0)
        self._circuit_breaker = circuit_breaker or CircuitBreaker(
            name="twilio_sms_channel",
            failure_threshold=5,
            timeout_seconds=60,
        )
        if self._enabled:
            logger.info("initialized_sms_channel", backend="twilio")
        else:
            logger.info(
                "sms_channel_disabled",
                sms_enabled=settings.NOTIFICATIONS_SMS_ENABLED,
            )

    @property
    def channel(self) -> NotificationChannel:
        return NotificationChannel.SMS

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def send(self, user_id: str, message: ChannelMessage) -> Optional[bool]:
        if not self._enabled:
            raise ChannelSkipped("SMS notifications disabled")

        contact = await self._contacts.get_contact(user_id)
        if contact is None or not contact.phone_number:
            raise ChannelSkipped("No phone number on file")
        if not contact.phone_verified:
            raise ChannelSkipped("Phone number not verified")

        return await self.send_to_phone(
            contact.phone_number, format_sms_body(message.title, message.body)
        )

    async def send_to_phone(self, phone_number: str, text: str) -> bool:
        """Send text to a phone number; False on any failure."""
        formatted = normalize_phone_number(phone_number)
        if formatted is None:
            logger.warning(
                "sms_invalid_phone_number",
                phone_number=redact_phone_number(phone_number),
            )
            return False

        try:
            result = await self._circuit_breaker.call_async(
                self._post_message, formatted, text
            )
        except CircuitBreakerOpenError as e:
            logger.warning("sms_circuit_open", error=str(e))
            return False
        except httpx.HTTPError as e:
            failure = classify_http_error(e, provider="twilio")
            logger.error(
                "sms_send_error",
                phone_number=redact_phone_number(formatted),
                error=failure.message,
                error_code=failure.error_code,
            )
            return False

        if not result.is_success:
            logger.error(
                "sms_failed",
                phone_number=redact_phone_number(formatted),
                error=result.message,
                error_code=result.error_code,
            )
            return False

        logger.info(
            "sms_sent",
            phone_number=redact_phone_number(formatted),
            message_sid=(result.data or {}).get("sid"),
        )
        return True

    async def _post_message(self, to: str, body: str) -> OperationResult:
        response = await self._http_client.post(
            f"{self._settings.TWILIO_API_URL}/Accounts/"
            f"{self._settings.TWILIO_ACCOUNT_SID}/Messages.json",
            data={
                "To": to,
                "From": self._settings.TWILIO_PHONE_NUMBER,
                "Body": body,
            },
            auth=(
                self._settings.TWILIO_ACCOUNT_SID or "",
                self._settings.TWILIO_AUTH_TOKEN or "",
            ),
        )
        if response.status_code == 201:
            return OperationResult.success(
                message="SMS sent via Twilio",
                data={"sid": response.json().get("sid")},
            )

        if response.status_code >= 500 or response.status_code == 429:
            # Provider-side trouble counts against the circuit
            response.raise_for_status()

        return OperationResult.permanent_error(
            message=f"Twilio API error: HTTP {response.status_code}",
            error_code=f"HTTP_{response.status_code}",
        )

    async def health_check(self) -> OperationResult:
        if not self._enabled:
            return OperationResult.permanent_error(
                message="SMS disabled or Twilio credentials missing",
                error_code="SMS_DISABLED",
            )
        stats = self._circuit_breaker.get_stats()
        if stats["state"] == "open":
            return OperationResult.transient_error(
                message="Twilio circuit breaker open",
                error_code="CIRCUIT_OPEN",
            )
        return OperationResult.success(
            message="Twilio credentials configured",
            data={"circuit_breaker": stats},
        )

    async def aclose(self) -> None:
        await self._http_client.aclose()
