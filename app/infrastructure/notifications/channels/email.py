"""Email channel implementation using SMTP."""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional, TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.contacts import UserContactDirectory
from infrastructure.notifications.models import (
    ChannelMessage,
    ChannelSkipped,
    NotificationChannel,
    NotificationType,
)
from infrastructure.operations import OperationResult
from infrastructure.resilience import CircuitBreaker, CircuitBreakerOpenError

if TYPE_CHECKING:
    from infrastructure.configuration.integrations import EmailSettings

logger = get_module_logger()

DEFAULT_ACTION_PATH = "/dashboard"

ACTION_TEXT = {
    NotificationType.BOOKING_REQUESTED: "View Booking",
    NotificationType.BOOKING_CONFIRMED: "View Booking Details",
    NotificationType.BOOKING_CANCELLED: "View Cancellation",
    NotificationType.BOOKING_REMINDER: "View Booking",
    NotificationType.PAYMENT_SUCCESS: "View Receipt",
    NotificationType.PAYMENT_FAILED: "Update Payment",
    NotificationType.MESSAGE_RECEIVED: "View Message",
    NotificationType.REVIEW_RECEIVED: "View Review",
}


def action_text_for(notification_type: NotificationType) -> str:
    return ACTION_TEXT.get(notification_type, "View Details")


def build_action_url(base_url: str, message: ChannelMessage) -> str:
    """Absolute call-to-action link from data.url / data.actionUrl."""
    path = message.data.get("url") or message.data.get("actionUrl") or DEFAULT_ACTION_PATH
    if str(path).startswith(("http://", "https://")):
        return str(path)
    return f"{base_url.rstrip('/')}{path}"


def render_email(
    message: ChannelMessage, base_url: str
) -> tuple[str, str, str]:
    """Render (subject, html, text) for a notification email."""
    action_url = build_action_url(base_url, message)
    action_text = action_text_for(message.type)
    preferences_url = f"{base_url.rstrip('/')}/notification-settings"

    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: #6D28D9; padding: 30px; border-radius: 12px 12px 0 0;">
    <h1 style="color: white; margin: 0; font-size: 24px;">Dine Maison</h1>
  </div>
  <div style="background: white; padding: 30px; border: 1px solid #E5E7EB; border-top: none;">
    <h2 style="color: #1F2937; margin-top: 0;">{escape(message.title)}</h2>
    <p style="color: #4B5563; font-size: 16px; line-height: 1.6;">{escape(message.body)}</p>
    <div style="margin: 30px 0;">
      <a href="{escape(action_url, quote=True)}" style="background: #8B5CF6; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px;">{escape(action_text)}</a>
    </div>
    <p style="color: #9CA3AF; font-size: 14px;">Best regards,<br>The Dine Maison Team</p>
    <p style="color: #9CA3AF; font-size: 12px;">
      You're receiving this because you have notifications enabled for your Dine Maison account.
      <a href="{escape(preferences_url, quote=True)}" style="color: #8B5CF6;">Manage preferences</a>
    </p>
  </div>
</div>
"""
    text = (
        f"{message.title}\n\n{message.body}\n\n"
        f"{action_text}: {action_url}\n\n"
        "Best regards,\nThe Dine Maison Team"
    )
    return message.title, html, text


class EmailChannel(ChannelSender):
    """Email notification channel over SMTP.

    smtplib is blocking, so each send runs in a worker thread.
    """

    def __init__(
        self,
        settings: "EmailSettings",
        contacts: UserContactDirectory,
        public_base_url: str,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self._settings = settings
        self._contacts = contacts
        self._public_base_url = public_base_url
        self._configured = settings.is_configured
        self._circuit_breaker = circuit_breaker or CircuitBreaker(
            name="smtp_email_channel",
            failure_threshold=5,
            timeout_seconds=60,
        )
        logger.info(
            "initialized_email_channel",
            backend="smtp",
            configured=self._configured,
        )

    @property
    def channel(self) -> NotificationChannel:
        return NotificationChannel.EMAIL

    async def send(self, user_id: str, message: ChannelMessage) -> Optional[bool]:
        if not self._configured:
            raise ChannelSkipped("SMTP not configured")

        contact = await self._contacts.get_contact(user_id)
        if contact is None or not contact.email:
            raise ChannelSkipped("No email address on file")

        subject, html, text = render_email(message, self._public_base_url)
        try:
            await self._circuit_breaker.call_async(
                asyncio.to_thread, self._send_smtp, contact.email, subject, html, text
            )
        except CircuitBreakerOpenError as e:
            logger.warning("email_circuit_open", error=str(e))
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "email_send_failed",
                user_id=user_id,
                notification_id=message.notification_id,
                error=str(e),
            )
            return False

        logger.info(
            "email_sent",
            user_id=user_id,
            notification_id=message.notification_id,
        )
        return True

    def _send_smtp(self, to_email: str, subject: str, html: str, text: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._settings.EMAIL_FROM
        msg["To"] = to_email
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))

        with smtplib.SMTP(
            self._settings.SMTP_HOST,
            self._settings.SMTP_PORT,
            timeout=self._settings.SMTP_TIMEOUT_SECONDS,
        ) as server:
            if self._settings.SMTP_USE_TLS:
                server.starttls()
            if self._settings.SMTP_USER and self._settings.SMTP_PASSWORD:
                server.login(self._settings.SMTP_USER, self._settings.SMTP_PASSWORD)
            server.send_message(msg)

    async def health_check(self) -> OperationResult:
        if not self._configured:
            return OperationResult.permanent_error(
                message="SMTP host not configured",
                error_code="SMTP_NOT_CONFIGURED",
            )
        return OperationResult.success(
            message="SMTP configured",
            data={"host": self._settings.SMTP_HOST, "port": self._settings.SMTP_PORT},
        )
