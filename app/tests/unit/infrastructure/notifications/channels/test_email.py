"""Unit tests for the SMTP email channel."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from infrastructure.notifications import ChannelSkipped, NotificationType
from infrastructure.notifications.channels import EmailChannel
from infrastructure.notifications.channels.email import (
    build_action_url,
    render_email,
)
from tests.factories.notifications import make_message

SMTP = {
    "SMTP_HOST": "smtp.test",
    "SMTP_PORT": 2525,
    "SMTP_USER": "mailer",
    "SMTP_PASSWORD": "pw",
    "EMAIL_FROM": "Dine Maison <noreply@test>",
}
BASE_URL = "https://dinemaison.test"


@pytest.fixture
def make_channel(settings_factory, contacts):
    def _make(**email):
        settings = settings_factory(email={**SMTP, **email})
        return EmailChannel(settings.email, contacts, public_base_url=BASE_URL)

    return _make


@pytest.fixture
def smtp_server():
    server = MagicMock()
    with patch("infrastructure.notifications.channels.email.smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value = server
        server.factory = smtp
        yield server


@pytest.mark.unit
class TestRendering:
    def test_relative_url_is_made_absolute(self):
        message = make_message(data={"url": "/dashboard?tab=bookings"})
        assert build_action_url(BASE_URL, message) == f"{BASE_URL}/dashboard?tab=bookings"

    def test_absolute_url_is_kept(self):
        message = make_message(data={"actionUrl": "https://elsewhere.test/x"})
        assert build_action_url(BASE_URL, message) == "https://elsewhere.test/x"

    def test_missing_url_defaults_to_dashboard(self):
        assert build_action_url(BASE_URL, make_message(data={})) == f"{BASE_URL}/dashboard"

    def test_render_escapes_html(self):
        message = make_message(title="<b>Hi</b>", body="a & b")
        subject, html, text = render_email(message, BASE_URL)

        assert subject == "<b>Hi</b>"
        assert "&lt;b&gt;Hi&lt;/b&gt;" in html
        assert "a &amp; b" in html
        assert "View Booking Details" in html
        assert "a & b" in text

    def test_unknown_type_uses_generic_action(self):
        message = make_message(notification_type=NotificationType.ACCOUNT_UPDATE)
        _, html, _ = render_email(message, BASE_URL)
        assert "View Details" in html


@pytest.mark.unit
class TestSend:
    @pytest.mark.asyncio
    async def test_not_configured(self, make_channel):
        with pytest.raises(ChannelSkipped, match="SMTP"):
            await make_channel(SMTP_HOST="").send("user-1", make_message())

    @pytest.mark.asyncio
    async def test_no_email_address(self, make_channel, add_user):
        await add_user("user-1", phone_number="5551234567")
        with pytest.raises(ChannelSkipped, match="No email"):
            await make_channel().send("user-1", make_message())

    @pytest.mark.asyncio
    async def test_sends_multipart_message(self, make_channel, add_user, smtp_server):
        await add_user("user-1", email="guest@example.com")

        ok = await make_channel().send("user-1", make_message())

        assert ok is True
        smtp_server.factory.assert_called_once_with("smtp.test", 2525, timeout=10)
        smtp_server.starttls.assert_called_once()
        smtp_server.login.assert_called_once_with("mailer", "pw")
        sent = smtp_server.send_message.call_args.args[0]
        assert sent["To"] == "guest@example.com"
        assert sent["From"] == "Dine Maison <noreply@test>"
        assert sent["Subject"] == "Booking Confirmed!"
        assert sent.is_multipart()

    @pytest.mark.asyncio
    async def test_smtp_error_returns_false(self, make_channel, add_user, smtp_server):
        await add_user("user-1", email="guest@example.com")
        smtp_server.send_message.side_effect = smtplib.SMTPException("relay denied")

        assert await make_channel().send("user-1", make_message()) is False

    @pytest.mark.asyncio
    async def test_no_tls_no_login(self, make_channel, add_user, smtp_server):
        await add_user("user-1", email="guest@example.com")

        await make_channel(SMTP_USE_TLS=False, SMTP_USER="").send(
            "user-1", make_message()
        )

        smtp_server.starttls.assert_not_called()
        smtp_server.login.assert_not_called()
