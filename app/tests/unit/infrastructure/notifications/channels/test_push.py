"""Unit tests for the web push / FCM channel."""

import json
from unittest.mock import MagicMock, Mock, patch

import pytest
from firebase_admin import messaging
from pywebpush import WebPushException

from infrastructure.notifications import ChannelSkipped, NotificationPriority
from infrastructure.notifications.channels import PushChannel
from infrastructure.notifications.channels.push import (
    PushDeliveryError,
    build_push_payload,
)
from tests.factories.notifications import make_message

VAPID = {
    "VAPID_PUBLIC_KEY": "BPublicKey",
    "VAPID_PRIVATE_KEY": "private-key",
    "VAPID_SUBJECT": "mailto:ops@dinemaison.test",
}


@pytest.fixture
def make_channel(settings_factory, subscriptions):
    def _make(fcm_capable=False, **push):
        settings = settings_factory(push={**VAPID, **push})
        return PushChannel(settings.push, subscriptions, fcm_capable=fcm_capable)

    return _make


@pytest.fixture
def webpush():
    with patch("infrastructure.notifications.channels.push.webpush") as mock:
        yield mock


def _gone(status_code=410):
    return WebPushException("Push failed", response=Mock(status_code=status_code, headers={}))


@pytest.mark.unit
class TestPayload:
    def test_defaults_icon_and_badge(self):
        payload = build_push_payload(make_message())
        assert payload["icon"] == "/pwa-192x192.png"
        assert payload["badge"] == "/pwa-64x64.png"

    def test_data_carries_notification_id_and_type(self):
        payload = build_push_payload(make_message(notification_id="n-9"))
        assert payload["data"]["notificationId"] == "n-9"
        assert payload["data"]["type"] == "booking_confirmed"
        assert payload["data"]["url"] == "/dashboard?tab=bookings"
        assert payload["tag"] == "booking_confirmed-n-9"

    def test_actions_are_serialized(self):
        message = make_message(
            require_interaction=True,
            actions=[{"action": "view", "title": "View"}],
        )
        payload = build_push_payload(message)
        assert payload["requireInteraction"] is True
        assert payload["actions"] == [{"action": "view", "title": "View"}]


@pytest.mark.unit
class TestWebPush:
    @pytest.mark.asyncio
    async def test_no_transport_configured(self, make_channel):
        channel = make_channel(VAPID_PRIVATE_KEY="")
        with pytest.raises(ChannelSkipped, match="not configured"):
            await channel.send("user-1", make_message())

    @pytest.mark.asyncio
    async def test_no_subscriptions(self, make_channel):
        with pytest.raises(ChannelSkipped, match="No push subscriptions"):
            await make_channel().send("user-1", make_message())

    @pytest.mark.asyncio
    async def test_sends_to_every_subscription(
        self, make_channel, subscriptions, webpush
    ):
        await subscriptions.save_subscription("user-1", "https://push/a", "k1", "a1")
        await subscriptions.save_subscription("user-1", "https://push/b", "k2", "a2")

        assert await make_channel().send("user-1", make_message()) is True

        assert webpush.call_count == 2
        kwargs = webpush.call_args.kwargs
        assert kwargs["vapid_private_key"] == "private-key"
        assert kwargs["vapid_claims"] == {"sub": "mailto:ops@dinemaison.test"}
        assert json.loads(kwargs["data"])["title"] == "Booking Confirmed!"
        endpoints = {c.kwargs["subscription_info"]["endpoint"] for c in webpush.call_args_list}
        assert endpoints == {"https://push/a", "https://push/b"}

    @pytest.mark.asyncio
    async def test_expired_subscription_is_removed(
        self, make_channel, subscriptions, webpush
    ):
        await subscriptions.save_subscription("user-1", "https://push/gone", "k", "a")
        webpush.side_effect = _gone(410)

        with pytest.raises(PushDeliveryError):
            await make_channel().send("user-1", make_message())

        assert await subscriptions.get_user_subscriptions("user-1") == []

    @pytest.mark.asyncio
    async def test_partial_failure_still_succeeds(
        self, make_channel, subscriptions, webpush
    ):
        await subscriptions.save_subscription("user-1", "https://push/ok", "k", "a")
        await subscriptions.save_subscription("user-1", "https://push/bad", "k", "a")

        def _send(subscription_info, **kwargs):
            if subscription_info["endpoint"].endswith("bad"):
                raise _gone(500)

        webpush.side_effect = _send

        assert await make_channel().send("user-1", make_message()) is True
        # Server errors do not drop the subscription
        assert len(await subscriptions.get_user_subscriptions("user-1")) == 2

    @pytest.mark.asyncio
    async def test_fcm_tokens_skipped_without_fcm(
        self, make_channel, subscriptions, webpush
    ):
        await subscriptions.save_subscription("user-1", "fcm-token", kind="fcm")

        with pytest.raises(ChannelSkipped):
            await make_channel().send("user-1", make_message())
        webpush.assert_not_called()


@pytest.mark.unit
class TestFcm:
    @pytest.fixture
    def fcm_send(self):
        with patch.object(messaging, "send", MagicMock(return_value="msg-1")) as send:
            yield send

    @pytest.mark.asyncio
    async def test_sends_high_priority_for_urgent(
        self, make_channel, subscriptions, fcm_send
    ):
        await subscriptions.save_subscription("user-1", "fcm-token", kind="fcm")
        channel = make_channel(fcm_capable=True, VAPID_PRIVATE_KEY="")

        ok = await channel.send(
            "user-1",
            make_message(
                priority=NotificationPriority.URGENT, data={"amount": 12.5}
            ),
        )

        assert ok is True
        sent = fcm_send.call_args.args[0]
        assert sent.token == "fcm-token"
        assert sent.android.priority == "high"
        assert sent.data["amount"] == "12.5"
        assert sent.notification.title == "Booking Confirmed!"

    @pytest.mark.asyncio
    async def test_unregistered_token_is_removed(
        self, make_channel, subscriptions, fcm_send
    ):
        await subscriptions.save_subscription("user-1", "stale-token", kind="fcm")
        fcm_send.side_effect = messaging.UnregisteredError("unregistered")
        channel = make_channel(fcm_capable=True)

        with pytest.raises(PushDeliveryError):
            await channel.send("user-1", make_message())

        assert await subscriptions.get_user_subscriptions("user-1") == []


@pytest.mark.unit
class TestVapidKey:
    def test_exposes_public_key(self, make_channel):
        assert make_channel().vapid_public_key == "BPublicKey"

    @pytest.mark.asyncio
    async def test_health_reports_capabilities(self, make_channel):
        result = await make_channel().health_check()
        assert result.is_success
        assert result.data == {"web_push_capable": True, "fcm_capable": False}
