"""Unit tests for notification models."""

import pytest
from pydantic import ValidationError

from infrastructure.notifications import (
    ChannelPreferences,
    ChannelSkipped,
    NotificationChannel,
    NotificationPayload,
    NotificationPriority,
    SendOptions,
)
from infrastructure.notifications.templates import NOTIFICATION_TEMPLATES


@pytest.mark.unit
class TestNotificationPriority:
    def test_rank_orders_priorities(self):
        ranks = [
            NotificationPriority.LOW.rank,
            NotificationPriority.NORMAL.rank,
            NotificationPriority.HIGH.rank,
            NotificationPriority.URGENT.rank,
        ]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4


@pytest.mark.unit
class TestChannelPreferences:
    def test_is_enabled_reads_channel_flag(self):
        prefs = ChannelPreferences(push=True, email=False, sms=False, in_app=True)
        assert prefs.is_enabled(NotificationChannel.PUSH) is True
        assert prefs.is_enabled(NotificationChannel.EMAIL) is False
        assert prefs.is_enabled(NotificationChannel.IN_APP) is True

    def test_websocket_is_always_enabled(self):
        prefs = ChannelPreferences(push=False, email=False, sms=False, in_app=False)
        assert prefs.is_enabled(NotificationChannel.WEBSOCKET) is True


@pytest.mark.unit
class TestNotificationPayload:
    def test_requires_title(self):
        with pytest.raises(ValidationError):
            NotificationPayload(title="", body="x")

    def test_optional_fields_default_to_none(self):
        payload = NotificationPayload(title="Hi", body="There")
        assert payload.data is None
        assert payload.category is None
        assert payload.priority is None
        assert payload.actions is None


@pytest.mark.unit
class TestSendOptions:
    def test_accepts_channel_enums(self):
        options = SendOptions(
            channels=[NotificationChannel.EMAIL, NotificationChannel.IN_APP]
        )
        assert options.channels == ["email", "in_app"]

    def test_keeps_unknown_channel_names(self):
        options = SendOptions(channels=["fax"])
        assert options.channels == ["fax"]

    def test_defaults(self):
        options = SendOptions()
        assert options.channels is None
        assert options.skip_preferences is False


@pytest.mark.unit
class TestTemplateModel:
    def test_templates_are_frozen(self):
        template = next(iter(NOTIFICATION_TEMPLATES.values()))
        with pytest.raises(ValidationError):
            template.sms_enabled = True  # type: ignore[misc]


@pytest.mark.unit
def test_channel_skipped_carries_reason():
    exc = ChannelSkipped("No phone number on file")
    assert exc.reason == "No phone number on file"
    assert str(exc) == "No phone number on file"
