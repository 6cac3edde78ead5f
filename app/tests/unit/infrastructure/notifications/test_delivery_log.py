"""Unit tests for DeliveryLog."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from infrastructure.notifications import (
    DeliveryLog,
    DeliveryStatus,
    NotificationCategory,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
)


async def _create_notification(records, user_id="user-1"):
    return await records.create(
        user_id=user_id,
        notification_type=NotificationType.BOOKING_CONFIRMED,
        title="Booking Confirmed!",
        body="See you soon",
        category=NotificationCategory.BOOKING,
        priority=NotificationPriority.HIGH,
    )


@pytest.mark.unit
class TestDeliveryLog:
    @pytest.mark.asyncio
    async def test_log_and_read_entries(self, records, delivery_log):
        notification = await _create_notification(records)

        await delivery_log.log(notification.id, NotificationChannel.PUSH, DeliveryStatus.SENT)
        await delivery_log.log(
            notification.id, "sms", DeliveryStatus.SKIPPED, "No phone number on file"
        )

        entries = await delivery_log.get_entries(notification.id)
        by_channel = {e.channel: e for e in entries}
        assert set(by_channel) == {"push", "sms"}
        assert by_channel["push"].status == DeliveryStatus.SENT
        assert by_channel["push"].error_message is None
        assert by_channel["sms"].status == DeliveryStatus.SKIPPED
        assert by_channel["sms"].error_message == "No phone number on file"

    @pytest.mark.asyncio
    async def test_status_counts(self, records, delivery_log):
        first = await _create_notification(records)
        second = await _create_notification(records)
        await delivery_log.log(first.id, "push", DeliveryStatus.SENT)
        await delivery_log.log(second.id, "push", DeliveryStatus.FAILED, "boom")
        await delivery_log.log(second.id, "in_app", DeliveryStatus.DELIVERED)

        counts = await delivery_log.get_status_counts()
        assert counts == {
            "push": {"sent": 1, "failed": 1},
            "in_app": {"delivered": 1},
        }

    @pytest.mark.asyncio
    async def test_log_never_raises(self):
        database = MagicMock()
        database.session.side_effect = OperationalError(
            "INSERT", {}, Exception("db down")
        )
        log = DeliveryLog(database)

        await log.log("n-1", "push", DeliveryStatus.SENT)

    @pytest.mark.asyncio
    async def test_unknown_notification_has_no_entries(self, delivery_log):
        assert await delivery_log.get_entries("missing") == []
