"""Unit tests for NotificationStore."""

import pytest

from infrastructure.notifications import (
    DeliveryStatus,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
)


@pytest.fixture
def create(records):
    async def _create(
        user_id="user-1",
        notification_type=NotificationType.BOOKING_CONFIRMED,
        category=NotificationCategory.BOOKING,
        title="Booking Confirmed!",
    ):
        return await records.create(
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            body="body",
            category=category,
            priority=NotificationPriority.NORMAL,
            data={"bookingId": "b-1"},
        )

    return _create


@pytest.mark.unit
class TestCreate:
    @pytest.mark.asyncio
    async def test_create_returns_unread_record(self, create):
        record = await create()
        assert record.id
        assert record.user_id == "user-1"
        assert record.type == NotificationType.BOOKING_CONFIRMED
        assert record.data == {"bookingId": "b-1"}
        assert record.is_read is False
        assert record.created_at is not None

    @pytest.mark.asyncio
    async def test_get_notification_scoped_to_owner(self, records, create):
        record = await create()
        assert await records.get_notification(record.id, "user-1") is not None
        assert await records.get_notification(record.id, "user-2") is None
        assert await records.get_notification(record.id) is not None


@pytest.mark.unit
class TestUserNotifications:
    @pytest.mark.asyncio
    async def test_list_is_newest_first_and_paged(self, records, create):
        for i in range(3):
            await create(title=f"n{i}")

        page = await records.get_user_notifications("user-1", limit=2)
        assert [n.title for n in page] == ["n2", "n1"]

        rest = await records.get_user_notifications("user-1", limit=2, offset=2)
        assert [n.title for n in rest] == ["n0"]

    @pytest.mark.asyncio
    async def test_filters_by_category_and_unread(self, records, create):
        booking = await create()
        await create(
            notification_type=NotificationType.PAYMENT_SUCCESS,
            category=NotificationCategory.PAYMENT,
        )
        await records.mark_notification_as_read(booking.id)

        payments = await records.get_user_notifications(
            "user-1", category=NotificationCategory.PAYMENT
        )
        assert [n.category for n in payments] == [NotificationCategory.PAYMENT]

        unread = await records.get_user_notifications("user-1", unread_only=True)
        assert [n.type for n in unread] == [NotificationType.PAYMENT_SUCCESS]

    @pytest.mark.asyncio
    async def test_only_returns_own_notifications(self, records, create):
        await create(user_id="user-2")
        assert await records.get_user_notifications("user-1") == []


@pytest.mark.unit
class TestReadState:
    @pytest.mark.asyncio
    async def test_unread_count(self, records, create):
        await create()
        await create()
        assert await records.get_unread_count("user-1") == 2
        assert await records.get_unread_count("user-2") == 0

    @pytest.mark.asyncio
    async def test_mark_as_read_is_idempotent(self, records, create):
        record = await create()
        assert await records.mark_notification_as_read(record.id) is True
        assert await records.mark_notification_as_read(record.id) is True
        assert await records.get_unread_count("user-1") == 0

    @pytest.mark.asyncio
    async def test_mark_as_read_unknown_id(self, records):
        assert await records.mark_notification_as_read("missing") is False

    @pytest.mark.asyncio
    async def test_mark_as_read_other_owner(self, records, create):
        record = await create()
        assert await records.mark_notification_as_read(record.id, "user-2") is False
        assert await records.get_unread_count("user-1") == 1

    @pytest.mark.asyncio
    async def test_mark_all_as_read(self, records, create):
        await create()
        await create()
        await create(user_id="user-2")

        assert await records.mark_all_as_read("user-1") == 2
        assert await records.get_unread_count("user-1") == 0
        assert await records.get_unread_count("user-2") == 1


@pytest.mark.unit
class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_delivery_log(self, records, delivery_log, create):
        record = await create()
        await delivery_log.log(record.id, "push", DeliveryStatus.SENT)

        assert await records.delete_notification(record.id, "user-1") is True
        assert await records.get_notification(record.id) is None
        assert await delivery_log.get_entries(record.id) == []

    @pytest.mark.asyncio
    async def test_delete_requires_ownership(self, records, create):
        record = await create()
        assert await records.delete_notification(record.id, "user-2") is False
        assert await records.get_notification(record.id) is not None

    @pytest.mark.asyncio
    async def test_delete_unknown(self, records):
        assert await records.delete_notification("missing") is False
