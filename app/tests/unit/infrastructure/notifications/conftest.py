"""Fixtures for notification pipeline unit tests."""

import asyncio
from typing import List, Optional, Tuple

import pytest

from infrastructure.notifications import (
    ChannelMessage,
    DeliveryStatus,
    NotificationChannel,
    NotificationDispatcher,
)
from infrastructure.notifications.channels.base import ChannelSender


class RecordingSender(ChannelSender):
    """Channel sender that records calls and returns a scripted outcome.

    Args:
        channel: Channel to register as
        outcome: Value returned from send()
        error: Exception raised from send() instead of returning
        delay: Seconds to sleep before answering
        success_status: Status logged on success
    """

    def __init__(
        self,
        channel: NotificationChannel,
        outcome: Optional[bool] = None,
        error: Optional[BaseException] = None,
        delay: float = 0,
        success_status: DeliveryStatus = DeliveryStatus.SENT,
    ):
        self._channel = channel
        self._outcome = outcome
        self._error = error
        self._delay = delay
        self._success_status = success_status
        self.calls: List[Tuple[str, ChannelMessage]] = []

    @property
    def channel(self) -> NotificationChannel:
        return self._channel

    @property
    def success_status(self) -> DeliveryStatus:
        return self._success_status

    async def send(self, user_id: str, message: ChannelMessage) -> Optional[bool]:
        self.calls.append((user_id, message))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._outcome


@pytest.fixture
def sender_factory():
    return RecordingSender


@pytest.fixture
def default_senders():
    """One succeeding sender per channel."""
    return {
        NotificationChannel.PUSH: RecordingSender(NotificationChannel.PUSH, True),
        NotificationChannel.EMAIL: RecordingSender(NotificationChannel.EMAIL, True),
        NotificationChannel.SMS: RecordingSender(NotificationChannel.SMS, True),
        NotificationChannel.WEBSOCKET: RecordingSender(
            NotificationChannel.WEBSOCKET, success_status=DeliveryStatus.DELIVERED
        ),
        NotificationChannel.IN_APP: RecordingSender(
            NotificationChannel.IN_APP, success_status=DeliveryStatus.DELIVERED
        ),
    }


@pytest.fixture
def make_dispatcher(records, preferences, delivery_log, default_senders):
    """Build a dispatcher over the test database.

    Example:
        dispatcher = make_dispatcher(sms=RecordingSender(..., error=ChannelSkipped("off")))
    """

    def _make(channel_timeout_seconds: float = 10.0, **overrides):
        senders = dict(default_senders)
        for name, sender in overrides.items():
            channel = NotificationChannel(name)
            if sender is None:
                senders.pop(channel, None)
            else:
                senders[channel] = sender
        return NotificationDispatcher(
            records=records,
            preferences=preferences,
            delivery_log=delivery_log,
            senders=senders.values(),
            channel_timeout_seconds=channel_timeout_seconds,
        )

    return _make


