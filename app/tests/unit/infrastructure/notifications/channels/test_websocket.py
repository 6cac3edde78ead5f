"""Unit tests for the websocket connection registry and channel."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from infrastructure.notifications import DeliveryStatus
from infrastructure.notifications.channels import (
    ConnectionRegistry,
    InAppChannel,
    WebSocketChannel,
)
from tests.factories.notifications import make_message


def _socket(error=None):
    websocket = MagicMock()
    websocket.send_json = AsyncMock(side_effect=error)
    return websocket


@pytest.mark.unit
class TestConnectionRegistry:
    @pytest.mark.asyncio
    async def test_register_and_unregister(self):
        registry = ConnectionRegistry()
        first, second = _socket(), _socket()

        await registry.register("user-1", first)
        await registry.register("user-1", second)
        assert registry.connection_count("user-1") == 2

        await registry.unregister("user-1", first)
        assert registry.connection_count("user-1") == 1
        await registry.unregister("user-1", second)
        assert registry.connection_count() == 0

    @pytest.mark.asyncio
    async def test_send_to_every_socket_of_user(self):
        registry = ConnectionRegistry()
        mine, other = _socket(), _socket()
        await registry.register("user-1", mine)
        await registry.register("user-2", other)

        reached = await registry.send_to_user("user-1", {"type": "ping"})

        assert reached == 1
        mine.send_json.assert_awaited_once_with({"type": "ping"})
        other.send_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_broken_socket_is_dropped(self):
        registry = ConnectionRegistry()
        healthy, broken = _socket(), _socket(RuntimeError("closed"))
        await registry.register("user-1", healthy)
        await registry.register("user-1", broken)

        reached = await registry.send_to_user("user-1", {"type": "ping"})

        assert reached == 1
        assert registry.connection_count("user-1") == 1


@pytest.mark.unit
class TestWebSocketChannel:
    @pytest.mark.asyncio
    async def test_emits_notification_event(self):
        registry = ConnectionRegistry()
        websocket = _socket()
        await registry.register("user-1", websocket)
        channel = WebSocketChannel(registry)

        await channel.send("user-1", make_message(notification_id="n-1"))

        event = websocket.send_json.await_args.args[0]
        assert event["type"] == "notification:new"
        assert event["payload"]["id"] == "n-1"
        assert event["payload"]["type"] == "booking_confirmed"
        assert event["payload"]["category"] == "booking"
        assert event["payload"]["priority"] == "high"

    @pytest.mark.asyncio
    async def test_no_connection_is_not_a_failure(self):
        channel = WebSocketChannel(ConnectionRegistry(), event_name="custom")
        assert await channel.send("user-1", make_message()) is None
        assert channel.success_status == DeliveryStatus.DELIVERED


@pytest.mark.unit
class TestInAppChannel:
    @pytest.mark.asyncio
    async def test_is_a_no_op_delivery(self):
        channel = InAppChannel()
        assert await channel.send("user-1", make_message()) is None
        assert channel.channel_name == "in_app"
        assert channel.success_status == DeliveryStatus.DELIVERED
