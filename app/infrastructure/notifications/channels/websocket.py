"""WebSocket channel: real-time push to the user's open sockets."""

import asyncio
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket, WebSocketDisconnect

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.models import (
    ChannelMessage,
    DeliveryStatus,
    NotificationChannel,
)

logger = get_module_logger()


class ConnectionRegistry:
    """Open sockets per user id.

    A user may have several sockets (tabs, devices). Sockets that fail on
    send are dropped.
    """

    def __init__(self):
        self._connections: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def register(self, user_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.setdefault(user_id, set()).add(websocket)
        logger.info("websocket_registered", user_id=user_id)

    async def unregister(self, user_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            sockets = self._connections.get(user_id)
            if sockets is None:
                return
            sockets.discard(websocket)
            if not sockets:
                del self._connections[user_id]
        logger.info("websocket_unregistered", user_id=user_id)

    def connection_count(self, user_id: Optional[str] = None) -> int:
        if user_id is not None:
            return len(self._connections.get(user_id, ()))
        return sum(len(sockets) for sockets in self._connections.values())

    async def send_to_user(self, user_id: str, message: Dict[str, Any]) -> int:
        """Send a JSON message to every socket of the user; returns sockets reached."""
        async with self._lock:
            sockets = list(self._connections.get(user_id, ()))

        reached = 0
        for websocket in sockets:
            try:
                await websocket.send_json(message)
                reached += 1
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                logger.warning("websocket_send_failed", user_id=user_id, error=str(e))
                await self.unregister(user_id, websocket)
        return reached


class WebSocketChannel(ChannelSender):
    """Fire-and-forget delivery to connected clients.

    No open connection is still a success: the in-app record is picked up
    on the next page load.
    """

    def __init__(self, registry: ConnectionRegistry, event_name: str = "notification:new"):
        self._registry = registry
        self._event_name = event_name

    @property
    def channel(self) -> NotificationChannel:
        return NotificationChannel.WEBSOCKET

    @property
    def success_status(self) -> DeliveryStatus:
        return DeliveryStatus.DELIVERED

    async def send(self, user_id: str, message: ChannelMessage) -> Optional[bool]:
        reached = await self._registry.send_to_user(
            user_id,
            {
                "type": self._event_name,
                "payload": {
                    "id": message.notification_id,
                    "type": message.type.value,
                    "title": message.title,
                    "body": message.body,
                    "data": message.data,
                    "category": message.category.value,
                    "priority": message.priority.value,
                },
            },
        )
        logger.debug("websocket_notification_sent", user_id=user_id, sockets=reached)
        return None
