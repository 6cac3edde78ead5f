"""Notification channel implementations."""

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.channels.email import EmailChannel
from infrastructure.notifications.channels.in_app import InAppChannel
from infrastructure.notifications.channels.push import PushChannel
from infrastructure.notifications.channels.sms import SMSChannel
from infrastructure.notifications.channels.websocket import (
    ConnectionRegistry,
    WebSocketChannel,
)

__all__ = [
    "ChannelSender",
    "ConnectionRegistry",
    "EmailChannel",
    "InAppChannel",
    "PushChannel",
    "SMSChannel",
    "WebSocketChannel",
]
