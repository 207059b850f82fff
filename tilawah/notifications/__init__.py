"""Push notification delivery: token lookup and batch dispatch."""

from .dispatcher import (
    MulticastRequest,
    NotificationDispatcher,
    SendRequest,
    SendResult,
    TopicRequest,
    group_topic,
)
from .tokens import get_user_device_tokens

__all__ = [
    "MulticastRequest",
    "NotificationDispatcher",
    "SendRequest",
    "SendResult",
    "TopicRequest",
    "get_user_device_tokens",
    "group_topic",
]
