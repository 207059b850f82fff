"""Best-effort fan-out of push notifications."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from firebase_admin import messaging

from tilawah.constants import DEFAULT_DISPATCH_MAX_WORKERS, GROUP_TOPIC_PREFIX

logger = logging.getLogger(__name__)


def group_topic(group_id: str) -> str:
    """Return the broadcast topic for a group."""
    return f"{GROUP_TOPIC_PREFIX}{group_id}"


def _stringify(data: dict[str, Any]) -> dict[str, str]:
    # FCM rejects non-string data values.
    return {key: "" if value is None else str(value) for key, value in data.items()}


@dataclass
class MulticastRequest:
    """A send to an explicit list of device tokens."""

    tokens: list[str]
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def target(self) -> str:
        return f"{len(self.tokens)} device(s)"

    def build(self) -> messaging.MulticastMessage:
        return messaging.MulticastMessage(
            tokens=list(self.tokens),
            notification=messaging.Notification(title=self.title, body=self.body),
            data=_stringify(self.data),
        )


@dataclass
class TopicRequest:
    """A send to a topic subscription."""

    topic: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def target(self) -> str:
        return f"topic {self.topic}"

    def build(self) -> messaging.Message:
        return messaging.Message(
            topic=self.topic,
            notification=messaging.Notification(title=self.title, body=self.body),
            data=_stringify(self.data),
        )


SendRequest = Union[MulticastRequest, TopicRequest]


@dataclass
class SendResult:
    """Outcome of one send request."""

    request: SendRequest
    ok: bool
    reason: Optional[str] = None
    message_id: Optional[str] = None
    success_count: int = 0
    failure_count: int = 0


class NotificationDispatcher:
    """Sends a batch of independent requests concurrently.

    Every request settles on its own: a failing send is logged and reported
    in its ``SendResult`` but never raised to the caller.
    """

    def __init__(self, client: Any, max_workers: int = DEFAULT_DISPATCH_MAX_WORKERS):
        """Initialize with a messaging client exposing ``send`` and
        ``send_each_for_multicast`` (normally ``firebase_admin.messaging``)."""
        self.client = client
        self.max_workers = max_workers

    def dispatch(self, requests: list[SendRequest]) -> list[SendResult]:
        """Send all requests and wait for every one of them to settle."""
        pending = [
            r for r in requests if not (isinstance(r, MulticastRequest) and not r.tokens)
        ]
        if not pending:
            return []

        workers = min(self.max_workers, len(pending))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(self._send, pending))

        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.warning(f"{failed} of {len(results)} notification sends failed.")
        return results

    def _send(self, request: SendRequest) -> SendResult:
        try:
            if isinstance(request, MulticastRequest):
                response = self.client.send_each_for_multicast(request.build())
                result = SendResult(
                    request=request,
                    ok=True,
                    success_count=response.success_count,
                    failure_count=response.failure_count,
                )
                if response.failure_count:
                    logger.warning(
                        f"Multicast to {request.target} had "
                        f"{response.failure_count} failed token(s)."
                    )
                return result

            message_id = self.client.send(request.build())
            return SendResult(request=request, ok=True, message_id=message_id)
        except Exception as e:
            logger.warning(f"Notification to {request.target} failed: {e}")
            return SendResult(request=request, ok=False, reason=str(e))
