"""Common utilities for tests."""

import unittest.mock
from typing import Any, Optional

from mockfirestore import CollectionReference, MockFirestore, Query

from tilawah.context import NotificationContext


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter."""

    def where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = where

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = where


class MockBatch:
    def __init__(self, db: Any) -> None:
        self.db = db
        self.writes: list[tuple[Any, Any]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._real_commit)

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        self.writes.append((ref, data))

    def _real_commit(self) -> None:
        for ref, data in self.writes:
            ref.set(data)
        self.writes = []


def make_messaging() -> unittest.mock.MagicMock:
    """Create a messaging client whose sends all succeed."""
    messaging = unittest.mock.MagicMock()
    messaging.send.return_value = "projects/test/messages/1"
    messaging.send_each_for_multicast.return_value = unittest.mock.MagicMock(
        success_count=1, failure_count=0
    )
    return messaging


def make_context(db: Any = None) -> NotificationContext:
    """Build a context backed by MockFirestore and mocked messaging/auth."""
    patch_mockfirestore()
    if db is None:
        db = MockFirestore()
    return NotificationContext(
        db=db, messaging=make_messaging(), auth=unittest.mock.MagicMock()
    )


def add_user(db: Any, uid: str, tokens: Optional[list[str]] = None, **fields: Any):
    """Store a user document with the given device tokens."""
    data = {"uid": uid, "name": fields.pop("name", uid), **fields}
    if tokens is not None:
        data["deviceTokens"] = tokens
    db.collection("users").document(uid).set(data)


def topic_messages(ctx: NotificationContext) -> list[Any]:
    """Return the messages sent to topics.

    Sends run concurrently, so callers must not rely on the order.
    """
    return [c.args[0] for c in ctx.messaging.send.call_args_list]


def multicast_messages(ctx: NotificationContext) -> list[Any]:
    """Return the multicast messages sent."""
    return [c.args[0] for c in ctx.messaging.send_each_for_multicast.call_args_list]
