"""Triggers for group documents."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tilawah.constants import ACTION_ADMIN_ASSIGNED
from tilawah.models import Group
from tilawah.notifications import (
    MulticastRequest,
    SendRequest,
    TopicRequest,
    get_user_device_tokens,
    group_topic,
)

from .events import DocumentChange, document_trigger

if TYPE_CHECKING:
    from tilawah.context import NotificationContext
    from tilawah.notifications import SendResult

logger = logging.getLogger(__name__)


@document_trigger
def on_admin_change(ctx: NotificationContext, change: DocumentChange) -> list[SendResult]:
    """Tell the new admin and the group when the admin changes."""
    if not change.before or not change.after:
        return []

    if change.before.get("admin_uid") == change.after.get("admin_uid"):
        return []

    group = Group.from_dict(change.document_id, change.after)
    tokens = get_user_device_tokens(ctx.db, group.admin_uid)

    data = {"groupId": group.id, "action": ACTION_ADMIN_ASSIGNED}

    sends: list[SendRequest] = []
    if tokens:
        sends.append(
            MulticastRequest(
                tokens=tokens,
                title="You are now the admin",
                body=f"You have been assigned as the admin of {group.name}.",
                data=data,
            )
        )

    sends.append(
        TopicRequest(
            topic=group_topic(group.id),
            title="Admin update",
            body=f"{group.name} has a new admin.",
            data=data,
        )
    )

    results = ctx.dispatcher.dispatch(sends)
    logger.info("Admin change notifications dispatched.")
    return results
