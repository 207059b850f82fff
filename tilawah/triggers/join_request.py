"""Triggers for group join requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tilawah.constants import (
    ACTION_JOIN_REQUEST_APPROVED,
    ACTION_JOIN_REQUEST_CREATED,
    ACTION_JOIN_REQUEST_REJECTED,
    GROUPS_COLLECTION,
    STATUS_APPROVED,
    STATUS_PENDING,
)
from tilawah.models import Group, JoinRequest
from tilawah.notifications import (
    MulticastRequest,
    SendRequest,
    TopicRequest,
    get_user_device_tokens,
    group_topic,
)

from .events import DocumentChange, DocumentEvent, document_trigger

if TYPE_CHECKING:
    from tilawah.context import NotificationContext
    from tilawah.notifications import SendResult

logger = logging.getLogger(__name__)


@document_trigger
def on_join_request_created(
    ctx: NotificationContext, event: DocumentEvent
) -> list[SendResult]:
    """Notify the group admin and the group about a pending join request."""
    if not event.data:
        return []

    request = JoinRequest.from_dict(event.document_id, event.data)

    # Only notify for pending requests
    if not request.is_pending:
        return []

    group_doc = ctx.db.collection(GROUPS_COLLECTION).document(request.group_id).get()
    if not group_doc.exists:
        logger.warning(f"Group {request.group_id} not found for join request")
        return []

    group = Group.from_dict(group_doc.id, group_doc.to_dict() or {})
    tokens = get_user_device_tokens(ctx.db, group.admin_uid)

    data = {
        "groupId": request.group_id,
        "requestId": request.id,
        "action": ACTION_JOIN_REQUEST_CREATED,
        "userId": request.user_id,
    }

    sends: list[SendRequest] = []
    if tokens:
        sends.append(
            MulticastRequest(
                tokens=tokens,
                title="New join request",
                body=f"{request.requester_name} wants to join {group.name}.",
                data=data,
            )
        )

    sends.append(
        TopicRequest(
            topic=group_topic(request.group_id),
            title="New join request",
            body=f"{request.requester_name} wants to join the group.",
            data=data,
        )
    )

    results = ctx.dispatcher.dispatch(sends)
    logger.info("Join request notification dispatched.")
    return results


@document_trigger
def on_join_request_updated(
    ctx: NotificationContext, change: DocumentChange
) -> list[SendResult]:
    """Tell the requester that their request was approved or rejected."""
    if not change.before or not change.after:
        return []

    # Only a pending -> resolved transition is announced
    if (
        change.before.get("status") != STATUS_PENDING
        or change.after.get("status") == STATUS_PENDING
    ):
        return []

    request = JoinRequest.from_dict(change.document_id, change.after)
    tokens = get_user_device_tokens(ctx.db, request.user_id)
    if not tokens:
        return []

    is_approved = request.status == STATUS_APPROVED
    if is_approved:
        title = "Join request approved"
        body = "Your request to join the group has been approved."
        action = ACTION_JOIN_REQUEST_APPROVED
    else:
        title = "Join request rejected"
        body = "Your join request was rejected."
        action = ACTION_JOIN_REQUEST_REJECTED

    results = ctx.dispatcher.dispatch(
        [
            MulticastRequest(
                tokens=tokens,
                title=title,
                body=body,
                data={
                    "groupId": request.group_id,
                    "requestId": request.id,
                    "action": action,
                    "status": request.status,
                },
            )
        ]
    )
    logger.info(f"Join request {request.status} notification dispatched.")
    return results
