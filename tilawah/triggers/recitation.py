"""Triggers for recitation assignments."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore

from tilawah.constants import (
    ACTION_QURAN_COMPLETED,
    ACTION_RECITATION_ASSIGNED,
    ACTION_RECITATION_COMPLETED,
    ACTION_RECITATION_STATUS,
    JUZ_COUNT,
    RECITATIONS_COLLECTION,
    STATUS_COMPLETED,
)
from tilawah.models import Recitation
from tilawah.notifications import (
    MulticastRequest,
    SendRequest,
    TopicRequest,
    get_user_device_tokens,
    group_topic,
)

from .events import DocumentChange, DocumentEvent, document_trigger

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from tilawah.context import NotificationContext
    from tilawah.notifications import SendResult

logger = logging.getLogger(__name__)


@document_trigger
def on_recitation_created(
    ctx: NotificationContext, event: DocumentEvent
) -> list[SendResult]:
    """Notify the assignee and the group about a new assignment."""
    if not event.data:
        return []

    recitation = Recitation.from_dict(event.document_id, event.data)
    tokens = get_user_device_tokens(ctx.db, recitation.assigned_to)

    data = {
        "groupId": recitation.group_id,
        "assignmentId": recitation.id,
        "action": ACTION_RECITATION_ASSIGNED,
    }

    sends: list[SendRequest] = []
    if tokens:
        sends.append(
            MulticastRequest(
                tokens=tokens,
                title="New recitation assigned",
                body=f"{recitation.assignment_label} has been assigned to you.",
                data=data,
            )
        )

    sends.append(
        TopicRequest(
            topic=group_topic(recitation.group_id),
            title="Group update",
            body=f"{recitation.member_name} received a new recitation.",
            data=data,
        )
    )

    results = ctx.dispatcher.dispatch(sends)
    logger.info("Recitation assignment notifications dispatched.")
    return results


@document_trigger
def on_recitation_status_update(
    ctx: NotificationContext, change: DocumentChange
) -> list[SendResult]:
    """Broadcast progress when the status changes, and celebrate completions."""
    if not change.before or not change.after:
        return []

    if change.before.get("status") == change.after.get("status"):
        return []

    recitation = Recitation.from_dict(change.document_id, change.after)

    data = {
        "groupId": recitation.group_id,
        "assignmentId": recitation.id,
        "action": ACTION_RECITATION_STATUS,
        "status": recitation.status,
    }

    sends: list[SendRequest] = [
        TopicRequest(
            topic=group_topic(recitation.group_id),
            title="Recitation progress update",
            body=(
                f"{recitation.member_name} marked {recitation.unit_label} "
                f"as {recitation.status}."
            ),
            data=data,
        )
    ]

    if recitation.is_completed:
        sends.extend(_completion_sends(ctx, recitation, data))

    results = ctx.dispatcher.dispatch(sends)
    logger.info("Recitation status notifications dispatched.")
    return results


def _completion_sends(
    ctx: NotificationContext, recitation: Recitation, data: dict[str, Any]
) -> list[SendRequest]:
    """Build the sends that follow a recitation being marked completed."""
    sends: list[SendRequest] = []

    # Notify the admin who assigned it
    assigner_tokens = get_user_device_tokens(ctx.db, recitation.assigned_by)
    if assigner_tokens:
        sends.append(
            MulticastRequest(
                tokens=assigner_tokens,
                title="Assignment completed",
                body=f"{recitation.member_name} completed {recitation.unit_label}.",
                data=data,
            )
        )

    sends.append(
        TopicRequest(
            topic=group_topic(recitation.group_id),
            title="🎉 Recitation Completed!",
            body=(
                f"{recitation.member_name} has completed "
                f"{recitation.unit_label}. MashaAllah!"
            ),
            data={
                **data,
                "action": ACTION_RECITATION_COMPLETED,
                "memberName": recitation.assigned_to_name,
                "juzNumber": recitation.juz_number,
            },
        )
    )

    if recitation.week_id:
        celebration = quran_completion_request(
            ctx.db, recitation.group_id, recitation.week_id, data
        )
        if celebration:
            sends.append(celebration)

    return sends


def completed_juz_numbers(db: Client, group_id: str, week_id: str) -> set[int]:
    """Return the distinct juz numbers completed in a group's week.

    Values outside 1..JUZ_COUNT are ignored so they cannot stand in for a
    missing juz.
    """
    week_assignments = (
        db.collection(RECITATIONS_COLLECTION)
        .where(filter=firestore.FieldFilter("group_id", "==", group_id))
        .where(filter=firestore.FieldFilter("week_id", "==", week_id))
        .stream()
    )

    completed = set()
    for doc in week_assignments:
        assignment = doc.to_dict() or {}
        juz_number = assignment.get("juz_number")
        if assignment.get("status") != STATUS_COMPLETED:
            continue
        if isinstance(juz_number, bool) or not isinstance(juz_number, int):
            continue
        if 1 <= juz_number <= JUZ_COUNT:
            completed.add(juz_number)
    return completed


def is_week_complete(db: Client, group_id: str, week_id: str) -> bool:
    """Return True when exactly every juz has been completed for the week."""
    return len(completed_juz_numbers(db, group_id, week_id)) == JUZ_COUNT


def quran_completion_request(
    db: Client, group_id: str, week_id: str, data: dict[str, Any]
) -> Optional[TopicRequest]:
    """Return the group celebration for a completed Quran, if it is due."""
    if not is_week_complete(db, group_id, week_id):
        return None

    logger.info(f"Group {group_id} completed the Quran for week {week_id}.")
    return TopicRequest(
        topic=group_topic(group_id),
        title="🎉 Quran Completed!",
        body="Your team has successfully completed the Quran. Make duas.",
        data={**data, "action": ACTION_QURAN_COMPLETED, "weekId": week_id},
    )
