"""Weekly reminder for group admins to hand out the week's juz."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional
from zoneinfo import ZoneInfo

from firebase_admin import firestore

from tilawah.constants import (
    ACTION_WEEKLY_RESET,
    DEFAULT_TIMEZONE,
    GROUPS_COLLECTION,
    RECITATIONS_COLLECTION,
)
from tilawah.models import Group
from tilawah.notifications import MulticastRequest, get_user_device_tokens

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from tilawah.context import NotificationContext

logger = logging.getLogger(__name__)


@dataclass
class WeeklyResetSummary:
    """Outcome of one weekly run."""

    week_id: str
    processed: int = 0
    reminded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def get_zone(tz: str) -> datetime.tzinfo:
    """Return the tzinfo for a zone name."""
    if tz.upper() == "UTC":
        return datetime.timezone.utc
    return ZoneInfo(tz)


def get_week_start(date: datetime.date) -> datetime.date:
    """Return the Monday of the week containing ``date``."""
    if isinstance(date, datetime.datetime):
        date = date.date()
    return date - datetime.timedelta(days=date.weekday())


def generate_week_id(date: datetime.date) -> str:
    """Return the ISO-8601 week key for a date, e.g. ``2024-W05``.

    Week 1 is the week holding the year's first Thursday, so the year in the
    key is the ISO year and can differ from the calendar year near New Year.
    """
    iso_year, iso_week, _ = get_week_start(date).isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def has_assignments(db: Client, group_id: str, week_id: str) -> bool:
    """Return True if any recitation exists for the group's week."""
    existing = (
        db.collection(RECITATIONS_COLLECTION)
        .where(filter=firestore.FieldFilter("group_id", "==", group_id))
        .where(filter=firestore.FieldFilter("week_id", "==", week_id))
        .limit(1)
        .stream()
    )
    return bool(list(existing))


def _remind_admin(ctx: NotificationContext, group: Group, week_id: str) -> bool:
    """Remind the group's admin to assign the week; True if a reminder went out."""
    if not group.has_members() or not group.admin_uid:
        return False

    if not group.is_member(group.admin_uid):
        logger.warning(f"Admin {group.admin_uid} is not a member of group {group.id}")
        return False

    if has_assignments(ctx.db, group.id, week_id):
        return False

    tokens = get_user_device_tokens(ctx.db, group.admin_uid)
    if not tokens:
        return False

    results = ctx.dispatcher.dispatch(
        [
            MulticastRequest(
                tokens=tokens,
                title="New week started",
                body=f"It's a new week! Assign weekly Juz for {group.name}.",
                data={
                    "groupId": group.id,
                    "action": ACTION_WEEKLY_RESET,
                    "weekId": week_id,
                },
            )
        ]
    )
    return any(r.ok for r in results)


def weekly_auto_reset(
    ctx: NotificationContext,
    now: Optional[datetime.datetime] = None,
    tz: str = DEFAULT_TIMEZONE,
) -> WeeklyResetSummary:
    """Remind admins of groups with no assignments yet for the new week.

    A failure for one group is logged and recorded in the summary; the other
    groups are still processed. Failing to list the groups propagates.
    """
    logger.info("Weekly auto-reset triggered")

    zone = get_zone(tz)
    if now is None:
        now = datetime.datetime.now(zone)
    elif now.tzinfo is not None:
        now = now.astimezone(zone)

    week_id = generate_week_id(now)
    summary = WeeklyResetSummary(week_id=week_id)

    try:
        group_docs = list(ctx.db.collection(GROUPS_COLLECTION).stream())
    except Exception as e:
        logger.error(f"Weekly auto-reset failed: {e}")
        raise

    for group_doc in group_docs:
        group_data = group_doc.to_dict()
        if not group_data:
            continue

        summary.processed += 1
        try:
            group = Group.from_dict(group_doc.id, group_data)
            if _remind_admin(ctx, group, week_id):
                summary.reminded.append(group.id)
        except Exception as e:
            logger.error(f"Weekly auto-reset failed for group {group_doc.id}: {e}")
            summary.failed.append(group_doc.id)

    logger.info(
        f"Weekly auto-reset completed for {summary.processed} groups "
        f"({len(summary.reminded)} reminded, {len(summary.failed)} failed)"
    )
    return summary
