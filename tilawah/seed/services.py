"""Service layer for loading the sample community into Firestore."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import auth as firebase_auth

from tilawah.constants import (
    ANNOUNCEMENTS_COLLECTION,
    FIRESTORE_BATCH_LIMIT,
    GROUPS_COLLECTION,
    RECITATIONS_COLLECTION,
    USER_DEVICE_TOKENS,
    USER_SEARCH_TOKENS,
    USERS_COLLECTION,
)
from tilawah.models import Announcement
from tilawah.utils import build_search_tokens

from . import fixtures

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from tilawah.context import NotificationContext

logger = logging.getLogger(__name__)

DEFAULT_SEED_PASSWORD = "AstU2024!"  # nosec B105
DEADLINE_DAYS = 7


class BatchProcessor:
    """Handles batched Firestore writes to respect the batch size limit."""

    def __init__(self, db: Client):
        self.db = db
        self.batch = db.batch()
        self.count = 0

    def set(self, ref: Any, data: dict[str, Any]) -> None:
        """Adds a set operation to the batch."""
        self.batch.set(ref, data)
        self.count += 1
        if self.count >= FIRESTORE_BATCH_LIMIT:
            self.commit()

    def commit(self) -> None:
        """Commits the current batch."""
        if self.count > 0:
            self.batch.commit()
            self.batch = self.db.batch()
            self.count = 0


class SeedService:
    """Writes the fixture community: auth accounts, users, group, work, news."""

    @staticmethod
    def run_seed(
        ctx: NotificationContext,
        now: Optional[datetime.datetime] = None,
        password: str = DEFAULT_SEED_PASSWORD,
    ) -> None:
        """Seed every fixture collection."""
        now = now or datetime.datetime.now(datetime.timezone.utc)
        names = {user["uid"]: user["name"] for user in fixtures.USERS}

        SeedService.seed_auth_users(ctx.auth, fixtures.USERS, password)
        SeedService.seed_users(ctx.db, fixtures.USERS, now)
        SeedService.seed_groups(ctx.db, fixtures.GROUPS, now)
        SeedService.seed_recitations(ctx.db, SeedService.build_recitations(now, names))
        SeedService.seed_announcements(
            ctx.db, SeedService.build_announcements(now, names)
        )
        logger.info("Sample data seeded.")

    @staticmethod
    def seed_auth_users(
        auth_client: Any, users: list[dict[str, Any]], password: str
    ) -> None:
        """Create auth accounts for fixture users that do not have one yet."""
        for user in users:
            try:
                auth_client.get_user(user["uid"])
            except firebase_auth.UserNotFoundError:
                auth_client.create_user(
                    uid=user["uid"],
                    email=user["email"],
                    password=password,
                    display_name=user["name"],
                    email_verified=True,
                )

    @staticmethod
    def seed_users(
        db: Client, users: list[dict[str, Any]], timestamp: datetime.datetime
    ) -> None:
        """Write user documents, including their search index."""
        batch = BatchProcessor(db)
        for user in users:
            ref = db.collection(USERS_COLLECTION).document(user["uid"])
            batch.set(
                ref,
                {
                    "uid": user["uid"],
                    "name": user["name"],
                    "email": user["email"],
                    "groups": [fixtures.COMMUNITY_ID],
                    USER_DEVICE_TOKENS: [],
                    USER_SEARCH_TOKENS: build_search_tokens(
                        user["name"], user["email"]
                    ),
                    "name_lower": user["name"].lower(),
                    "email_lower": user["email"].lower(),
                    "created_at": timestamp,
                    "activeGroupId": fixtures.COMMUNITY_ID,
                },
            )
        batch.commit()

    @staticmethod
    def build_members(
        member_uids: list[str], now: datetime.datetime
    ) -> list[dict[str, Any]]:
        """Build member entries joined an hour apart, most recent first."""
        profiles = {user["uid"]: user for user in fixtures.USERS}
        members = []
        for index, uid in enumerate(member_uids):
            profile = profiles.get(uid, {})
            members.append(
                {
                    "uid": uid,
                    "name": profile.get("name", ""),
                    "email": profile.get("email", ""),
                    "joined_at": now - datetime.timedelta(hours=index + 1),
                }
            )
        return members

    @staticmethod
    def seed_groups(
        db: Client, groups: list[dict[str, Any]], timestamp: datetime.datetime
    ) -> None:
        """Write group documents with their member lists."""
        batch = BatchProcessor(db)
        for group in groups:
            members = SeedService.build_members(group["member_uids"], timestamp)
            ref = db.collection(GROUPS_COLLECTION).document(group["id"])
            batch.set(
                ref,
                {
                    "name": group["name"],
                    "admin_uid": group["admin_uid"],
                    "invite_code": group["invite_code"],
                    "is_public": group["is_public"],
                    "description": group["description"],
                    "created_at": timestamp,
                    "member_ids": [member["uid"] for member in members],
                    "members": members,
                    "admin_votes": {},
                },
            )
        batch.commit()

    @staticmethod
    def build_recitations(
        now: datetime.datetime, names: dict[str, str]
    ) -> list[dict[str, Any]]:
        """Build the fixture assignments, all handed out by the group admin."""
        admin_uid = fixtures.GROUPS[0]["admin_uid"]
        recitations = []
        for rec_id, assignee, surah, ayat, juz, status, has_deadline in (
            fixtures.RECITATIONS
        ):
            recitation = {
                "id": rec_id,
                "group_id": fixtures.COMMUNITY_ID,
                "group_name": fixtures.COMMUNITY_NAME,
                "assigned_by": admin_uid,
                "assigned_by_name": names[admin_uid],
                "assigned_to": assignee,
                "assigned_to_name": names[assignee],
                "surah": surah,
                "ayat_range": ayat,
                "juz_number": juz,
                "status": status,
                "assigned_date": now,
            }
            if has_deadline:
                recitation["deadline"] = now + datetime.timedelta(days=DEADLINE_DAYS)
            recitations.append(recitation)
        return recitations

    @staticmethod
    def seed_recitations(db: Client, recitations: list[dict[str, Any]]) -> None:
        """Write recitation assignments."""
        batch = BatchProcessor(db)
        for recitation in recitations:
            ref = db.collection(RECITATIONS_COLLECTION).document(recitation["id"])
            batch.set(ref, dict(recitation))
        batch.commit()

    @staticmethod
    def build_announcements(
        now: datetime.datetime, names: dict[str, str]
    ) -> list[Announcement]:
        """Build the fixture announcements for the community group."""
        return [
            Announcement(
                id=item["id"],
                group_id=fixtures.COMMUNITY_ID,
                author_uid=item["author_uid"],
                author_name=names[item["author_uid"]],
                message=item["message"],
                is_hadith=item["is_hadith"],
                pinned=item["pinned"],
                created_at=now,
            )
            for item in fixtures.ANNOUNCEMENTS
        ]

    @staticmethod
    def seed_announcements(db: Client, announcements: list[Announcement]) -> None:
        """Write announcements into each group's subcollection."""
        for announcement in announcements:
            ref = (
                db.collection(GROUPS_COLLECTION)
                .document(announcement.group_id)
                .collection(ANNOUNCEMENTS_COLLECTION)
                .document(announcement.id)
            )
            ref.set(announcement.to_dict())
