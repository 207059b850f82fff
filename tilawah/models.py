"""Data models for Firestore documents observed by the triggers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from tilawah.constants import (
    DEFAULT_MEMBER_NAME,
    JOIN_REQUEST_STATUSES,
    RECITATION_STATUSES,
    STATUS_COMPLETED,
    STATUS_PENDING,
    USER_DEVICE_TOKENS,
    USER_SEARCH_TOKENS,
)
from tilawah.errors import ValidationError


def _required_str(data: dict[str, Any], key: str, kind: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{kind} is missing required field '{key}'.")
    return value


def _optional_str(data: dict[str, Any], key: str, kind: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{kind} field '{key}' must be a string.")
    return value


def _optional_int(data: dict[str, Any], key: str, kind: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass but never a valid juz number
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{kind} field '{key}' must be an integer.")
    return value


def _str_list(data: dict[str, Any], key: str, kind: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{kind} field '{key}' must be a list.")
    return [item for item in value if isinstance(item, str)]


def _status(data: dict[str, Any], allowed: tuple[str, ...], kind: str) -> str:
    status = _required_str(data, "status", kind)
    if status not in allowed:
        raise ValidationError(f"{kind} has unknown status '{status}'.")
    return status


@dataclass
class User:
    """A user document in Firestore."""

    uid: str
    name: str = ""
    email: str = ""
    device_tokens: list[str] = field(default_factory=list)
    search_tokens: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    active_group_id: Optional[str] = None

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> User:
        """Build a user from its document data."""
        return cls(
            uid=data.get("uid") or doc_id,
            name=_optional_str(data, "name", "User") or "",
            email=_optional_str(data, "email", "User") or "",
            device_tokens=_str_list(data, USER_DEVICE_TOKENS, "User"),
            search_tokens=_str_list(data, USER_SEARCH_TOKENS, "User"),
            groups=_str_list(data, "groups", "User"),
            active_group_id=_optional_str(data, "activeGroupId", "User"),
        )


@dataclass
class GroupMember:
    """An entry in a group's member list."""

    uid: str
    name: str = ""
    email: str = ""
    joined_at: Any = None


@dataclass
class Group:
    """A group document in Firestore."""

    id: str
    name: str
    admin_uid: Optional[str] = None
    member_ids: list[str] = field(default_factory=list)
    members: list[GroupMember] = field(default_factory=list)
    is_public: bool = False
    invite_code: Optional[str] = None
    description: str = ""

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> Group:
        """Build a group from its document data."""
        raw_members = data.get("members") or []
        if not isinstance(raw_members, list):
            raise ValidationError("Group field 'members' must be a list.")

        members = []
        for entry in raw_members:
            # Older documents store bare uids instead of member maps.
            if isinstance(entry, str):
                members.append(GroupMember(uid=entry))
            elif isinstance(entry, dict) and entry.get("uid"):
                members.append(
                    GroupMember(
                        uid=entry["uid"],
                        name=entry.get("name", ""),
                        email=entry.get("email", ""),
                        joined_at=entry.get("joined_at"),
                    )
                )

        return cls(
            id=doc_id,
            name=_required_str(data, "name", "Group"),
            admin_uid=_optional_str(data, "admin_uid", "Group"),
            member_ids=_str_list(data, "member_ids", "Group"),
            members=members,
            is_public=bool(data.get("is_public", False)),
            invite_code=_optional_str(data, "invite_code", "Group"),
            description=_optional_str(data, "description", "Group") or "",
        )

    def has_members(self) -> bool:
        """Return True if at least one member is listed."""
        return bool(self.member_ids or self.members)

    def is_member(self, uid: str | None) -> bool:
        """Return True if the given uid is listed as a member."""
        if not uid:
            return False
        return uid in self.member_ids or any(m.uid == uid for m in self.members)


@dataclass
class Recitation:
    """A recitation assignment document in Firestore."""

    id: str
    group_id: str
    assigned_to: str
    assigned_by: str
    status: str
    assigned_to_name: Optional[str] = None
    assigned_by_name: Optional[str] = None
    group_name: Optional[str] = None
    surah: Optional[str] = None
    ayat_range: Optional[str] = None
    juz_number: Optional[int] = None
    week_id: Optional[str] = None
    assigned_date: Any = None
    deadline: Any = None

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> Recitation:
        """Build a recitation from its document data."""
        kind = "Recitation"
        return cls(
            id=doc_id,
            group_id=_required_str(data, "group_id", kind),
            assigned_to=_required_str(data, "assigned_to", kind),
            assigned_by=_required_str(data, "assigned_by", kind),
            status=_status(data, RECITATION_STATUSES, kind),
            assigned_to_name=_optional_str(data, "assigned_to_name", kind),
            assigned_by_name=_optional_str(data, "assigned_by_name", kind),
            group_name=_optional_str(data, "group_name", kind),
            surah=_optional_str(data, "surah", kind),
            ayat_range=_optional_str(data, "ayat_range", kind),
            juz_number=_optional_int(data, "juz_number", kind),
            week_id=_optional_str(data, "week_id", kind),
            assigned_date=data.get("assigned_date"),
            deadline=data.get("deadline"),
        )

    @property
    def member_name(self) -> str:
        """Return the assignee's display name."""
        return self.assigned_to_name or DEFAULT_MEMBER_NAME

    @property
    def unit_label(self) -> str:
        """Return the surah name, or the juz label when no surah is set."""
        return self.surah or f"Juz {self.juz_number}"

    @property
    def assignment_label(self) -> str:
        """Return the unit with its verse range, when one is set."""
        if self.ayat_range:
            return f"{self.unit_label} ({self.ayat_range})"
        return self.unit_label

    @property
    def is_completed(self) -> bool:
        """Return True if the assignee marked this recitation completed."""
        return self.status == STATUS_COMPLETED


@dataclass
class JoinRequest:
    """A join request document in Firestore."""

    id: str
    group_id: str
    user_id: str
    status: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    @classmethod
    def from_dict(cls, doc_id: str, data: dict[str, Any]) -> JoinRequest:
        """Build a join request from its document data."""
        kind = "Join request"
        return cls(
            id=doc_id,
            group_id=_required_str(data, "group_id", kind),
            user_id=_required_str(data, "user_id", kind),
            status=_status(data, JOIN_REQUEST_STATUSES, kind),
            user_name=_optional_str(data, "user_name", kind),
            user_email=_optional_str(data, "user_email", kind),
        )

    @property
    def requester_name(self) -> str:
        """Return the requester's name, falling back to the email."""
        return self.user_name or self.user_email or ""

    @property
    def is_pending(self) -> bool:
        """Return True if the request has not been resolved."""
        return self.status == STATUS_PENDING


@dataclass
class Announcement:
    """An announcement posted to a group."""

    id: str
    group_id: str
    author_uid: str
    author_name: str
    message: str
    is_hadith: bool = False
    pinned: bool = False
    created_at: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stored document shape."""
        return {
            "group_id": self.group_id,
            "author_uid": self.author_uid,
            "author_name": self.author_name,
            "message": self.message,
            "is_hadith": self.is_hadith,
            "pinned": self.pinned,
            "created_at": self.created_at,
        }
