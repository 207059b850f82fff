"""Device token lookup for push notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tilawah.constants import USERS_COLLECTION
from tilawah.errors import ValidationError
from tilawah.models import User

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def get_user_device_tokens(db: Client, uid: str | None) -> list[str]:
    """Return the push tokens registered for a user.

    A missing user, or a user without a token list, yields an empty list.
    """
    if not uid:
        return []

    user_doc = db.collection(USERS_COLLECTION).document(uid).get()
    if not user_doc.exists:
        return []

    try:
        user = User.from_dict(user_doc.id, user_doc.to_dict() or {})
    except ValidationError as e:
        logger.warning(f"Ignoring device tokens for user {uid}: {e.message}")
        return []
    return user.device_tokens
