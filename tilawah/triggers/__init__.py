"""Document triggers and the scheduled weekly job.

Each trigger takes a ``NotificationContext`` and an event. ``TRIGGERS`` maps
a (collection, event type) pair to its handler for the hosting adapter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from tilawah.constants import (
    GROUPS_COLLECTION,
    JOIN_REQUESTS_COLLECTION,
    RECITATIONS_COLLECTION,
)
from tilawah.errors import NotFoundError

from .events import DocumentChange, DocumentEvent, document_trigger
from .group import on_admin_change
from .join_request import on_join_request_created, on_join_request_updated
from .recitation import (
    completed_juz_numbers,
    is_week_complete,
    on_recitation_created,
    on_recitation_status_update,
    quran_completion_request,
)
from .weekly import (
    WeeklyResetSummary,
    generate_week_id,
    get_week_start,
    weekly_auto_reset,
)

if TYPE_CHECKING:
    from tilawah.context import NotificationContext
    from tilawah.notifications import SendResult

CREATE = "create"
UPDATE = "update"

TRIGGERS = {
    (RECITATIONS_COLLECTION, CREATE): on_recitation_created,
    (RECITATIONS_COLLECTION, UPDATE): on_recitation_status_update,
    (GROUPS_COLLECTION, UPDATE): on_admin_change,
    (JOIN_REQUESTS_COLLECTION, CREATE): on_join_request_created,
    (JOIN_REQUESTS_COLLECTION, UPDATE): on_join_request_updated,
}


def route_event(
    ctx: NotificationContext,
    collection: str,
    event_type: str,
    document_id: str,
    before: Optional[dict[str, Any]] = None,
    after: Optional[dict[str, Any]] = None,
) -> list[SendResult]:
    """Deliver a raw document event to its trigger."""
    handler = TRIGGERS.get((collection, event_type))
    if handler is None:
        raise NotFoundError(f"No trigger for {event_type} on {collection}.")

    params = {"collection": collection}
    if event_type == CREATE:
        return handler(ctx, DocumentEvent(document_id, after, params))
    return handler(ctx, DocumentChange(document_id, before, after, params))


__all__ = [
    "CREATE",
    "TRIGGERS",
    "UPDATE",
    "DocumentChange",
    "DocumentEvent",
    "WeeklyResetSummary",
    "completed_juz_numbers",
    "document_trigger",
    "generate_week_id",
    "get_week_start",
    "is_week_complete",
    "on_admin_change",
    "on_join_request_created",
    "on_join_request_updated",
    "on_recitation_created",
    "on_recitation_status_update",
    "quran_completion_request",
    "route_event",
    "weekly_auto_reset",
]
