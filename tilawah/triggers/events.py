"""Event types delivered to document triggers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Optional

from tilawah.errors import ValidationError

if TYPE_CHECKING:
    from tilawah.context import NotificationContext
    from tilawah.notifications import SendResult

logger = logging.getLogger(__name__)


@dataclass
class DocumentEvent:
    """A document creation: the new document's id and data."""

    document_id: str
    data: Optional[dict[str, Any]]
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class DocumentChange:
    """A document update: the data before and after the write."""

    document_id: str
    before: Optional[dict[str, Any]]
    after: Optional[dict[str, Any]]
    params: dict[str, str] = field(default_factory=dict)


Handler = Callable[..., "list[SendResult]"]


def document_trigger(func: Handler) -> Handler:
    """Turn malformed documents into a logged no-op.

    Missing referents are handled inside each trigger. A document that fails
    validation is logged and skipped so the event source does not redeliver it.
    """

    @wraps(func)
    def decorated_function(ctx: NotificationContext, event: Any) -> list[SendResult]:
        try:
            return func(ctx, event)
        except ValidationError as e:
            logger.error(
                f"Skipping {func.__name__} for document {event.document_id}: "
                f"{e.message}"
            )
            return []

    return decorated_function
