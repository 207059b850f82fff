"""Process-wide clients shared by every trigger invocation."""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore, messaging

from tilawah.constants import DEFAULT_DISPATCH_MAX_WORKERS
from tilawah.notifications.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

_context: Optional[NotificationContext] = None
_context_lock = threading.Lock()


@dataclass
class NotificationContext:
    """Clients a trigger needs: Firestore, messaging and auth.

    Built once per process by ``get_context`` and passed to each handler.
    Tests construct one directly with fakes.
    """

    db: Any
    messaging: Any
    auth: Any = None
    max_workers: int = DEFAULT_DISPATCH_MAX_WORKERS

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return NotificationDispatcher(self.messaging, max_workers=self.max_workers)


def _load_credentials() -> tuple[Any, Optional[str]]:
    """Resolve credentials from env, a local file, or the default chain."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    return cred, project_id


def initialize_firebase() -> None:
    """Initialize the Firebase Admin SDK unless it already is."""
    if firebase_admin._apps:
        return

    cred, project_id = _load_credentials()
    if not cred:
        return

    options = {"projectId": project_id} if project_id else None
    try:
        firebase_admin.initialize_app(cred, options)
    except ValueError:
        # This can happen if the app is already initialized, which is fine.
        logger.info("Firebase app already initialized.")


def get_context(max_workers: int = DEFAULT_DISPATCH_MAX_WORKERS) -> NotificationContext:
    """Return the process-wide context, creating it on first use."""
    global _context
    with _context_lock:
        if _context is None:
            initialize_firebase()
            _context = NotificationContext(
                db=firestore.client(),
                messaging=messaging,
                auth=auth,
                max_workers=max_workers,
            )
        return _context


def set_context(context: Optional[NotificationContext]) -> None:
    """Replace the process-wide context (used by tests and the app factory)."""
    global _context
    with _context_lock:
        _context = context
