"""Session tracker: the "who is logged in" pointer for one runtime session."""

import json
from collections.abc import MutableMapping
from typing import Any

from ..logging_config import get_logger
from ..models.schema import SESSION_KEY

logger = get_logger(__name__)


class SessionTracker:
    """
    Records the active username in a per-session mapping.

    In the Streamlit app the mapping is ``st.session_state``, so the pointer
    lives exactly as long as the browser session and is never shared with
    other tabs. Tests and the CLI use a plain dict.
    """

    def __init__(self, storage: MutableMapping[str, Any] | None = None) -> None:
        self.storage: MutableMapping[str, Any] = storage if storage is not None else {}

    def persist(self, username: str) -> None:
        """Record username as the active user."""
        self.storage[SESSION_KEY] = json.dumps({"user": username})

    def clear(self) -> None:
        """Forget the active user, if any."""
        if SESSION_KEY in self.storage:
            del self.storage[SESSION_KEY]

    def restore(self) -> str | None:
        """Return the recorded username, or None if absent or malformed."""
        raw = self.storage.get(SESSION_KEY)
        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            logger.warning("session_pointer_malformed", reason="invalid_json")
            return None

        user = data.get("user") if isinstance(data, dict) else None
        if not isinstance(user, str) or not user:
            logger.warning("session_pointer_malformed", reason="missing_user")
            return None

        return user

    def has_pointer(self) -> bool:
        """Check whether any pointer (valid or not) is recorded."""
        return SESSION_KEY in self.storage
