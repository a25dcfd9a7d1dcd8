"""Credential store: username to password digest, persisted in the key-value store."""

import json

from ..logging_config import get_logger, log_user_action
from ..models.database import KeyValueStore
from ..models.schema import USERS_KEY
from .hashing import digest, is_digest

logger = get_logger(__name__)

DEFAULT_USERNAME = "demo"
DEFAULT_PASSWORD = "demo123"


class CredentialStore:
    """Persists the full username -> digest mapping as one JSON document."""

    def __init__(self, kv_store: KeyValueStore) -> None:
        self.kv_store = kv_store

    def load(self) -> dict[str, str]:
        """
        Load the credential mapping.

        A missing or malformed document is treated as an empty mapping;
        corruption is logged, not raised.

        Returns:
            dict: username -> digest
        """
        raw = self.kv_store.get(USERS_KEY)
        if raw is None:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("credential_store_corrupt", reason="invalid_json", error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning("credential_store_corrupt", reason="not_an_object", found=type(data).__name__)
            return {}

        for username, value in data.items():
            if not username or not is_digest(value):
                logger.warning("credential_store_corrupt", reason="invalid_entry", username=username)
                return {}

        return data

    def save(self, users: dict[str, str]) -> None:
        """Persist the full mapping, replacing previous contents (last writer wins)."""
        self.kv_store.set(USERS_KEY, json.dumps(users))
        logger.debug("credential_store_saved", user_count=len(users))

    def exists(self, username: str) -> bool:
        """Check whether an account exists for username."""
        return username in self.load()

    def ensure_default_account(self) -> bool:
        """
        Create the bootstrap account if it does not exist yet.

        Returns:
            bool: True if the account was created by this call
        """
        users = self.load()
        if DEFAULT_USERNAME in users:
            return False

        users[DEFAULT_USERNAME] = digest(DEFAULT_PASSWORD)
        self.save(users)
        log_user_action(DEFAULT_USERNAME, "default_account_created")
        return True
