"""Image store: one persisted, ordered image collection per username."""

import json

from ..logging_config import get_logger
from ..models.database import KeyValueStore
from ..models.image import ImageRecord
from ..models.schema import images_key_for

logger = get_logger(__name__)


class ImageStore:
    """
    Serializes per-user collections to and from the key-value store.

    The store never mutates a collection; ordering (most recent first) is
    owned by the caller and is preserved exactly.
    """

    def __init__(self, kv_store: KeyValueStore) -> None:
        self.kv_store = kv_store

    @staticmethod
    def partition_key(username: str) -> str:
        """Get the key a user's collection is stored under."""
        return images_key_for(username)

    def load_for(self, username: str) -> list[ImageRecord]:
        """
        Load a user's collection.

        Missing or malformed documents yield an empty collection.

        Args:
            username: Owner of the collection

        Returns:
            list: ImageRecords in stored order
        """
        raw = self.kv_store.get(self.partition_key(username))
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("image_store_corrupt", username=username, reason="invalid_json", error=str(e))
            return []

        if not isinstance(data, list):
            logger.warning("image_store_corrupt", username=username, reason="not_a_list")
            return []

        try:
            return [ImageRecord.from_dict(item) for item in data]
        except (ValueError, OverflowError) as e:
            logger.warning("image_store_corrupt", username=username, reason="invalid_record", error=str(e))
            return []

    def save_for(self, username: str, records: list[ImageRecord]) -> None:
        """Persist a user's full collection, replacing previous contents."""
        self.kv_store.set(self.partition_key(username), json.dumps([record.to_dict() for record in records]))
        logger.debug("image_store_saved", username=username, image_count=len(records))

