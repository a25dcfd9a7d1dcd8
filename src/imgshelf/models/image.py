"""
Image record model for imgshelf application.

This module contains the ImageRecord dataclass that represents one image
in a user's collection, and its persisted document form.
"""

import base64
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

MAX_FILE_SIZE = 5 * 1024 * 1024
ALLOWED_TYPES = ("image/jpeg", "image/png", "image/gif")

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def as_utc(moment: datetime) -> datetime:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def to_epoch_millis(moment: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch."""
    return (as_utc(moment) - EPOCH) // timedelta(milliseconds=1)


def from_epoch_millis(millis: int) -> datetime:
    """Convert integer milliseconds since the Unix epoch to a UTC datetime."""
    return EPOCH + timedelta(milliseconds=millis)


def truncate_to_millis(moment: datetime) -> datetime:
    """
    Drop sub-millisecond precision, which the persisted form cannot hold.

    Timestamps are therefore only comparable at millisecond granularity: a
    record created right after a microsecond-precise reading may carry a
    slightly earlier value than that reading.
    """
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def build_data_url(mime_type: str, data: bytes) -> str:
    """Encode raw bytes as a self-describing base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


@dataclass(frozen=True)
class ImageRecord:
    """
    Represents one uploaded image.

    Records are created once at upload time and never modified; the only
    lifecycle event after creation is deletion from the collection.
    """

    id: str
    name: str
    payload: str
    uploaded_at: datetime

    @classmethod
    def create_new(cls, name: str, payload: str, uploaded_at: datetime | None = None) -> "ImageRecord":
        """
        Create a new ImageRecord with a generated ID.

        Args:
            name: Original filename of the image
            payload: Image content as a data URL (see build_data_url)
            uploaded_at: Upload time (defaults to now)

        Returns:
            New ImageRecord instance
        """
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            payload=payload,
            uploaded_at=truncate_to_millis(uploaded_at or datetime.now(UTC)),
        )

    def decode_payload(self) -> bytes:
        """Return the raw image bytes held in the payload."""
        return base64.b64decode(self.payload.split(",", 1)[1])

    def to_dict(self) -> dict[str, Any]:
        """
        Convert ImageRecord to its persisted document form.

        Returns:
            Dictionary with keys id, name, payload and uploadedAt (epoch ms)
        """
        return {
            "id": self.id,
            "name": self.name,
            "payload": self.payload,
            "uploadedAt": to_epoch_millis(self.uploaded_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImageRecord":
        """
        Create ImageRecord from its persisted document form.

        Raises:
            ValueError: If the document does not match the record schema
        """
        if not isinstance(data, dict):
            raise ValueError("Image record must be an object")

        for field in ("id", "name", "payload"):
            if not isinstance(data.get(field), str):
                raise ValueError(f"Image record field '{field}' must be a string")

        uploaded_at = data.get("uploadedAt")
        # bool is an int subclass
        if isinstance(uploaded_at, bool) or not isinstance(uploaded_at, int | float):
            raise ValueError("Image record field 'uploadedAt' must be a number")

        if not data["id"]:
            raise ValueError("Image record id must not be empty")
        if not data["payload"].startswith("data:"):
            raise ValueError("Image record payload must be a data URL")

        return cls(
            id=data["id"],
            name=data["name"],
            payload=data["payload"],
            uploaded_at=from_epoch_millis(int(uploaded_at)),
        )

    def get_display_name(self) -> str:
        """Get a user-friendly caption for the image."""
        name = self.name or "Untitled"
        return f"{name} · Uploaded {self.uploaded_at.astimezone().strftime('%Y-%m-%d %H:%M')}"
