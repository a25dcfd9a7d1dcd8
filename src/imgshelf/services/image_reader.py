"""Upload validation and reading for imgshelf application."""

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ..errors import ReadError, ValidationError
from ..logging_config import get_logger
from ..models.blob import FileBlob
from ..models.image import ALLOWED_TYPES, MAX_FILE_SIZE, build_data_url

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadedImage:
    """Content of an accepted file, ready to become an ImageRecord."""

    name: str
    payload: str


class ImageReader:
    """Service for validating upload candidates and reading them into data URLs."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE, allowed_types: tuple[str, ...] = ALLOWED_TYPES) -> None:
        self.max_file_size = max_file_size
        self.allowed_types = allowed_types

    def is_supported_type(self, mime_type: str) -> bool:
        """Check whether the declared MIME type is accepted."""
        return mime_type in self.allowed_types

    def validate(self, blob: FileBlob) -> None:
        """
        Check declared type and size of an upload candidate.

        Args:
            blob: File offered for upload

        Raises:
            ValidationError: If the type is not accepted or the file is too large
        """
        if not self.is_supported_type(blob.mime_type):
            raise ValidationError(
                f"Unsupported file type for '{blob.name}': {blob.mime_type}",
                code="unsupported_file_type",
                user_message=f"Skipping {blob.name}: unsupported file type.",
                details={"filename": blob.name, "mime_type": blob.mime_type},
            )

        if blob.size > self.max_file_size:
            max_size_mb = self.max_file_size / (1024 * 1024)
            raise ValidationError(
                f"File '{blob.name}' is too large ({blob.size} bytes). Maximum size: {self.max_file_size} bytes",
                code="file_too_large",
                user_message=f"Skipping {blob.name}: file too large (max {max_size_mb:.0f}MB).",
                details={"filename": blob.name, "file_size": blob.size, "max_size": self.max_file_size},
            )

        logger.debug("file_validation_success", filename=blob.name, size=blob.size, mime_type=blob.mime_type)

    def read(self, blob: FileBlob) -> LoadedImage:
        """
        Read an accepted file and encode it as a data URL.

        Args:
            blob: File that passed validate()

        Returns:
            LoadedImage with the original name and inline payload

        Raises:
            ReadError: If the content cannot be read or is not a decodable image
        """
        try:
            data = blob.read()
        except Exception as e:
            raise ReadError(
                f"Failed to read '{blob.name}': {e}",
                code="file_read_failed",
                details={"filename": blob.name},
                original_exception=e,
            ) from e

        if not data:
            raise ReadError(f"File '{blob.name}' is empty", code="file_empty", details={"filename": blob.name})

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.verify()
                detected_format = image.format
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
            raise ReadError(
                f"Failed to decode '{blob.name}': {e}",
                code="image_decode_failed",
                details={"filename": blob.name},
                original_exception=e,
            ) from e

        logger.debug("file_read_success", filename=blob.name, size=len(data), detected_format=detected_format)
        return LoadedImage(name=blob.name, payload=build_data_url(blob.mime_type, data))


_image_reader: ImageReader | None = None


def get_image_reader() -> ImageReader:
    """Get the shared image reader instance."""
    global _image_reader
    if _image_reader is None:
        _image_reader = ImageReader()
    return _image_reader
