"""Upload candidates handed to the gallery by file pickers and the CLI."""

import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(filename: str) -> str:
    """Guess the declared MIME type of a file from its name."""
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_MIME_TYPE


@dataclass
class FileBlob:
    """
    A file offered for upload.

    Type and size are declared up front so a file can be rejected without
    reading it; the content is only pulled through the loader once the file
    has been accepted.
    """

    name: str
    mime_type: str
    size: int
    loader: Callable[[], bytes] = field(repr=False)

    def read(self) -> bytes:
        """Read the full file content."""
        return self.loader()

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: str | None = None) -> "FileBlob":
        """Wrap in-memory bytes."""
        return cls(
            name=name,
            mime_type=mime_type or guess_mime_type(name),
            size=len(data),
            loader=lambda: data,
        )

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> "FileBlob":
        """
        Wrap a file on disk.

        Args:
            path: Location of the file
            mime_type: Declared type (guessed from the extension when omitted)

        Raises:
            OSError: If the file cannot be stat'ed
        """
        file_path = Path(path)
        return cls(
            name=file_path.name,
            mime_type=mime_type or guess_mime_type(file_path.name),
            size=file_path.stat().st_size,
            loader=file_path.read_bytes,
        )

    @classmethod
    def from_uploaded_file(cls, uploaded_file: Any) -> "FileBlob":
        """Wrap a Streamlit UploadedFile (anything with name, type, size and getvalue())."""
        return cls(
            name=uploaded_file.name,
            mime_type=uploaded_file.type or guess_mime_type(uploaded_file.name),
            size=uploaded_file.size,
            loader=uploaded_file.getvalue,
        )
