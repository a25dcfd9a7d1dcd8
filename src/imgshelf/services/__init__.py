"""
Services module for imgshelf application.

This module contains all service classes that handle business logic:
- CredentialStore: Local username/password-digest store
- ImageStore: Per-user image collection persistence
- SessionTracker: Active-user pointer for one runtime session
- ImageReader: Upload validation and reading
- GallerySession: Controller tying the above together
"""

from .credentials import DEFAULT_USERNAME, CredentialStore
from .gallery import FileIssue, GallerySession, GallerySessionState, UploadResult
from .hashing import digest
from .image_reader import ImageReader, LoadedImage, get_image_reader
from .images import ImageStore
from .session import SessionTracker

__all__ = [
    "DEFAULT_USERNAME",
    "CredentialStore",
    "FileIssue",
    "GallerySession",
    "GallerySessionState",
    "ImageReader",
    "ImageStore",
    "LoadedImage",
    "SessionTracker",
    "UploadResult",
    "digest",
    "get_image_reader",
]
