"""
Models module for imgshelf application.

This module contains data models and storage primitives:
- ImageRecord: One image in a user's collection
- FileBlob: A file offered for upload
- DatabaseManager / KeyValueStore: DuckDB backed key-value persistence
"""

from .blob import FileBlob
from .database import DatabaseManager, KeyValueStore, create_database
from .image import ALLOWED_TYPES, MAX_FILE_SIZE, ImageRecord

__all__ = [
    "ALLOWED_TYPES",
    "MAX_FILE_SIZE",
    "DatabaseManager",
    "FileBlob",
    "ImageRecord",
    "KeyValueStore",
    "create_database",
]
