"""
Storage schema definitions for imgshelf application.

All durable state lives in a single key-value table. Each concern owns a
partition identified by a versioned key, so a future change of document
shape can move to a new key without colliding with old data.
"""

from typing import List

KV_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP NOT NULL
);
"""

ALL_SCHEMA_STATEMENTS = [KV_TABLE_SCHEMA]

# Partition keys
USERS_KEY = "gallery_users_v1"
IMAGES_KEY_PREFIX = "gallery_images_v1_"
SESSION_KEY = "gallery_session_v1"


def get_schema_statements() -> List[str]:
    """
    Get all database schema creation statements.

    Returns:
        List of SQL statements to create tables
    """
    return ALL_SCHEMA_STATEMENTS


def images_key_for(username: str) -> str:
    """Get the partition key holding one user's image collection."""
    return f"{IMAGES_KEY_PREFIX}{username}"
