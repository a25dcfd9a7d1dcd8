"""
Database initialization and key-value access for imgshelf application.

This module provides the DuckDB connection manager and the key-value store
every durable partition (credentials, image collections) is written through.
"""

import logging
from datetime import datetime
from pathlib import Path

import duckdb

from ..errors import StorageError
from .schema import get_schema_statements

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages DuckDB database connections and initialization.
    """

    def __init__(self, db_path: str):
        """
        Initialize DatabaseManager.

        Args:
            db_path: Path to the DuckDB database file, or ":memory:"
        """
        self.db_path = db_path
        self._connection: duckdb.DuckDBPyConnection | None = None

    def connect(self) -> duckdb.DuckDBPyConnection:
        """
        Get or create a database connection.

        Returns:
            DuckDB connection object

        Raises:
            StorageError: If the database file cannot be opened
        """
        if self._connection is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            try:
                self._connection = duckdb.connect(self.db_path)
            except duckdb.Error as e:
                raise StorageError(
                    f"Failed to open database at {self.db_path}: {e}",
                    code="database_open_failed",
                    details={"db_path": self.db_path},
                    original_exception=e,
                ) from e
            logger.info(f"Connected to DuckDB database at {self.db_path}")

        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("Closed DuckDB database connection")

    def initialize_schema(self) -> None:
        """
        Create the key-value table if it does not exist.

        Raises:
            StorageError: If schema creation fails
        """
        conn = self.connect()

        try:
            for statement in get_schema_statements():
                logger.debug(f"Executing SQL: {statement}")
                conn.execute(statement)
            logger.info("Database schema initialized successfully")
        except duckdb.Error as e:
            raise StorageError(
                f"Failed to initialize database schema: {e}",
                code="schema_init_failed",
                details={"db_path": self.db_path},
                original_exception=e,
            ) from e


class KeyValueStore:
    """
    String key to string value store on top of DuckDB.

    Each call runs on its own cursor so the store can be shared by the
    threads of a Streamlit server. Writes replace the whole value for a key.
    """

    def __init__(self, manager: DatabaseManager):
        self.manager = manager
        self.manager.initialize_schema()

    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if absent."""
        try:
            with self.manager.connect().cursor() as cursor:
                row = cursor.execute("SELECT value FROM kv_store WHERE key = ?", [key]).fetchone()
        except duckdb.Error as e:
            raise StorageError(
                f"Failed to read key '{key}': {e}", code="kv_read_failed", details={"key": key}, original_exception=e
            ) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        try:
            with self.manager.connect().cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT (key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    [key, value, datetime.now()],
                )
        except duckdb.Error as e:
            raise StorageError(
                f"Failed to write key '{key}': {e}", code="kv_write_failed", details={"key": key}, original_exception=e
            ) from e
        logger.debug(f"Stored {len(value)} characters under {key}")


def create_database(db_path: str) -> KeyValueStore:
    """
    Open the database at db_path and return a ready key-value store.

    Args:
        db_path: Path to the DuckDB database file

    Returns:
        KeyValueStore with its schema initialized
    """
    return KeyValueStore(DatabaseManager(db_path))
