"""Database module for Shortify.

This module handles SQLite storage of short code mappings and provides
dependency injection for FastAPI endpoints. The ``UNIQUE`` constraint on
``short_code`` is what finally guarantees that two requests never store the
same code.
"""

import sqlite3
import logging
import threading
from datetime import datetime
from typing import Optional

from .config import settings
from .exceptions import DuplicateKeyError
from ..models.url import UrlMapping
from ..utils.clock import utcnow, ensure_utc

logger = logging.getLogger(__name__)


def _to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    value = ensure_utc(value)
    return value.isoformat() if value else None


class Database:
    """Database class for managing the SQLite connection and operations."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory database.
        """
        if db_path:
            self.db_path = db_path
        else:
            self.db_path = settings.database_url
        self._connection: Optional[sqlite3.Connection] = None
        # One connection is shared by the request threads; every use holds this lock.
        self._lock = threading.RLock()

    def _get_connection(self) -> sqlite3.Connection:
        """Create or return the database connection.

        Returns:
            SQLite connection.
        """
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path, check_same_thread=False
            )
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def init_db(self) -> None:
        """Initialize database tables."""
        create_tables_sql = """
        CREATE TABLE IF NOT EXISTS urls (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            short_code TEXT NOT NULL UNIQUE,
            original_url TEXT NOT NULL,
            created_at TEXT NOT NULL,
            expires_at TEXT,
            access_count INTEGER NOT NULL DEFAULT 0
        );
        CREATE TABLE IF NOT EXISTS counters (
            name TEXT PRIMARY KEY,
            value INTEGER NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_created_at ON urls(created_at);
        """
        with self._lock:
            conn = self._get_connection()
            try:
                conn.executescript(create_tables_sql)
                conn.commit()
                logger.info("Database initialized successfully")
            except sqlite3.Error as e:
                logger.error(f"Database initialization failed: {e}")
                raise

    def execute(
        self, query: str, params: tuple = (), fetch: bool = False
    ) -> Optional[list[dict]]:
        """Execute a SQL query.

        Args:
            query: SQL query string.
            params: Query parameters.
            fetch: Whether to fetch results.

        Returns:
            Query results if fetch=True, None otherwise.
        """
        with self._lock:
            conn = self._get_connection()
            try:
                cursor = conn.cursor()
                cursor.execute(query, params)
                if fetch:
                    results = cursor.fetchall()
                    return [dict(row) for row in results]
                conn.commit()
                return None
            except sqlite3.Error as e:
                conn.rollback()
                logger.error(f"Query execution failed: {e}")
                raise

    def save(
        self,
        short_code: str,
        original_url: str,
        expires_at: Optional[datetime] = None,
    ) -> UrlMapping:
        """Persist a new mapping.

        The row is inserted and committed as one unit; nothing is stored when
        the insert fails.

        Args:
            short_code: The short URL code.
            original_url: The original long URL.
            expires_at: Optional expiration timestamp.

        Returns:
            The stored mapping with its ``id`` and ``created_at``.

        Raises:
            DuplicateKeyError: A mapping with this short code already exists.
        """
        query = """
        INSERT INTO urls (short_code, original_url, created_at, expires_at)
        VALUES (?, ?, ?, ?)
        """
        params = (
            short_code,
            original_url,
            _to_db_timestamp(utcnow()),
            _to_db_timestamp(expires_at),
        )
        with self._lock:
            conn = self._get_connection()
            try:
                cursor = conn.cursor()
                cursor.execute(query, params)
                row_id = cursor.lastrowid
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if "UNIQUE" in str(e):
                    raise DuplicateKeyError(short_code) from e
                raise
            except sqlite3.Error as e:
                conn.rollback()
                logger.error(f"Insert failed for {short_code}: {e}")
                raise
            logger.debug(f"Stored short code {short_code} with id {row_id}")
            return self.find_by_id(row_id)

    def find_by_code(self, short_code: str) -> Optional[UrlMapping]:
        """Get a mapping by short code.

        Args:
            short_code: The short URL code.

        Returns:
            Mapping or None if not found.
        """
        query = "SELECT * FROM urls WHERE short_code = ?"
        results = self.execute(query, (short_code,), fetch=True)
        return UrlMapping(**results[0]) if results else None

    def find_by_id(self, url_id: int) -> Optional[UrlMapping]:
        """Get a mapping by ID.

        Args:
            url_id: The mapping ID.

        Returns:
            Mapping or None if not found.
        """
        query = "SELECT * FROM urls WHERE id = ?"
        results = self.execute(query, (url_id,), fetch=True)
        return UrlMapping(**results[0]) if results else None

    def exists_by_code(self, short_code: str) -> bool:
        """Check if a short code is already stored.

        Args:
            short_code: The short URL code.

        Returns:
            True if exists, False otherwise.
        """
        query = "SELECT 1 FROM urls WHERE short_code = ?"
        results = self.execute(query, (short_code,), fetch=True)
        return bool(results)

    def increment_access_count(self, short_code: str) -> bool:
        """Increment the access count for a mapping.

        Failures are logged and reported, not raised.

        Args:
            short_code: The short URL code.

        Returns:
            True if a row was updated.
        """
        query = "UPDATE urls SET access_count = access_count + 1 WHERE short_code = ?"
        with self._lock:
            conn = self._get_connection()
            try:
                cursor = conn.cursor()
                cursor.execute(query, (short_code,))
                conn.commit()
                return cursor.rowcount > 0
            except sqlite3.Error as e:
                conn.rollback()
                logger.warning(f"Access count update failed for {short_code}: {e}")
                return False

    def increment_counter(self, name: str) -> int:
        """Atomically increment a named counter and return its new value.

        Args:
            name: Counter name.

        Returns:
            The incremented value, starting at 1.
        """
        with self._lock:
            conn = self._get_connection()
            try:
                cursor = conn.cursor()
                cursor.execute(
                    "INSERT OR IGNORE INTO counters (name, value) VALUES (?, 0)",
                    (name,),
                )
                cursor.execute(
                    "UPDATE counters SET value = value + 1 WHERE name = ?", (name,)
                )
                cursor.execute("SELECT value FROM counters WHERE name = ?", (name,))
                value = cursor.fetchone()["value"]
                conn.commit()
                return value
            except sqlite3.Error:
                conn.rollback()
                raise

    def count(self) -> int:
        """Count stored mappings.

        Returns:
            Number of rows in the urls table.
        """
        results = self.execute("SELECT COUNT(*) AS total FROM urls", fetch=True)
        return results[0]["total"] if results else 0


# Global database instance
db = Database()


def get_db() -> Database:
    """Get database instance for dependency injection.

    Returns:
        Database instance.
    """
    return db


def get_test_db() -> Database:
    """Get a fresh in-memory database for testing.

    Returns:
        In-memory Database instance.
    """
    test_db = Database(":memory:")
    test_db.init_db()
    return test_db
