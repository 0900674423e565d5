"""Database manager for the snippet cache."""

import sqlite3
from pathlib import Path
from typing import Any, final

from knitcache.config.paths import default_cache_db_path
from knitcache.platform.filesystem import ensure_parent_directory
from knitcache.platform.logging import logger


@final
class DatabaseManager:
    """Own the SQLite connection backing the snippet cache."""

    db_path: str | Path
    conn: sqlite3.Connection | None

    def __init__(self, db_path: Path | str | None = None) -> None:
        """Initialize database manager.

        Args:
            db_path: Path to database file. If None, use the default path in the
                data directory. If ":memory:", use an in-memory database.
        """
        if db_path == ":memory:":
            self.db_path = ":memory:"
        elif db_path is None:
            self.db_path = default_cache_db_path()
        else:
            self.db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self.conn = None

    def connect(self) -> None:
        """Connect to database and initialize schema."""
        try:
            if isinstance(self.db_path, Path):
                try:
                    _ = ensure_parent_directory(self.db_path)
                except OSError as e:
                    raise PermissionError(f"Unable to open database at {self.db_path}") from e

            try:
                self.conn = sqlite3.connect(
                    self.db_path,
                    timeout=30.0,
                    isolation_level="IMMEDIATE",
                )
            except sqlite3.OperationalError as e:
                if "unable to open database file" in str(e):
                    raise PermissionError(f"Unable to open database at {self.db_path}") from e
                raise

            _ = self.conn.execute("PRAGMA synchronous = NORMAL")
            _ = self.conn.execute("PRAGMA journal_mode = WAL")
            _ = self.conn.execute("PRAGMA busy_timeout = 30000")

            self._init_schema()

        except sqlite3.Error as e:
            logger.error("Failed to connect to database: %s", e)
            raise

    def _init_schema(self) -> None:
        """Initialize database schema."""
        if self.conn is None:
            return

        try:
            cursor = self.conn.cursor()
            _ = cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name = 'snippet_cache'"
            )
            if cursor.fetchone() is not None:
                logger.debug("Tables already exist, skipping schema initialization")
                return

            # One row per cached snippet, namespaced by the document it came from.
            _ = cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS snippet_cache (
                    document_key TEXT NOT NULL,
                    snippet_id TEXT NOT NULL,
                    fingerprint TEXT NOT NULL,
                    output TEXT NOT NULL,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (document_key, snippet_id)
                )
                """
            )
            _ = cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_snippet_cache_document ON snippet_cache(document_key)"
            )
            self.conn.commit()
            logger.debug("Initialized snippet cache schema at %s", self.db_path)

        except sqlite3.Error as e:
            logger.error("Failed to initialize schema: %s", e)
            self.conn.rollback()
            raise

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            try:
                self.conn.close()
                self.conn = None
            except sqlite3.Error as e:
                logger.error("Failed to close database connection: %s", e)

    def __enter__(self) -> "DatabaseManager":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any | None,
    ) -> None:
        self.close()
