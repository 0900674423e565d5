"""Data access object for the snippet_cache table."""

import sqlite3
import threading
from typing import final

from knitcache.platform.logging import logger

CacheRow = tuple[str, str, str, str | None]
"""(snippet_id, fingerprint, output_json, updated_at)"""


@final
class SnippetCacheDAO:
    """Data access object for snippet_cache table."""

    conn: sqlite3.Connection
    _lock: threading.Lock

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize DAO.

        Args:
            conn: Database connection.
        """
        self.conn = conn
        self._lock = threading.Lock()

    def get_entry(self, document_key: str, snippet_id: str) -> CacheRow | None:
        """Fetch the stored row for a snippet.

        Args:
            document_key: Namespace of the owning document.
            snippet_id: Snippet identifier.

        Returns:
            The row if found. Database errors are logged and reported as a miss.
        """
        try:
            with self._lock:
                cursor = self.conn.cursor()
                _ = cursor.execute(
                    """
                    SELECT snippet_id, fingerprint, output, updated_at
                    FROM snippet_cache
                    WHERE document_key = ? AND snippet_id = ?
                    """,
                    (document_key, snippet_id),
                )
                result = cursor.fetchone()
            if result is None:
                return None
            return (str(result[0]), str(result[1]), str(result[2]), result[3])
        except sqlite3.Error as e:
            logger.warning("Failed to read cache entry '%s': %s", snippet_id, e)
            return None

    def upsert_entry(
        self,
        document_key: str,
        snippet_id: str,
        fingerprint: str,
        output_json: str,
    ) -> bool:
        """Insert or overwrite the cached output of a snippet.

        Returns:
            True if successful, False otherwise.
        """
        try:
            with self._lock:
                cursor = self.conn.cursor()
                _ = cursor.execute(
                    """
                    INSERT INTO snippet_cache (document_key, snippet_id, fingerprint, output)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(document_key, snippet_id) DO UPDATE SET
                        fingerprint = excluded.fingerprint,
                        output = excluded.output,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (document_key, snippet_id, fingerprint, output_json),
                )
                self.conn.commit()
            return True
        except sqlite3.Error as e:
            logger.error("Failed to store cache entry '%s': %s", snippet_id, e)
            with self._lock:
                self.conn.rollback()
            return False

    def delete_entry(self, document_key: str, snippet_id: str) -> bool:
        """Remove one cached snippet.

        Returns:
            True when a row was deleted.
        """
        try:
            with self._lock:
                cursor = self.conn.cursor()
                _ = cursor.execute(
                    "DELETE FROM snippet_cache WHERE document_key = ? AND snippet_id = ?",
                    (document_key, snippet_id),
                )
                deleted = cursor.rowcount
                self.conn.commit()
            return deleted > 0
        except sqlite3.Error as e:
            logger.error("Failed to delete cache entry '%s': %s", snippet_id, e)
            with self._lock:
                self.conn.rollback()
            return False

    def delete_document(self, document_key: str) -> int:
        """Remove every cached snippet of a document.

        Returns:
            Number of deleted rows; 0 on failure.
        """
        try:
            with self._lock:
                cursor = self.conn.cursor()
                _ = cursor.execute(
                    "DELETE FROM snippet_cache WHERE document_key = ?",
                    (document_key,),
                )
                deleted = cursor.rowcount
                self.conn.commit()
            return max(deleted, 0)
        except sqlite3.Error as e:
            logger.error("Failed to clear cache for %s: %s", document_key, e)
            with self._lock:
                self.conn.rollback()
            return 0

    def list_entries(self, document_key: str) -> list[CacheRow]:
        """List the cached rows of a document ordered by snippet identifier."""
        try:
            with self._lock:
                cursor = self.conn.cursor()
                _ = cursor.execute(
                    """
                    SELECT snippet_id, fingerprint, output, updated_at
                    FROM snippet_cache
                    WHERE document_key = ?
                    ORDER BY snippet_id
                    """,
                    (document_key,),
                )
                rows = cursor.fetchall()
            return [(str(r[0]), str(r[1]), str(r[2]), r[3]) for r in rows]
        except sqlite3.Error as e:
            logger.warning("Failed to list cache entries for %s: %s", document_key, e)
            return []


__all__ = ["CacheRow", "SnippetCacheDAO"]
