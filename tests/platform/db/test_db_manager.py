"""Test database functionality."""

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from knitcache.platform.db.db_manager import DatabaseManager


@pytest.fixture
def db_manager() -> Generator[DatabaseManager, None, None]:
    """Create a database manager with in-memory database.

    Yields:
        DatabaseManager: Database manager instance.
    """
    manager = DatabaseManager(":memory:")
    manager.connect()
    yield manager
    manager.close()


def test_schema_is_created(db_manager: DatabaseManager) -> None:
    """Connecting creates the snippet cache table and its index."""
    conn = db_manager.conn
    assert conn is not None
    cursor = conn.cursor()
    _ = cursor.execute("SELECT name FROM sqlite_master WHERE type IN ('table', 'index') ORDER BY name")
    names = {row[0] for row in cursor.fetchall()}

    assert "snippet_cache" in names
    assert "idx_snippet_cache_document" in names


def test_primary_key_is_document_and_snippet(db_manager: DatabaseManager) -> None:
    """The same snippet identifier may exist once per document."""
    conn = db_manager.conn
    assert conn is not None
    insert = "INSERT INTO snippet_cache (document_key, snippet_id, fingerprint, output) VALUES (?, ?, ?, ?)"
    _ = conn.execute(insert, ("doc-a", "s", "f", "{}"))
    _ = conn.execute(insert, ("doc-b", "s", "f", "{}"))

    with pytest.raises(sqlite3.IntegrityError):
        _ = conn.execute(insert, ("doc-a", "s", "f", "{}"))


def test_file_database_creates_parent_directory(tmp_path: Path) -> None:
    """A file database path gets its parent directory created on connect."""
    db_path = tmp_path / "nested" / "cache.db"

    with DatabaseManager(db_path) as manager:
        assert manager.conn is not None

    assert db_path.exists()
    assert manager.conn is None


def test_reconnect_keeps_existing_schema(tmp_path: Path) -> None:
    """Reopening a database reuses its table and rows."""
    db_path = tmp_path / "cache.db"
    with DatabaseManager(db_path) as manager:
        assert manager.conn is not None
        _ = manager.conn.execute(
            "INSERT INTO snippet_cache (document_key, snippet_id, fingerprint, output) VALUES ('d', 's', 'f', '{}')"
        )
        manager.conn.commit()

    with DatabaseManager(db_path) as manager:
        assert manager.conn is not None
        count = manager.conn.execute("SELECT COUNT(*) FROM snippet_cache").fetchone()[0]

    assert count == 1


def test_unwritable_location_raises_permission_error(tmp_path: Path, mocker: MockerFixture) -> None:
    """OS errors while preparing the directory surface as PermissionError."""
    _ = mocker.patch(
        "knitcache.platform.db.db_manager.ensure_parent_directory",
        side_effect=OSError("read-only"),
    )

    with pytest.raises(PermissionError):
        DatabaseManager(tmp_path / "cache.db").connect()


def test_default_path_uses_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an explicit path the database lives in the data directory."""
    monkeypatch.setenv("KNITCACHE_DATA_DIR", str(tmp_path))

    manager = DatabaseManager()

    assert manager.db_path == (tmp_path / "knitcache.db").resolve()
