"""Ports for the cache feature."""

from __future__ import annotations

from typing import Protocol


class CacheRepositoryPort(Protocol):
    """Row-level persistence for cached snippet outputs."""

    def get_entry(self, document_key: str, snippet_id: str) -> tuple[str, str, str, str | None] | None:
        """Return ``(snippet_id, fingerprint, output_json, updated_at)`` or None."""

        ...

    def upsert_entry(
        self,
        document_key: str,
        snippet_id: str,
        fingerprint: str,
        output_json: str,
    ) -> bool:
        """Insert or overwrite an entry; returns True on success."""

        ...

    def delete_entry(self, document_key: str, snippet_id: str) -> bool:
        """Remove an entry; returns True when one existed."""

        ...

    def delete_document(self, document_key: str) -> int:
        """Remove every entry of a document and return how many were removed."""

        ...

    def list_entries(self, document_key: str) -> list[tuple[str, str, str, str | None]]:
        """Return all rows of a document."""

        ...
