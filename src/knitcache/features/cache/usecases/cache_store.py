"""src/knitcache/features/cache/usecases/cache_store.py
What: Decide per snippet whether cached output can be reused, and persist new output.
Why: Keep the reuse rule (literal source fingerprint only) in one place.

The rule is intentionally weak: a snippet is recomputed only when its own
source text changes. Edits to upstream snippets, or nondeterministic results
such as random draws, do not invalidate an entry; cached output is reused
until the source changes or the entry is cleared by hand.
"""

from __future__ import annotations

import json
from typing import final

from knitcache.platform.logging import logger
from knitcache.shared.snippet import Snippet, SnippetOutput

from ..domain.fingerprint import DEFAULT_ALGORITHM, fingerprint
from ..domain.models import CacheEntry
from .ports import CacheRepositoryPort


@final
class CacheStore:
    """Document-scoped view over persisted snippet outputs."""

    _repository: CacheRepositoryPort
    document_key: str
    algorithm: str

    def __init__(
        self,
        repository: CacheRepositoryPort,
        document_key: str,
        *,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> None:
        self._repository = repository
        self.document_key = document_key
        self.algorithm = algorithm

    def fingerprint_of(self, snippet: Snippet) -> str:
        return fingerprint(snippet.source, self.algorithm)

    def lookup(self, snippet_id: str) -> CacheEntry | None:
        """Return the stored entry, or None on a miss.

        Unreadable rows count as a miss so the snippet is recomputed.
        """
        row = self._repository.get_entry(self.document_key, snippet_id)
        if row is None:
            return None
        return self._decode(row)

    def should_recompute(self, snippet: Snippet) -> bool:
        """True when no entry exists or its fingerprint differs from the source's."""
        entry = self.lookup(snippet.id)
        if entry is None:
            return True
        return entry.fingerprint != self.fingerprint_of(snippet)

    def commit(self, snippet_id: str, fingerprint_value: str, output: SnippetOutput) -> bool:
        """Store ``output`` for ``snippet_id``, replacing any previous entry.

        Returns:
            True when the entry was persisted. Failures are logged; the build
            keeps the freshly computed output either way.
        """
        payload = json.dumps(output.to_dict(), ensure_ascii=False)
        stored = self._repository.upsert_entry(self.document_key, snippet_id, fingerprint_value, payload)
        if not stored:
            logger.warning("Cache entry for '%s' was not persisted", snippet_id)
        return stored

    def invalidate(self, snippet_id: str) -> bool:
        """Drop one entry; returns True when it existed."""
        removed = self._repository.delete_entry(self.document_key, snippet_id)
        if removed:
            logger.info("Invalidated cached output of '%s'", snippet_id)
        return removed

    def invalidate_all(self) -> int:
        """Drop every entry of the document; returns the number removed."""
        removed = self._repository.delete_document(self.document_key)
        logger.info("Cleared %d cached snippet(s) for %s", removed, self.document_key)
        return removed

    def entries(self) -> list[CacheEntry]:
        """Return readable entries of the document ordered by identifier."""
        entries: list[CacheEntry] = []
        for row in self._repository.list_entries(self.document_key):
            entry = self._decode(row)
            if entry is not None:
                entries.append(entry)
        return entries

    def _decode(self, row: tuple[str, str, str, str | None]) -> CacheEntry | None:
        snippet_id, fingerprint_value, output_json, updated_at = row
        try:
            payload = json.loads(output_json)
            if not isinstance(payload, dict):
                raise ValueError("stored output is not an object")
            output = SnippetOutput.from_dict(payload)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring corrupt cache entry for '%s': %s", snippet_id, e)
            return None
        return CacheEntry(
            snippet_id=snippet_id,
            fingerprint=fingerprint_value,
            output=output,
            updated_at=updated_at,
        )


__all__ = ["CacheStore"]
