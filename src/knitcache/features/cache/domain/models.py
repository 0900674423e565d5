"""Data structures describing persisted snippet outputs."""

from __future__ import annotations

from dataclasses import dataclass

from knitcache.shared.snippet import SnippetOutput


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """Output of a snippet's last successful execution and its source fingerprint."""

    snippet_id: str
    fingerprint: str
    output: SnippetOutput
    updated_at: str | None = None
