"""src/knitcache/features/build/usecases/build_types.py
Where: Build feature usecases layer.
What: Shared enums and dataclasses for the document build flow.
Why: Keep the builder lean by centralising type definitions.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from knitcache.features.document import Document
from knitcache.shared.snippet import Snippet, SnippetOutput


class BuildEvent(StrEnum):
    """Structured event identifiers for build logs."""

    DOCUMENT_START = "build.document.start"
    DOCUMENT_COMPLETE = "build.document.complete"
    DOCUMENT_ERROR = "build.document.error"
    SNIPPET_EXECUTED = "build.snippet.executed"
    SNIPPET_CACHED = "build.snippet.cached"
    SNIPPET_SKIPPED = "build.snippet.skipped"
    SNIPPET_ERROR = "build.snippet.error"
    ARTIFACT_WRITE = "build.artifact.write"


class SnippetStatus(StrEnum):
    """What happened (or would happen) to a snippet during a build."""

    EXECUTED = "executed"
    CACHED = "cached"
    SKIPPED = "skipped"


@dataclass(slots=True, frozen=True)
class SnippetResult:
    """Outcome of one snippet in a completed build."""

    snippet: Snippet
    status: SnippetStatus
    output: SnippetOutput | None = None
    duration_ms: float = 0.0
    committed: bool = False

    @property
    def snippet_id(self) -> str:
        return self.snippet.id


@dataclass(slots=True, frozen=True)
class PlanItem:
    """Predicted handling of a snippet, computed without executing anything."""

    snippet: Snippet
    status: SnippetStatus
    reason: str


@dataclass(slots=True)
class BuildReport:
    """Result of building a document."""

    document: Document
    results: list[SnippetResult]
    rendered: str
    duration_seconds: float = 0.0
    output_path: Path | None = None

    def count(self, status: SnippetStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    def result_for(self, snippet_id: str) -> SnippetResult | None:
        return next((r for r in self.results if r.snippet_id == snippet_id), None)


@dataclass(slots=True)
class BuildLogContext:
    """Mutable bookkeeping for a build run."""

    document: str
    total_snippets: int
    build_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    start_time: float = field(default_factory=time.perf_counter)
    executed: int = 0
    cached: int = 0
    skipped: int = 0

    def record(self, status: SnippetStatus) -> None:
        if status is SnippetStatus.EXECUTED:
            self.executed += 1
        elif status is SnippetStatus.CACHED:
            self.cached += 1
        else:
            self.skipped += 1

    def duration_seconds(self) -> float:
        return time.perf_counter() - self.start_time

    def summary_extra(self) -> dict[str, Any]:
        """Return a dictionary suitable for structured logging extras."""

        return {
            "build_id": self.build_id,
            "document": self.document,
            "total_snippets": self.total_snippets,
            "executed": self.executed,
            "cached": self.cached,
            "skipped": self.skipped,
            "duration_seconds": round(self.duration_seconds(), 4),
        }


__all__ = [
    "BuildEvent",
    "BuildLogContext",
    "BuildReport",
    "PlanItem",
    "SnippetResult",
    "SnippetStatus",
]
