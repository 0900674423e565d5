"""Where: src/knitcache/shared/errors.py
What: Exception hierarchy raised while parsing, ordering, and building documents.
Why: Give the CLI one base class to catch while keeping failures specific.
"""

from __future__ import annotations

from collections.abc import Iterable


class KnitcacheError(Exception):
    """Base class for all build failures surfaced to callers."""


class DocumentParseError(KnitcacheError):
    """Raised when a document cannot be split into prose and snippets."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"{message}{location}")
        self.line_number: int | None = line_number


class RegistryError(KnitcacheError):
    """Raised when the snippet registry rejects a registration."""


class DuplicateSnippetError(RegistryError):
    """Raised when two snippets share the same explicit name."""

    def __init__(self, snippet_id: str) -> None:
        super().__init__(f"Duplicate snippet identifier: '{snippet_id}'")
        self.snippet_id: str = snippet_id


class SnippetNotFoundError(KnitcacheError):
    """Raised when an identifier does not resolve to a registered snippet."""

    def __init__(self, snippet_id: str, *, referenced_by: str | None = None) -> None:
        if referenced_by is None:
            message = f"Unknown snippet identifier: '{snippet_id}'"
        else:
            message = f"Snippet '{referenced_by}' depends on unknown snippet '{snippet_id}'"
        super().__init__(message)
        self.snippet_id: str = snippet_id
        self.referenced_by: str | None = referenced_by


class CycleError(KnitcacheError):
    """Raised when declared dependencies form one or more cycles."""

    def __init__(self, members: Iterable[str]) -> None:
        self.members: tuple[str, ...] = tuple(members)
        super().__init__("Dependency cycle between snippets: " + ", ".join(self.members))


class SnippetExecutionError(KnitcacheError):
    """Raised when the execution engine fails on a snippet; halts the build."""

    def __init__(self, snippet_id: str, diagnostic: str) -> None:
        super().__init__(f"Snippet '{snippet_id}' failed: {diagnostic}")
        self.snippet_id: str = snippet_id
        self.diagnostic: str = diagnostic


__all__ = [
    "CycleError",
    "DocumentParseError",
    "DuplicateSnippetError",
    "KnitcacheError",
    "RegistryError",
    "SnippetExecutionError",
    "SnippetNotFoundError",
]
