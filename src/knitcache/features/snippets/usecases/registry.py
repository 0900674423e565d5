"""
Summary: Hold the ordered snippets of one document and index them by identifier.
Why: Reject duplicate identifiers before any ordering or execution happens.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace
from typing import final

from knitcache.features.document import Document
from knitcache.shared.errors import DuplicateSnippetError, SnippetNotFoundError
from knitcache.shared.snippet import Snippet, parse_dependencies


@final
class SnippetRegistry:
    """Ordered collection of snippets keyed by identifier."""

    _snippets: list[Snippet]
    _by_id: dict[str, Snippet]

    def __init__(self, snippets: Iterable[Snippet] = ()) -> None:
        self._snippets = []
        self._by_id = {}
        for snippet in snippets:
            _ = self.register(snippet)

    @classmethod
    def from_document(cls, document: Document) -> "SnippetRegistry":
        """Register every snippet of a parsed document in document order."""
        return cls(document.snippets)

    def register(self, snippet: Snippet) -> Snippet:
        """Add ``snippet`` at the end of the document order.

        The declared dependencies are normalised (single identifier or
        ordered list, repeats collapsed) before the snippet is stored.

        Returns:
            The snippet as stored.

        Raises:
            DuplicateSnippetError: If the identifier is already registered.
        """
        if snippet.id in self._by_id:
            raise DuplicateSnippetError(snippet.id)

        dependencies = parse_dependencies(snippet.dependencies)
        if dependencies != snippet.dependencies:
            snippet = replace(snippet, options=replace(snippet.options, dependson=dependencies))

        self._snippets.append(snippet)
        self._by_id[snippet.id] = snippet
        return snippet

    def all_snippets(self) -> list[Snippet]:
        """Return snippets in document order."""
        return list(self._snippets)

    def by_id(self, snippet_id: str) -> Snippet:
        """Return the snippet registered under ``snippet_id``.

        Raises:
            SnippetNotFoundError: If no snippet uses that identifier.
        """
        try:
            return self._by_id[snippet_id]
        except KeyError:
            raise SnippetNotFoundError(snippet_id) from None

    def __contains__(self, snippet_id: object) -> bool:
        return snippet_id in self._by_id

    def __iter__(self) -> Iterator[Snippet]:
        return iter(self._snippets)

    def __len__(self) -> int:
        return len(self._snippets)


__all__ = ["SnippetRegistry"]
