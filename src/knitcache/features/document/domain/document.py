"""
Summary: Parsed document model made of ordered prose and snippet blocks.
Why: Preserve document order for rendering independently of execution order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from knitcache.shared.snippet import Snippet


@dataclass(slots=True, frozen=True)
class ProseBlock:
    """Verbatim text between snippets."""

    text: str
    line_number: int


@dataclass(slots=True, frozen=True)
class SnippetBlock:
    """Placement of a snippet within the document."""

    snippet: Snippet


Block = ProseBlock | SnippetBlock


@dataclass(slots=True, frozen=True)
class Document:
    """A literate document split into blocks."""

    blocks: tuple[Block, ...]
    path: Path | None = None

    @property
    def snippets(self) -> list[Snippet]:
        """Snippets in document order."""

        return [block.snippet for block in self.blocks if isinstance(block, SnippetBlock)]

    @property
    def key(self) -> str:
        """Namespace used for cache rows; unsaved documents share one namespace."""

        return self.key_for(self.path)

    @staticmethod
    def key_for(path: Path | None) -> str:
        return str(path.resolve()) if path is not None else "<memory>"


__all__ = ["Block", "Document", "ProseBlock", "SnippetBlock"]
