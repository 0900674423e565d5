"""
Summary: Split a literate document into prose blocks and executable snippets.
Why: Give the registry an ordered snippet sequence while keeping prose for rendering.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from knitcache.platform.logging import logger
from knitcache.shared.errors import DocumentParseError
from knitcache.shared.snippet import Snippet, SnippetOptions, anonymous_label

from ..domain.document import Block, Document, ProseBlock, SnippetBlock
from ..domain.options import build_options, parse_chunk_header

_CHUNK_OPEN_RE: Final[re.Pattern[str]] = re.compile(r"^(?P<indent>[ \t]*)(?P<fence>`{3,})\s*\{(?P<header>.*)\}\s*$")
_PLAIN_FENCE_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*(?P<fence>`{3,}|~{3,})")


def _is_closing_fence(line: str, fence: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= len(fence) and set(stripped) == {fence[0]}


def parse_document(
    text: str,
    *,
    path: Path | None = None,
    defaults: SnippetOptions | None = None,
    default_engine: str = "python",
) -> Document:
    """Parse ``text`` into a :class:`Document`.

    Args:
        text: Full document source.
        path: Origin of the text; used as the cache namespace.
        defaults: Options applied before each chunk's own header options.
        default_engine: Engine for headers that omit one.

    Raises:
        DocumentParseError: On unterminated chunks or malformed headers.
    """

    lines = text.splitlines()
    blocks: list[Block] = []
    prose: list[str] = []
    prose_start = 1
    position = 0
    index = 0

    def flush_prose(next_line: int) -> None:
        nonlocal prose, prose_start
        if prose:
            blocks.append(ProseBlock(text="\n".join(prose), line_number=prose_start))
        prose = []
        prose_start = next_line

    while index < len(lines):
        line = lines[index]
        opening = _CHUNK_OPEN_RE.match(line)

        if opening is None:
            plain = _PLAIN_FENCE_RE.match(line)
            if plain is not None:
                # Non-executable fenced block: copy through untouched.
                fence = plain.group("fence")
                prose.append(line)
                index += 1
                while index < len(lines) and not _is_closing_fence(lines[index], fence):
                    prose.append(lines[index])
                    index += 1
                if index < len(lines):
                    prose.append(lines[index])
                    index += 1
                continue
            prose.append(line)
            index += 1
            continue

        opening_line = index + 1
        flush_prose(opening_line)
        fence = opening.group("fence")
        indent = opening.group("indent")
        try:
            header = parse_chunk_header(opening.group("header"), default_engine=default_engine)
            options = build_options(header.raw_options, defaults=defaults)
        except DocumentParseError as e:
            raise DocumentParseError(str(e), line_number=opening_line) from e

        body: list[str] = []
        index += 1
        while index < len(lines) and not _is_closing_fence(lines[index], fence):
            body_line = lines[index]
            body.append(body_line[len(indent):] if body_line.startswith(indent) else body_line)
            index += 1
        if index >= len(lines):
            raise DocumentParseError("Unterminated snippet", line_number=opening_line)
        index += 1

        position += 1
        snippet = Snippet(
            id=header.label or anonymous_label(position),
            source="\n".join(body),
            engine=header.engine,
            options=options,
            position=position,
            named=header.label is not None,
            line_number=opening_line,
        )
        blocks.append(SnippetBlock(snippet=snippet))
        prose_start = index + 1

    flush_prose(index + 1)
    logger.debug("Parsed %d snippet(s) from %s", position, path or "<memory>")
    return Document(blocks=tuple(blocks), path=path)


def read_document(
    path: Path,
    *,
    defaults: SnippetOptions | None = None,
    default_engine: str = "python",
) -> Document:
    """Read and parse a document from disk."""

    text = path.read_text(encoding="utf-8")
    return parse_document(text, path=path, defaults=defaults, default_engine=default_engine)


__all__ = ["parse_document", "read_document"]
