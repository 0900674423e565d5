"""
Summary: Render a built document as Markdown in document order.
Why: Execution order may differ from document order, so output is placed by position, not by run.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final

from knitcache.features.document import Document, ProseBlock
from knitcache.shared.snippet import ResultsFormat, Snippet, SnippetOutput

_BACKTICK_RUN: Final = re.compile(r"`+")


def _fence(text: str, info: str = "") -> str:
    """Wrap ``text`` in a fence longer than any backtick run inside it."""

    longest = max((len(run) for run in _BACKTICK_RUN.findall(text)), default=0)
    marker = "`" * max(3, longest + 1)
    return f"{marker}{info}\n{text}\n{marker}"


def _format_dimension(value: float) -> str:
    return f"{value:g}"


def _render_output(snippet: Snippet, output: SnippetOutput) -> list[str]:
    parts: list[str] = []
    text = output.text.rstrip("\n")
    if text.strip() and snippet.options.results is not ResultsFormat.HIDE:
        if snippet.options.results is ResultsFormat.ASIS:
            parts.append(text)
        else:
            parts.append(_fence(text))

    width = _format_dimension(snippet.options.fig_width)
    height = _format_dimension(snippet.options.fig_height)
    for index, figure in enumerate(output.figures, start=1):
        parts.append(f"![{snippet.id}-{index}]({figure}){{width={width}in height={height}in}}")
    return parts


def render_document(document: Document, outputs: Mapping[str, SnippetOutput]) -> str:
    """Return the Markdown rendering of ``document``.

    Args:
        document: Parsed document; its block order drives the layout.
        outputs: Output per snippet identifier; snippets without one render
            only their source (when echoed).
    """

    parts: list[str] = []
    for block in document.blocks:
        if isinstance(block, ProseBlock):
            parts.append(block.text)
            continue

        snippet = block.snippet
        if snippet.options.echo:
            parts.append(_fence(snippet.source, snippet.engine))
        output = outputs.get(snippet.id)
        if output is not None:
            parts.extend(_render_output(snippet, output))

    rendered = "\n".join(parts)
    return rendered if rendered.endswith("\n") else rendered + "\n"


__all__ = ["render_document"]
