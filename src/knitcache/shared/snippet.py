"""Where: src/knitcache/shared/snippet.py
What: Value objects describing snippets, their options, and their outputs.
Why: Share one vocabulary between the parser, the resolver, the cache and the renderer.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Final

ANONYMOUS_LABEL_PREFIX: Final[str] = "unnamed-chunk-"
FIG_WIDTH_DEFAULT: Final[float] = 7.0
FIG_HEIGHT_DEFAULT: Final[float] = 7.0


class ResultsFormat(StrEnum):
    """How a snippet's textual output is placed into the rendered document."""

    MARKUP = "markup"
    ASIS = "asis"
    HIDE = "hide"

    @staticmethod
    def from_user_input(value: str) -> "ResultsFormat":
        """Translate a raw option value into the matching format."""

        normalized = value.strip().lower()
        for fmt in ResultsFormat:
            if fmt.value == normalized:
                return fmt
        valid = ", ".join(f.value for f in ResultsFormat)
        raise ValueError(f"Unsupported results format '{value}'. Valid options: {valid}")


@dataclass(slots=True, frozen=True)
class SnippetOptions:
    """Options declared in a snippet header.

    Attributes:
        evaluate: Run the snippet (``eval``); skipped snippets produce no output.
        echo: Show the snippet source in the rendered document.
        cache: Persist the output and reuse it while the source is unchanged.
        dependson: Ordered, de-duplicated dependency identifiers.
        fig_width: Figure width hint forwarded to the engine.
        fig_height: Figure height hint forwarded to the engine.
        results: Placement of textual output.
        extra: Unrecognised options in declaration order.
    """

    evaluate: bool = True
    echo: bool = True
    cache: bool = False
    dependson: tuple[str, ...] = ()
    fig_width: float = FIG_WIDTH_DEFAULT
    fig_height: float = FIG_HEIGHT_DEFAULT
    results: ResultsFormat = ResultsFormat.MARKUP
    extra: tuple[tuple[str, Any], ...] = ()


@dataclass(slots=True, frozen=True)
class Snippet:
    """An executable unit extracted from a document."""

    id: str
    source: str
    engine: str = "python"
    options: SnippetOptions = field(default_factory=SnippetOptions)
    position: int = 0
    named: bool = True
    line_number: int | None = None

    @property
    def dependencies(self) -> tuple[str, ...]:
        return self.options.dependson


def anonymous_label(position: int) -> str:
    """Return the positional identifier used for unnamed snippets."""

    return f"{ANONYMOUS_LABEL_PREFIX}{position}"


def parse_dependencies(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalise a ``dependson`` declaration into ordered unique identifiers.

    A single identifier and an ordered list are both accepted; blank entries
    are dropped and repeats collapse onto their first occurrence.
    """

    if value is None:
        return ()
    items = [value] if isinstance(value, str) else list(value)
    dependencies: list[str] = []
    for item in items:
        name = item.strip()
        if name and name not in dependencies:
            dependencies.append(name)
    return tuple(dependencies)


@dataclass(slots=True, frozen=True)
class SnippetOutput:
    """Rendered output produced by an execution engine.

    Attributes:
        text: Textual output placed according to the ``results`` option.
        figures: Figure paths linked after the text.
        state: Opaque session state the engine saved alongside the output;
            handed back to the engine when the output is reused from cache.
            Never rendered.
    """

    text: str = ""
    figures: tuple[str, ...] = ()
    state: bytes = b""

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"text": self.text, "figures": list(self.figures)}
        if self.state:
            payload["state"] = base64.b64encode(self.state).decode("ascii")
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SnippetOutput":
        """Rebuild an output from its serialised form.

        Raises:
            ValueError: When the payload does not have the expected shape.
        """

        text = payload.get("text", "")
        figures = payload.get("figures", [])
        state = payload.get("state", "")
        if not isinstance(text, str):
            raise ValueError("output text must be a string")
        if not isinstance(figures, list) or not all(isinstance(f, str) for f in figures):
            raise ValueError("output figures must be a list of strings")
        if not isinstance(state, str):
            raise ValueError("output state must be a base64 string")
        try:
            decoded = base64.b64decode(state.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise ValueError(f"output state is not valid base64: {e}") from e
        return cls(text=text, figures=tuple(figures), state=decoded)


__all__ = [
    "ANONYMOUS_LABEL_PREFIX",
    "FIG_HEIGHT_DEFAULT",
    "FIG_WIDTH_DEFAULT",
    "ResultsFormat",
    "Snippet",
    "SnippetOptions",
    "SnippetOutput",
    "anonymous_label",
    "parse_dependencies",
]
