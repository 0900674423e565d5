"""
Summary: Parse chunk headers such as ``{python label, eval=FALSE, dependson=c("a")}``.
Why: Accept both R-style and Python-style literals so existing documents compile unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Final

from knitcache.platform.logging import logger
from knitcache.shared.errors import DocumentParseError
from knitcache.shared.snippet import ResultsFormat, SnippetOptions, parse_dependencies

_OPENING_BRACKETS: Final[dict[str, str]] = {"(": ")", "[": "]"}
_TRUE_WORDS: Final[frozenset[str]] = frozenset({"TRUE", "True", "true", "T"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"FALSE", "False", "false", "F"})
_NULL_WORDS: Final[frozenset[str]] = frozenset({"NULL", "None", "null"})
_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_LIST_CALL_RE: Final[re.Pattern[str]] = re.compile(r"^c\((.*)\)$", re.DOTALL)

# Option names accepted in headers, mapped to ``SnippetOptions`` fields.
_OPTION_ALIASES: Final[dict[str, str]] = {
    "eval": "evaluate",
    "echo": "echo",
    "cache": "cache",
    "dependson": "dependson",
    "fig.width": "fig_width",
    "fig_width": "fig_width",
    "fig.height": "fig_height",
    "fig_height": "fig_height",
    "results": "results",
}


@dataclass(slots=True, frozen=True)
class ChunkHeader:
    """Parsed pieces of a chunk header."""

    engine: str
    label: str | None
    raw_options: tuple[tuple[str, Any], ...]


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split ``text`` on ``separator`` outside quotes and brackets."""

    parts: list[str] = []
    current: list[str] = []
    stack: list[str] = []
    quote: str | None = None
    escaped = False

    for char in text:
        if quote is not None:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue

        if char in {'"', "'"}:
            quote = char
        elif char in _OPENING_BRACKETS:
            stack.append(_OPENING_BRACKETS[char])
        elif stack and char == stack[-1]:
            _ = stack.pop()
        elif char == separator and not stack:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)

    if quote is not None or stack:
        raise DocumentParseError(f"Unbalanced quotes or brackets in chunk header: {text!r}")

    parts.append("".join(current))
    return parts


def parse_value(raw: str) -> Any:
    """Convert an option value literal into a Python value."""

    value = raw.strip()
    if not value:
        raise DocumentParseError("Empty option value in chunk header")

    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        inner = value[1:-1]
        return inner.replace("\\" + value[0], value[0]).replace("\\\\", "\\")
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    if value in _NULL_WORDS:
        return None
    if _NUMBER_RE.match(value):
        number = float(value)
        return int(number) if number.is_integer() and "." not in value and "e" not in value.lower() else number

    list_match = _LIST_CALL_RE.match(value)
    if list_match is not None:
        inner = list_match.group(1)
    elif value[0] in "[(" and value[-1] == _OPENING_BRACKETS[value[0]]:
        inner = value[1:-1]
    else:
        return value

    if not inner.strip():
        return []
    return [parse_value(item) for item in split_top_level(inner)]


def parse_chunk_header(header: str, *, default_engine: str = "python") -> ChunkHeader:
    """Parse the text between the braces of a chunk fence.

    The first comma-separated token holds the engine and an optional label.
    A bare token directly after it is also accepted as the label, and
    ``label="..."`` works anywhere.
    """

    tokens = [token.strip() for token in split_top_level(header)]
    head = tokens[0].split(None, 1) if tokens and tokens[0] else []
    engine = head[0] if head else default_engine
    label: str | None = head[1].strip() if len(head) > 1 else None

    raw_options: list[tuple[str, Any]] = []
    for index, token in enumerate(tokens[1:]):
        if not token:
            continue
        if "=" not in token:
            if index == 0 and label is None:
                label = token
                continue
            raise DocumentParseError(f"Expected key=value option, got {token!r}")

        key, raw_value = token.split("=", 1)
        key = key.strip()
        value = parse_value(raw_value)
        if key == "label":
            if not isinstance(value, str):
                raise DocumentParseError("Chunk label must be a string")
            label = value
            continue
        raw_options.append((key, value))

    if label is not None:
        label = label.strip().strip("'\"")
        if not label:
            label = None

    return ChunkHeader(engine=engine, label=label, raw_options=tuple(raw_options))


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise DocumentParseError(f"Option '{key}' must be TRUE or FALSE, got {value!r}")


def _as_dependencies(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    items = value if isinstance(value, list) else [value]
    for item in items:
        if not isinstance(item, str) or not item.strip():
            raise DocumentParseError(f"Option 'dependson' expects snippet labels, got {item!r}")
    return parse_dependencies(items)


def _as_dimension(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise DocumentParseError(f"Option '{key}' must be a positive number, got {value!r}")
    return float(value)


def build_options(
    raw_options: tuple[tuple[str, Any], ...] | Mapping[str, Any],
    *,
    defaults: SnippetOptions | None = None,
) -> SnippetOptions:
    """Fold raw header options into a ``SnippetOptions`` over ``defaults``."""

    items = raw_options.items() if isinstance(raw_options, Mapping) else raw_options
    options = defaults or SnippetOptions()
    updates: dict[str, Any] = {}
    extra: list[tuple[str, Any]] = list(options.extra)

    for key, value in items:
        target = _OPTION_ALIASES.get(key)
        if target is None:
            logger.warning("Unknown chunk option '%s' kept without effect", key)
            extra.append((key, value))
        elif target in {"evaluate", "echo", "cache"}:
            updates[target] = _as_bool(key, value)
        elif target == "dependson":
            updates[target] = _as_dependencies(value)
        elif target in {"fig_width", "fig_height"}:
            updates[target] = _as_dimension(key, value)
        else:
            if not isinstance(value, str):
                raise DocumentParseError(f"Option 'results' must be a string, got {value!r}")
            try:
                updates[target] = ResultsFormat.from_user_input(value)
            except ValueError as e:
                raise DocumentParseError(str(e)) from e

    return replace(options, extra=tuple(extra), **updates)


__all__ = [
    "ChunkHeader",
    "build_options",
    "parse_chunk_header",
    "parse_value",
    "split_top_level",
]
