"""Shared value objects and errors used across knitcache features."""

from .errors import (
    CycleError,
    DocumentParseError,
    DuplicateSnippetError,
    KnitcacheError,
    RegistryError,
    SnippetExecutionError,
    SnippetNotFoundError,
)
from .snippet import (
    ResultsFormat,
    Snippet,
    SnippetOptions,
    SnippetOutput,
    anonymous_label,
    parse_dependencies,
)

__all__ = [
    "CycleError",
    "DocumentParseError",
    "DuplicateSnippetError",
    "KnitcacheError",
    "RegistryError",
    "ResultsFormat",
    "Snippet",
    "SnippetExecutionError",
    "SnippetNotFoundError",
    "SnippetOptions",
    "SnippetOutput",
    "anonymous_label",
    "parse_dependencies",
]
