"""Ports for the build feature."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from knitcache.shared.snippet import Snippet, SnippetOutput


class ExecutionEngine(Protocol):
    """Evaluate snippet source inside a session that persists across calls."""

    def execute(self, snippet: Snippet, dependency_outputs: Mapping[str, SnippetOutput]) -> SnippetOutput:
        """Run ``snippet`` and return its rendered output.

        ``dependency_outputs`` maps each declared dependency that produced
        output in this build (executed or reused from cache) to that output.
        Any exception is treated as a failure; its text is the diagnostic.
        Session state the snippet leaves behind may be saved in
        ``SnippetOutput.state``.
        """

        ...

    def restore(self, snippet: Snippet, output: SnippetOutput) -> None:
        """Bring the session up to date with a snippet reused from cache.

        Called instead of ``execute`` on a cache hit, with the output the
        snippet produced when it last ran. Raising makes the builder run the
        snippet again.
        """

        ...
