"""Rich console handler rendering structured build events.

Where: platform/logging/handlers.py
What: Style build/snippet log records with icons, counters and compact paths.
Why: Keep the console readable while the file log keeps the raw records.
"""

from __future__ import annotations

import logging
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class BuildRichHandler(RichHandler):
    """Rich handler that renders ``build_event`` records and compacts paths."""

    _BUILD_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "build.document.start": ("🚀", "cyan"),
        "build.document.complete": ("✅", "green"),
        "build.document.error": ("❌", "red"),
        "build.snippet.executed": ("⚙️", "blue"),
        "build.snippet.cached": ("♻️", "green"),
        "build.snippet.skipped": ("↪️", "yellow"),
        "build.snippet.error": ("⛔", "red"),
        "build.artifact.write": ("📦", "magenta"),
    }
    _SNIPPET_PREFIXES: ClassVar[dict[str, str]] = {
        "build.snippet.executed": "Executed ",
        "build.snippet.cached": "Reused cached ",
        "build.snippet.skipped": "Skipped ",
        "build.snippet.error": "Failed ",
    }
    _PATH_SEGMENT_LIMIT: ClassVar[int] = 4

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = True
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    def _format_path(self, path: str, base: str | None = None) -> Text:
        """Format a path with colored separators and compact rendering.

        Args:
            path: Absolute or relative path string to format.
            base: Optional base path used to relativize ``path`` when possible.

        Returns:
            Text: Formatted path with colored separators and ellipsis truncation.
        """
        pure_path = self._to_pure_path(path)
        base_path = self._to_pure_path(base) if base else None

        display_path: PurePath = pure_path
        if base_path is not None and self._is_relative_to(pure_path, base_path):
            relative_path = pure_path.relative_to(base_path)
            if str(relative_path) not in {"", "."}:
                display_path = relative_path

        separator = "\\" if isinstance(display_path, PureWindowsPath) else "/"
        anchor = display_path.anchor
        body_parts = [part for part in display_path.parts if part and part != anchor]

        truncated = len(body_parts) > self._PATH_SEGMENT_LIMIT
        if truncated:
            body_parts = body_parts[-self._PATH_SEGMENT_LIMIT:]

        display_string = ""
        if anchor and not truncated:
            display_string = anchor.rstrip("\\/") + separator if anchor.rstrip("\\/") else separator
        if truncated:
            display_string += "…" + separator
        display_string += separator.join(body_parts)

        return self._style_path_string(display_string or ".", separator)

    @staticmethod
    def _to_pure_path(raw_path: str) -> PurePath:
        """Return a platform-aware ``PurePath`` for the given raw string."""

        if "\\" in raw_path:
            return PureWindowsPath(raw_path)
        return PurePosixPath(raw_path)

    @staticmethod
    def _is_relative_to(path: PurePath, other: PurePath) -> bool:
        try:
            _ = path.relative_to(other)
            return True
        except ValueError:
            return False

    @staticmethod
    def _style_path_string(path_string: str, separator: str) -> Text:
        """Apply Rich styling to the rendered path string."""

        text = Text()
        separator_chars = {separator}
        if separator == "\\":
            separator_chars.add("/")

        for char in path_string:
            if char in separator_chars or char == "…":
                _ = text.append(char, style=Style(color="magenta"))
            else:
                _ = text.append(char, style=Style(color="white"))
        return text

    def _render_document_body(self, record: logging.LogRecord, event: str, body: Text) -> None:
        document = getattr(record, "document", None)
        if event == "build.document.start":
            _ = body.append("Build start")
            total = getattr(record, "total_snippets", None)
            if isinstance(total, int):
                _ = body.append(f" [snippets={total}]")
        elif event == "build.document.complete":
            _ = body.append("Build complete")
            metrics: list[str] = []
            for key in ("executed", "cached", "skipped"):
                value = getattr(record, key, None)
                if isinstance(value, int):
                    metrics.append(f"{key}={value}")
            duration = getattr(record, "duration_seconds", None)
            if isinstance(duration, (int, float)):
                metrics.append(f"duration={duration:.2f}s")
            if metrics:
                _ = body.append(" [" + ", ".join(metrics) + "]")
        else:
            _ = body.append("Build failed")
            error = getattr(record, "error_message", None)
            if error:
                _ = body.append(f" ({error})")
        if document:
            _ = body.append(" @ ")
            _ = body.append_text(self._format_path(str(document)))

    def _render_snippet_body(self, record: logging.LogRecord, event: str, body: Text) -> None:
        sequence = getattr(record, "sequence", None)
        total = getattr(record, "total_snippets", None)
        if isinstance(sequence, int) and sequence > 0:
            if isinstance(total, int) and total > 0:
                _ = body.append(f"[{sequence}/{total}] ")
            else:
                _ = body.append(f"[{sequence}] ")

        _ = body.append(self._SNIPPET_PREFIXES.get(event, ""))
        snippet_id = getattr(record, "snippet_id", None)
        if snippet_id:
            _ = body.append(str(snippet_id), style=Style(bold=True))

        details: list[str] = []
        if event == "build.snippet.executed":
            duration_ms = getattr(record, "duration_ms", None)
            if isinstance(duration_ms, (int, float)):
                details.append(f"{duration_ms:.2f} ms")
            if getattr(record, "committed", False):
                details.append("cached")
        elif event == "build.snippet.skipped":
            details.append("eval=false")
        elif event == "build.snippet.error":
            diagnostic = getattr(record, "error_message", None)
            if diagnostic:
                details.append(str(diagnostic))
        if details:
            _ = body.append(" (" + ", ".join(details) + ")")

    def _render_build_message(self, record: logging.LogRecord) -> Text | None:
        """Render structured build events with dedicated styling."""

        event = getattr(record, "build_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._BUILD_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        if event.startswith("build.document"):
            self._render_document_body(record, event, body)
        elif event.startswith("build.snippet"):
            self._render_snippet_body(record, event, body)
        else:
            _ = body.append("Wrote ")
            target = getattr(record, "target_path", None)
            if target:
                _ = body.append_text(self._format_path(str(target)))

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for build events."""

        build_text = self._render_build_message(record)
        if build_text is not None:
            return build_text
        return super().render_message(record, message)


__all__ = ["BuildRichHandler"]
