"""Tabular views of build plans and cache entries."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, final

from rich.console import Console
from rich.table import Table

from knitcache.features.build import PlanItem, SnippetStatus
from knitcache.features.cache import CacheEntry

_STATUS_STYLES: Final[dict[SnippetStatus, str]] = {
    SnippetStatus.EXECUTED: "blue",
    SnippetStatus.CACHED: "green",
    SnippetStatus.SKIPPED: "yellow",
}
_PREVIEW_LENGTH: Final[int] = 40


def _preview(text: str) -> str:
    first_line = text.strip().splitlines()[0] if text.strip() else ""
    if len(first_line) > _PREVIEW_LENGTH:
        return first_line[: _PREVIEW_LENGTH - 1] + "…"
    return first_line


@final
class TableDisplay:
    """Render plans and cache listings as Rich tables."""

    console: Console

    def __init__(self) -> None:
        self.console = Console()

    def show_plan(self, items: Sequence[PlanItem], *, quiet: bool = False) -> None:
        if quiet:
            return

        table = Table(title="Build Plan")
        table.add_column("#", justify="right")
        table.add_column("Snippet")
        table.add_column("Depends on")
        table.add_column("Action")
        table.add_column("Reason")
        for sequence, item in enumerate(items, start=1):
            style = _STATUS_STYLES[item.status]
            table.add_row(
                str(sequence),
                item.snippet.id,
                ", ".join(item.snippet.dependencies) or "-",
                f"[{style}]{item.status.value}[/{style}]",
                item.reason,
            )
        self.console.print(table)

    def show_entries(self, entries: Sequence[CacheEntry], *, quiet: bool = False) -> None:
        if quiet:
            return

        if not entries:
            self.console.print("No cached snippets.")
            return

        table = Table(title="Cached Snippets")
        table.add_column("Snippet")
        table.add_column("Fingerprint")
        table.add_column("Updated")
        table.add_column("Output")
        for entry in entries:
            table.add_row(
                entry.snippet_id,
                entry.fingerprint[:19],
                entry.updated_at or "-",
                _preview(entry.output.text),
            )
        self.console.print(table)
