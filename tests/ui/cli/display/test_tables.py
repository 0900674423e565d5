"""Tests for plan and cache listing tables."""

from io import StringIO

from rich.console import Console

from knitcache.features.build import PlanItem, SnippetStatus
from knitcache.features.cache import CacheEntry
from knitcache.shared.snippet import Snippet, SnippetOptions, SnippetOutput
from knitcache.ui.cli.display.tables import TableDisplay


def _display() -> tuple[TableDisplay, StringIO]:
    buffer = StringIO()
    display = TableDisplay()
    display.console = Console(file=buffer, width=120, color_system=None)
    return display, buffer


def test_show_plan_lists_snippets_in_order() -> None:
    display, buffer = _display()
    items = [
        PlanItem(Snippet(id="load-data", source=""), SnippetStatus.CACHED, "cache hit"),
        PlanItem(
            Snippet(id="make-plot", source="", options=SnippetOptions(dependson=("load-data",))),
            SnippetStatus.EXECUTED,
            "source changed",
        ),
    ]

    display.show_plan(items)

    output = buffer.getvalue()
    assert "Build Plan" in output
    assert output.index("load-data") < output.index("make-plot")
    assert "source changed" in output
    assert "cached" in output


def test_show_entries_previews_first_line() -> None:
    display, buffer = _display()
    entry = CacheEntry(
        snippet_id="fit",
        fingerprint="sha256:" + "ab" * 32,
        output=SnippetOutput(text="coefficients\nmore lines"),
        updated_at="2024-01-01 00:00:00",
    )

    display.show_entries([entry])

    output = buffer.getvalue()
    assert "Cached Snippets" in output
    assert "fit" in output
    assert "coefficients" in output
    assert "more lines" not in output


def test_show_entries_empty_and_quiet() -> None:
    display, buffer = _display()

    display.show_entries([])
    display.show_plan([], quiet=True)

    assert buffer.getvalue().strip() == "No cached snippets."
