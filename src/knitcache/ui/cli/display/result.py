"""src/knitcache/ui/cli/display/result.py
What: Render user-facing summaries for compile and cache-clear flows.
Why: Keep console output formatting consistent across the interface.
"""

from __future__ import annotations

from typing import final

from rich.console import Console

from knitcache.features.build import BuildReport

from .summary import render_build_summary


@final
class ResultDisplay:
    """Handles result display in CLI."""

    console: Console

    def __init__(self) -> None:
        self.console = Console()

    def show_report(self, report: BuildReport, quiet: bool = False) -> None:
        """Display a compile report.

        Args:
            report: Completed build report.
            quiet: Whether to suppress non-error output.
        """
        if quiet:
            return

        render_build_summary(self.console, report, header_label="Build Summary")
        if report.output_path is not None:
            self.console.print(f"Output written to [magenta]{report.output_path}[/magenta]")

    def show_cleared(self, removed: int, snippet_id: str | None, *, quiet: bool = False) -> None:
        """Report how many cache entries were removed."""

        if quiet:
            return

        if snippet_id is None:
            self.console.print(f"Cleared {removed} cached snippet(s).")
        elif removed:
            self.console.print(f"Cleared cached output of '{snippet_id}'.")
        else:
            self.console.print(f"[yellow]No cached output for '{snippet_id}'.[/yellow]")
