"""Utilities for rendering shared CLI display content."""

from __future__ import annotations

from rich.console import Console

from knitcache.features.build import BuildReport, SnippetStatus


def render_build_summary(console: Console, report: BuildReport, header_label: str) -> None:
    """Render counts of executed, cached and skipped snippets.

    Args:
        console: Rich console instance used to render output.
        report: Completed build report.
        header_label: Label rendered in the summary header.
    """
    console.print(f"\n[bold]{header_label}:[/bold]")
    console.print(f"Total snippets: {len(report.results)}")
    console.print(f"[blue]Executed: {report.count(SnippetStatus.EXECUTED)}[/blue]")
    console.print(f"[green]Reused from cache: {report.count(SnippetStatus.CACHED)}[/green]")

    skipped = report.count(SnippetStatus.SKIPPED)
    if skipped:
        console.print(f"[yellow]Skipped (eval=false): {skipped}[/yellow]")
    console.print(f"Duration: {report.duration_seconds:.2f}s")
