"""Cache maintenance commands for the CLI."""

from typing import override

from knitcache.features.cache import CacheEntry
from knitcache.ui.cli.args.options import CacheClearArgs, CacheListArgs
from knitcache.ui.cli.commands.executor import CommandExecutor


class CacheListCommand(CommandExecutor[CacheListArgs, list[CacheEntry]]):
    """List a document's cached snippets."""

    @override
    def execute(self) -> list[CacheEntry]:
        entries = self.service.list_entries(self.args.document_path)
        self.table_display.show_entries(entries, quiet=self.args.quiet)
        return entries


class CacheClearCommand(CommandExecutor[CacheClearArgs, int]):
    """Clear one or all of a document's cached snippets."""

    @override
    def execute(self) -> int:
        removed = self.service.clear(self.args.document_path, self.args.snippet_id)
        self.result_display.show_cleared(removed, self.args.snippet_id, quiet=self.args.quiet)
        return removed
