"""Plan command implementation for the CLI."""

from typing import override

from knitcache.features.build import PlanItem
from knitcache.ui.cli.args.options import PlanArgs
from knitcache.ui.cli.commands.executor import CommandExecutor


class PlanCommand(CommandExecutor[PlanArgs, list[PlanItem]]):
    """Show execution order and cache status without running snippets."""

    @override
    def execute(self) -> list[PlanItem]:
        items = self.service.plan(self.args.document_path)
        self.table_display.show_plan(items, quiet=self.args.quiet)
        return items
