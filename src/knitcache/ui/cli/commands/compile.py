"""src/knitcache/ui/cli/commands/compile.py
What: Execute document builds via the CLI.
Why: Bridge parsed arguments with the compile service and result display.
"""

from typing import override

from knitcache.application.services.compile_service import CompileRequest
from knitcache.features.build import BuildReport
from knitcache.ui.cli.args.options import CompileArgs
from knitcache.ui.cli.commands.executor import CommandExecutor


class CompileCommand(CommandExecutor[CompileArgs, BuildReport]):
    """Command for compiling a document."""

    @override
    def execute(self) -> BuildReport:
        request = CompileRequest(
            document_path=self.args.document_path,
            output_path=self.args.output_path,
            clear_cache=self.args.clear_cache,
        )
        report = self.service.compile(request)
        self.result_display.show_report(report, quiet=self.args.quiet)
        return report
