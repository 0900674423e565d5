"""src/knitcache/ui/cli/commands/executor.py
What: Provide shared wiring for CLI command executors.
Why: Reuse service construction and presentation helpers across commands.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from knitcache.application.services.compile_service import CompileDocumentService
from knitcache.config.config import Config
from knitcache.config.paths import default_cache_db_path
from knitcache.ui.cli.args.options import CLIArgs
from knitcache.ui.cli.display.result import ResultDisplay
from knitcache.ui.cli.display.tables import TableDisplay

ArgsT = TypeVar("ArgsT", bound=CLIArgs)
ResultT = TypeVar("ResultT")


class CommandExecutor(ABC, Generic[ArgsT, ResultT]):
    """Base class for command execution."""

    args: ArgsT
    service: CompileDocumentService
    result_display: ResultDisplay
    table_display: TableDisplay

    def __init__(self, args: ArgsT) -> None:
        """Initialize command executor.

        Args:
            args: Command line arguments.
        """
        self.args = args
        configuration = Config.load()
        self.service = CompileDocumentService(db_path=default_cache_db_path(configuration.data_dir))
        self.result_display = ResultDisplay()
        self.table_display = TableDisplay()

    @abstractmethod
    def execute(self) -> ResultT:
        """Execute the command."""
        pass
