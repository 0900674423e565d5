"""Command line interface for knitcache."""

import sys
from typing import final

from knitcache.platform.logging import logger
from knitcache.shared.errors import KnitcacheError
from knitcache.ui.cli.args import ArgumentParser
from knitcache.ui.cli.args.options import CacheClearArgs, CacheListArgs, CLIArgs, CompileArgs, PlanArgs
from knitcache.ui.cli.commands import CacheClearCommand, CacheListCommand, CompileCommand, PlanCommand


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> None:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).
        """
        try:
            args: CLIArgs = ArgumentParser.process_args(args_list)

            if isinstance(args, CompileArgs):
                _ = CompileCommand(args).execute()
            elif isinstance(args, PlanArgs):
                _ = PlanCommand(args).execute()
            elif isinstance(args, CacheListArgs):
                _ = CacheListCommand(args).execute()
            else:
                assert isinstance(args, CacheClearArgs)
                _ = CacheClearCommand(args).execute()

        except KeyboardInterrupt:
            logger.info("\nOperation cancelled by user")
            sys.exit(130)
        except KnitcacheError as e:
            logger.error("%s", e)
            sys.exit(1)
        except Exception as e:
            logger.error("An unexpected error occurred: %s", str(e))
            sys.exit(1)


def main() -> int:
    """Main entry point.

    Returns:
        int: Process exit code (0 on success). Failures exit through
        ``sys.exit(...)`` inside command processing.
    """
    CommandProcessor.process_command()
    return 0
