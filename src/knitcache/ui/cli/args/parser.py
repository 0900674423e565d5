"""Command line argument parser."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import final

from knitcache.config.config import Config
from knitcache.platform.logging import DEFAULT_LOG_FILE, logger, setup_logger
from knitcache.ui.cli.args.options import (
    CacheClearArgs,
    CacheListArgs,
    CLIArgs,
    CompileArgs,
    PlanArgs,
)


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            prog="knitcache",
            description="knitcache - compile literate documents with cached snippet output.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        compile_parser = subparsers.add_parser(
            "compile",
            help="Run a document's snippets and write the rendered Markdown",
        )
        ArgumentParser._add_document_argument(compile_parser)
        _ = compile_parser.add_argument(
            "--output",
            type=str,
            help="Rendered output path (defaults to the document path with the configured suffix)",
            metavar="OUTPUT_PATH",
        )
        _ = compile_parser.add_argument(
            "--clear-cache",
            action="store_true",
            help="Drop the document's cached snippet output before building",
        )
        ArgumentParser._add_verbosity_arguments(compile_parser)

        plan_parser = subparsers.add_parser(
            "plan",
            help="Show execution order and which snippets would be reused from cache",
        )
        ArgumentParser._add_document_argument(plan_parser)
        ArgumentParser._add_verbosity_arguments(plan_parser)

        cache_parser = subparsers.add_parser(
            "cache",
            help="Inspect or clear a document's cached snippet output",
        )
        cache_subparsers = cache_parser.add_subparsers(dest="cache_command", required=True)

        list_parser = cache_subparsers.add_parser("list", help="List cached snippets")
        ArgumentParser._add_document_argument(list_parser)
        ArgumentParser._add_verbosity_arguments(list_parser)

        clear_parser = cache_subparsers.add_parser("clear", help="Clear cached snippets")
        ArgumentParser._add_document_argument(clear_parser)
        _ = clear_parser.add_argument(
            "--snippet",
            type=str,
            help="Clear only this snippet's entry",
            metavar="SNIPPET_ID",
        )
        ArgumentParser._add_verbosity_arguments(clear_parser)

        return parser

    @staticmethod
    def _add_document_argument(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument(
            "document",
            type=str,
            help="Path to the literate document",
            metavar="DOCUMENT",
        )

    @staticmethod
    def _add_verbosity_arguments(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed build information",
        )
        _ = parser.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress all output except errors",
        )

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            CLIArgs: Processed command line arguments.

        Raises:
            SystemExit: If the document does not exist or validation fails.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        is_quiet = bool(getattr(parsed_args, "quiet", False))
        is_verbose = bool(getattr(parsed_args, "verbose", False))

        if is_quiet:
            log_level = logging.ERROR
        elif is_verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        configuration = Config.load()
        log_file_path = configuration.log_file or DEFAULT_LOG_FILE
        _ = setup_logger(log_file=log_file_path, console_level=log_level)

        command: str = parsed_args.command
        document_path = Path(parsed_args.document)

        if command == "cache" and parsed_args.cache_command == "clear":
            # Clearing works for documents that no longer exist.
            return CacheClearArgs(
                command="cache-clear",
                document_path=document_path,
                snippet_id=parsed_args.snippet,
                verbose=is_verbose,
                quiet=is_quiet,
            )

        if not document_path.is_file():
            logger.error("Document does not exist: %s", document_path)
            sys.exit(1)

        if command == "compile":
            return CompileArgs(
                command="compile",
                document_path=document_path,
                output_path=Path(parsed_args.output) if parsed_args.output else None,
                clear_cache=parsed_args.clear_cache,
                verbose=is_verbose,
                quiet=is_quiet,
            )

        if command == "plan":
            return PlanArgs(command="plan", document_path=document_path, verbose=is_verbose, quiet=is_quiet)

        if command == "cache":
            return CacheListArgs(
                command="cache-list",
                document_path=document_path,
                verbose=is_verbose,
                quiet=is_quiet,
            )

        logger.error("Unsupported command: %s", command)
        sys.exit(2)
