"""Command execution package for CLI."""

from knitcache.ui.cli.commands.cache import CacheClearCommand, CacheListCommand
from knitcache.ui.cli.commands.compile import CompileCommand
from knitcache.ui.cli.commands.executor import CommandExecutor
from knitcache.ui.cli.commands.plan import PlanCommand

__all__ = [
    "CacheClearCommand",
    "CacheListCommand",
    "CommandExecutor",
    "CompileCommand",
    "PlanCommand",
]
