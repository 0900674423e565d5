"""Command line argument handling package."""

from knitcache.ui.cli.args.options import CacheClearArgs, CacheListArgs, CLIArgs, CompileArgs, PlanArgs
from knitcache.ui.cli.args.parser import ArgumentParser

__all__ = ["ArgumentParser", "CLIArgs", "CacheClearArgs", "CacheListArgs", "CompileArgs", "PlanArgs"]
