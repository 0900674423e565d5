"""Command line interface package."""

from knitcache.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
