"""Display helpers for CLI output."""

from knitcache.ui.cli.display.result import ResultDisplay
from knitcache.ui.cli.display.tables import TableDisplay

__all__ = ["ResultDisplay", "TableDisplay"]
