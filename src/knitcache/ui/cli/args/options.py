"""Command line argument options."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, final


@final
@dataclass(slots=True)
class CompileArgs:
    """Command line arguments for the ``compile`` subcommand."""

    command: Literal["compile"]
    document_path: Path
    output_path: Path | None
    clear_cache: bool
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class PlanArgs:
    """Command line arguments for the ``plan`` subcommand."""

    command: Literal["plan"]
    document_path: Path
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class CacheListArgs:
    """Command line arguments for ``cache list``."""

    command: Literal["cache-list"]
    document_path: Path
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class CacheClearArgs:
    """Command line arguments for ``cache clear``."""

    command: Literal["cache-clear"]
    document_path: Path
    snippet_id: str | None
    verbose: bool
    quiet: bool


CLIArgs = CompileArgs | PlanArgs | CacheListArgs | CacheClearArgs

__all__ = ["CLIArgs", "CacheClearArgs", "CacheListArgs", "CompileArgs", "PlanArgs"]
