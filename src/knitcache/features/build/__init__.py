# Where: knitcache.features.build.__init__
# What: Expose the document builder, renderer, engine port and build types.
# Why: Provide a cohesive import surface for the application and UI layers.

from .adapters.python_engine import PythonSessionEngine
from .usecases.build_types import (
    BuildEvent,
    BuildLogContext,
    BuildReport,
    PlanItem,
    SnippetResult,
    SnippetStatus,
)
from .usecases.document_builder import DocumentBuilder
from .usecases.ports import ExecutionEngine
from .usecases.renderer import render_document

__all__ = [
    "BuildEvent",
    "BuildLogContext",
    "BuildReport",
    "DocumentBuilder",
    "ExecutionEngine",
    "PlanItem",
    "PythonSessionEngine",
    "SnippetResult",
    "SnippetStatus",
    "render_document",
]
