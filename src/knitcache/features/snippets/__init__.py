# Where: knitcache.features.snippets.__init__
# What: Expose the snippet registry and the dependency resolver.
# Why: Keep ordering concerns behind one import path for the build layer.

from .usecases.registry import SnippetRegistry
from .usecases.resolver import DependencyResolver

__all__ = ["DependencyResolver", "SnippetRegistry"]
