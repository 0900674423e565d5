"""
Summary: In-process Python engine evaluating snippets in one shared namespace.
Why: Later snippets use names defined by earlier ones, like an interactive session.
"""

from __future__ import annotations

import ast
import contextlib
import importlib
import io
import pickle
from collections.abc import Mapping
from types import ModuleType
from typing import Any, ClassVar, final

from knitcache.platform.logging import logger
from knitcache.shared.snippet import Snippet, SnippetOutput


@final
class PythonSessionEngine:
    """Execute Python snippets with ``exec`` and capture what they print.

    A trailing expression statement is evaluated and its ``repr`` appended to
    the output, unless it is ``None``. Names a snippet binds or rebinds are
    pickled into ``SnippetOutput.state``; imported modules are saved by name.
    When the builder reuses a cached output, ``restore`` puts those names back
    into the session so later snippets still see them. Values that cannot be
    pickled are left out with a warning, and in-place mutation of a name the
    snippet did not rebind is not saved.
    """

    SUPPORTED_ENGINES: ClassVar[frozenset[str]] = frozenset({"python", "python3", "py"})

    namespace: dict[str, Any]

    def __init__(self, namespace: dict[str, Any] | None = None) -> None:
        self.namespace = namespace if namespace is not None else {"__name__": "__knitcache__"}

    def execute(self, snippet: Snippet, dependency_outputs: Mapping[str, SnippetOutput]) -> SnippetOutput:
        _ = dependency_outputs  # state flows through the shared namespace
        self._check_engine(snippet)

        filename = f"<snippet {snippet.id}>"
        module = ast.parse(snippet.source, filename=filename, mode="exec")
        trailing: ast.expr | None = None
        if module.body and isinstance(module.body[-1], ast.Expr):
            trailing = module.body.pop().value

        before = dict(self.namespace)
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            exec(compile(module, filename, "exec"), self.namespace)
            if trailing is not None:
                value = eval(compile(ast.Expression(trailing), filename, "eval"), self.namespace)
                if value is not None:
                    print(repr(value))

        bound = {
            name: value
            for name, value in self.namespace.items()
            if not name.startswith("__") and (name not in before or before[name] is not value)
        }
        return SnippetOutput(text=buffer.getvalue(), state=self._save_state(snippet, bound))

    def restore(self, snippet: Snippet, output: SnippetOutput) -> None:
        """Rebind the names saved in ``output.state`` into the session.

        Raises:
            ValueError: When the snippet targets another engine.
            pickle.UnpicklingError, ImportError: When the saved state can no
                longer be loaded.
        """

        self._check_engine(snippet)
        if not output.state:
            return
        saved: dict[str, Any] = pickle.loads(output.state)
        for name, module_name in saved.get("modules", {}).items():
            self.namespace[name] = importlib.import_module(module_name)
        self.namespace.update(saved.get("values", {}))
        logger.debug("Restored %d name(s) from cached %s", len(saved.get("values", {})), snippet.id)

    def _check_engine(self, snippet: Snippet) -> None:
        if snippet.engine.lower() not in self.SUPPORTED_ENGINES:
            raise ValueError(f"Unsupported engine '{snippet.engine}'")

    @staticmethod
    def _save_state(snippet: Snippet, bound: Mapping[str, Any]) -> bytes:
        if not bound:
            return b""
        modules: dict[str, str] = {}
        values: dict[str, Any] = {}
        for name, value in bound.items():
            if isinstance(value, ModuleType):
                modules[name] = value.__name__
                continue
            try:
                _ = pickle.dumps(value)
            except (pickle.PicklingError, TypeError, AttributeError) as e:
                logger.warning("Name '%s' of %s cannot be cached: %s", name, snippet.id, e)
                continue
            values[name] = value
        return pickle.dumps({"modules": modules, "values": values})


__all__ = ["PythonSessionEngine"]
