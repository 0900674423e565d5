"""src/knitcache/features/build/usecases/document_builder.py
What: Run a document's snippets in dependency order, reusing cached output where allowed.
Why: Tie registry, resolver, cache store and engine into one fail-fast build.
"""

from __future__ import annotations

import time
from collections.abc import Mapping

from knitcache.features.cache import CacheStore
from knitcache.features.document import Document
from knitcache.features.snippets import DependencyResolver, SnippetRegistry
from knitcache.platform.logging import logger
from knitcache.shared.errors import KnitcacheError, SnippetExecutionError
from knitcache.shared.snippet import Snippet, SnippetOutput

from .build_types import (
    BuildEvent,
    BuildLogContext,
    BuildReport,
    PlanItem,
    SnippetResult,
    SnippetStatus,
)
from .ports import ExecutionEngine
from .renderer import render_document


class DocumentBuilder:
    """Build documents against one execution engine and one cache store."""

    _engine: ExecutionEngine
    _cache: CacheStore
    _resolver: DependencyResolver

    def __init__(
        self,
        *,
        engine: ExecutionEngine,
        cache: CacheStore,
        resolver: DependencyResolver | None = None,
    ) -> None:
        self._engine = engine
        self._cache = cache
        self._resolver = resolver or DependencyResolver()

    def resolve(self, document: Document) -> list[Snippet]:
        """Register the document's snippets and return them in execution order."""

        registry = SnippetRegistry.from_document(document)
        return self._resolver.order(registry.all_snippets())

    def plan(self, document: Document) -> list[PlanItem]:
        """Predict how each snippet would be handled, without executing anything."""

        items: list[PlanItem] = []
        for snippet in self.resolve(document):
            if not snippet.options.evaluate:
                items.append(PlanItem(snippet, SnippetStatus.SKIPPED, "eval=false"))
                continue
            if not snippet.options.cache:
                items.append(PlanItem(snippet, SnippetStatus.EXECUTED, "cache disabled"))
                continue
            entry = self._cache.lookup(snippet.id)
            if entry is None:
                items.append(PlanItem(snippet, SnippetStatus.EXECUTED, "no cache entry"))
            elif entry.fingerprint != self._cache.fingerprint_of(snippet):
                items.append(PlanItem(snippet, SnippetStatus.EXECUTED, "source changed"))
            else:
                items.append(PlanItem(snippet, SnippetStatus.CACHED, "cache hit"))
        return items

    def build(self, document: Document) -> BuildReport:
        """Execute ``document`` and render it.

        Raises:
            DuplicateSnippetError, SnippetNotFoundError, CycleError: Before any
                snippet runs.
            SnippetExecutionError: At the first failing snippet; nothing after
                it runs. Entries committed earlier in the build are kept.
        """

        ordered = self.resolve(document)
        context = BuildLogContext(document=document.key, total_snippets=len(ordered))
        logger.info(
            "Build start",
            extra={
                "build_event": BuildEvent.DOCUMENT_START,
                "document": context.document,
                "total_snippets": context.total_snippets,
                "build_id": context.build_id,
            },
        )

        outputs: dict[str, SnippetOutput] = {}
        results: list[SnippetResult] = []
        try:
            for sequence, snippet in enumerate(ordered, start=1):
                result = self._run_snippet(snippet, outputs, sequence=sequence, context=context)
                if result.output is not None:
                    outputs[snippet.id] = result.output
                results.append(result)
                context.record(result.status)
        except KnitcacheError as e:
            logger.error(
                "Build failed: %s",
                e,
                extra={
                    "build_event": BuildEvent.DOCUMENT_ERROR,
                    "document": context.document,
                    "error_message": str(e),
                    "build_id": context.build_id,
                },
            )
            raise

        rendered = render_document(document, outputs)
        logger.info("Build complete", extra={"build_event": BuildEvent.DOCUMENT_COMPLETE, **context.summary_extra()})
        return BuildReport(
            document=document,
            results=results,
            rendered=rendered,
            duration_seconds=context.duration_seconds(),
        )

    def _run_snippet(
        self,
        snippet: Snippet,
        outputs: Mapping[str, SnippetOutput],
        *,
        sequence: int,
        context: BuildLogContext,
    ) -> SnippetResult:
        extra = {
            "snippet_id": snippet.id,
            "sequence": sequence,
            "total_snippets": context.total_snippets,
            "build_id": context.build_id,
        }

        if not snippet.options.evaluate:
            logger.info("Skipped %s", snippet.id, extra={"build_event": BuildEvent.SNIPPET_SKIPPED, **extra})
            return SnippetResult(snippet=snippet, status=SnippetStatus.SKIPPED)

        current = self._cache.fingerprint_of(snippet)
        if snippet.options.cache:
            entry = self._cache.lookup(snippet.id)
            if entry is not None and entry.fingerprint == current:
                try:
                    self._engine.restore(snippet, entry.output)
                except Exception as e:
                    logger.warning(
                        "Cached state of %s could not be restored, recomputing: %s: %s",
                        snippet.id,
                        type(e).__name__,
                        e,
                        extra=extra,
                    )
                else:
                    logger.info(
                        "Reused cached %s",
                        snippet.id,
                        extra={"build_event": BuildEvent.SNIPPET_CACHED, **extra},
                    )
                    return SnippetResult(snippet=snippet, status=SnippetStatus.CACHED, output=entry.output)

        dependency_outputs = {dep: outputs[dep] for dep in snippet.dependencies if dep in outputs}
        started = time.perf_counter()
        try:
            output = self._engine.execute(snippet, dependency_outputs)
        except SnippetExecutionError as e:
            self._log_failure(e.diagnostic, extra)
            raise
        except Exception as e:
            diagnostic = f"{type(e).__name__}: {e}"
            self._log_failure(diagnostic, extra)
            raise SnippetExecutionError(snippet.id, diagnostic) from e
        duration_ms = (time.perf_counter() - started) * 1000

        committed = False
        if snippet.options.cache:
            committed = self._cache.commit(snippet.id, current, output)

        logger.info(
            "Executed %s",
            snippet.id,
            extra={
                "build_event": BuildEvent.SNIPPET_EXECUTED,
                "duration_ms": round(duration_ms, 2),
                "committed": committed,
                **extra,
            },
        )
        return SnippetResult(
            snippet=snippet,
            status=SnippetStatus.EXECUTED,
            output=output,
            duration_ms=duration_ms,
            committed=committed,
        )

    @staticmethod
    def _log_failure(diagnostic: str, extra: dict[str, object]) -> None:
        logger.error(
            "Failed %s: %s",
            extra["snippet_id"],
            diagnostic,
            extra={"build_event": BuildEvent.SNIPPET_ERROR, "error_message": diagnostic, **extra},
        )


__all__ = ["DocumentBuilder"]
