"""Application service for compiling documents.

This layer centralizes construction of the cache database, the cache store
and the execution engine so that UIs only deal with requests and reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, final

from knitcache.config.file_ops import write_text_file
from knitcache.config.settings import (
    DEFAULT_ENGINE,
    FIG_HEIGHT,
    FIG_WIDTH,
    FINGERPRINT_ALGORITHM,
    OUTPUT_SUFFIX,
)
from knitcache.features.build import (
    BuildEvent,
    BuildReport,
    DocumentBuilder,
    ExecutionEngine,
    PlanItem,
    PythonSessionEngine,
)
from knitcache.features.cache import CacheEntry, CacheRepositoryPort, CacheStore
from knitcache.features.document import Document, read_document
from knitcache.platform.db.cache.snippet_cache_dao import SnippetCacheDAO
from knitcache.platform.db.db_manager import DatabaseManager
from knitcache.platform.logging import logger
from knitcache.shared.errors import KnitcacheError
from knitcache.shared.snippet import SnippetOptions


@dataclass(frozen=True)
class CompileRequest:
    """Input parameters for a compile run.

    Attributes:
        document_path: Literate document to build.
        output_path: Rendered artifact; defaults to the document path with the
            configured output suffix.
        clear_cache: Drop the document's cache entries before building.
    """

    document_path: Path
    output_path: Path | None = None
    clear_cache: bool = False


def default_output_path(document_path: Path) -> Path:
    """Return the artifact path for ``document_path``, never the document itself."""

    candidate = document_path.with_suffix(OUTPUT_SUFFIX)
    if candidate.resolve() == document_path.resolve():
        candidate = document_path.with_name(f"{document_path.stem}.knit{OUTPUT_SUFFIX}")
    return candidate


@final
class CompileDocumentService:
    """Application service that compiles documents and manages their cache."""

    def __init__(
        self,
        *,
        db_path: Path | str | None = None,
        db_factory: Callable[[Path | str | None], DatabaseManager] | None = None,
        repository_factory: Callable[..., CacheRepositoryPort] | None = None,
        engine_factory: Callable[[], ExecutionEngine] | None = None,
        algorithm: str | None = None,
    ) -> None:
        """Create a service with overridable infrastructure factories.

        Tests can inject light-weight doubles while production code relies on
        the SQLite DAO and the in-process Python engine.
        """

        self._db_path = db_path
        self._db_factory: Callable[[Path | str | None], DatabaseManager] = db_factory or DatabaseManager
        self._repository_factory: Callable[..., CacheRepositoryPort] = repository_factory or SnippetCacheDAO
        self._engine_factory: Callable[[], ExecutionEngine] = engine_factory or PythonSessionEngine
        self._algorithm = algorithm or FINGERPRINT_ALGORITHM

    def load(self, document_path: Path) -> Document:
        """Parse ``document_path`` with configured option defaults."""

        defaults = SnippetOptions(fig_width=FIG_WIDTH, fig_height=FIG_HEIGHT)
        return read_document(document_path, defaults=defaults, default_engine=DEFAULT_ENGINE)

    def compile(self, request: CompileRequest) -> BuildReport:
        """Build the document, write the artifact and return the report."""

        output_path = request.output_path or default_output_path(request.document_path)
        if output_path.resolve() == request.document_path.resolve():
            raise KnitcacheError(f"Refusing to overwrite the source document: {request.document_path}")

        document = self.load(request.document_path)
        with self._db_factory(self._db_path) as manager:
            store = self._store(manager, document.key)
            if request.clear_cache:
                _ = store.invalidate_all()
            builder = DocumentBuilder(engine=self._engine_factory(), cache=store)
            report = builder.build(document)

        write_text_file(output_path, report.rendered)
        report.output_path = output_path
        logger.info(
            "Wrote %s",
            output_path,
            extra={"build_event": BuildEvent.ARTIFACT_WRITE, "target_path": str(output_path)},
        )
        return report

    def plan(self, document_path: Path) -> list[PlanItem]:
        """Return the predicted handling of each snippet without executing."""

        document = self.load(document_path)
        with self._db_factory(self._db_path) as manager:
            store = self._store(manager, document.key)
            return DocumentBuilder(engine=self._engine_factory(), cache=store).plan(document)

    def list_entries(self, document_path: Path) -> list[CacheEntry]:
        """Return the cached entries of a document."""

        with self._db_factory(self._db_path) as manager:
            return self._store(manager, Document.key_for(document_path)).entries()

    def clear(self, document_path: Path, snippet_id: str | None = None) -> int:
        """Clear one snippet's entry, or all of the document's entries.

        Returns:
            Number of entries removed.
        """

        with self._db_factory(self._db_path) as manager:
            store = self._store(manager, Document.key_for(document_path))
            if snippet_id is None:
                return store.invalidate_all()
            return 1 if store.invalidate(snippet_id) else 0

    def _store(self, manager: DatabaseManager, document_key: str) -> CacheStore:
        if manager.conn is None:
            raise KnitcacheError("Cache database is not connected")
        repository = self._repository_factory(manager.conn)
        return CacheStore(repository, document_key, algorithm=self._algorithm)


__all__ = ["CompileDocumentService", "CompileRequest", "default_output_path"]
