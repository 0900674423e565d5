"""Tests for building documents against a recording engine and an in-memory cache."""

from collections.abc import Generator, Mapping

import pytest

from knitcache.features.build import DocumentBuilder, SnippetStatus
from knitcache.features.cache import CacheStore
from knitcache.features.document import Document, parse_document
from knitcache.platform.db.cache.snippet_cache_dao import SnippetCacheDAO
from knitcache.platform.db.db_manager import DatabaseManager
from knitcache.shared.errors import CycleError, SnippetExecutionError, SnippetNotFoundError
from knitcache.shared.snippet import Snippet, SnippetOutput

REPORT = """# Report

```{python read-data, cache=TRUE}
data
```

```{python make-plot, cache=TRUE, dependson="read-data"}
plot
```

```{python make-model, cache=TRUE, dependson="read-data"}
model
```
"""


class RecordingEngine:
    """Engine double returning the upper-cased source and recording each call."""

    def __init__(self, fail_on: str | None = None, fail_restore: bool = False) -> None:
        self.calls: list[str] = []
        self.restored: list[str] = []
        self.fail_restore = fail_restore
        self.received: dict[str, Mapping[str, SnippetOutput]] = {}
        self.fail_on = fail_on

    def execute(self, snippet: Snippet, dependency_outputs: Mapping[str, SnippetOutput]) -> SnippetOutput:
        self.calls.append(snippet.id)
        self.received[snippet.id] = dict(dependency_outputs)
        if snippet.id == self.fail_on:
            raise RuntimeError("boom")
        return SnippetOutput(text=snippet.source.upper())

    def restore(self, snippet: Snippet, output: SnippetOutput) -> None:
        if self.fail_restore:
            raise ModuleNotFoundError("No module named 'gone'")
        self.restored.append(snippet.id)


@pytest.fixture
def store() -> Generator[CacheStore, None, None]:
    manager = DatabaseManager(":memory:")
    manager.connect()
    assert manager.conn is not None
    yield CacheStore(SnippetCacheDAO(manager.conn), "report")
    manager.close()


def _build(text: str, store: CacheStore, engine: RecordingEngine | None = None) -> tuple[RecordingEngine, Document]:
    engine = engine or RecordingEngine()
    document = parse_document(text)
    _ = DocumentBuilder(engine=engine, cache=store).build(document)
    return engine, document


def test_first_build_executes_everything_in_dependency_order(store: CacheStore) -> None:
    engine = RecordingEngine()
    report = DocumentBuilder(engine=engine, cache=store).build(parse_document(REPORT))

    assert engine.calls == ["read-data", "make-plot", "make-model"]
    assert report.count(SnippetStatus.EXECUTED) == 3
    assert all(result.committed for result in report.results)
    assert engine.received["make-plot"] == {"read-data": SnippetOutput(text="DATA")}
    assert "```\nPLOT\n```" in report.rendered


def test_rebuild_reuses_every_unchanged_snippet(store: CacheStore) -> None:
    initial = DocumentBuilder(engine=RecordingEngine(), cache=store).build(parse_document(REPORT))
    engine = RecordingEngine()

    report = DocumentBuilder(engine=engine, cache=store).build(parse_document(REPORT))

    assert engine.calls == []
    assert engine.restored == ["read-data", "make-plot", "make-model"]
    assert report.rendered == initial.rendered
    assert report.count(SnippetStatus.CACHED) == 3
    first = report.result_for("read-data")
    assert first is not None
    assert first.output == SnippetOutput(text="DATA")


def test_editing_one_snippet_recomputes_only_that_snippet(store: CacheStore) -> None:
    _ = _build(REPORT, store)
    before = {entry.snippet_id: entry for entry in store.entries()}
    edited = REPORT.replace("plot\n", "plot2\n")

    engine, _ = _build(edited, store)

    assert engine.calls == ["make-plot"]
    after = {entry.snippet_id: entry for entry in store.entries()}
    assert after["read-data"] == before["read-data"]
    assert after["make-model"] == before["make-model"]
    assert after["make-plot"].output.text == "PLOT2"


def test_unrestorable_cache_entry_is_recomputed(store: CacheStore) -> None:
    _ = _build(REPORT, store)
    engine = RecordingEngine(fail_restore=True)

    report = DocumentBuilder(engine=engine, cache=store).build(parse_document(REPORT))

    assert engine.calls == ["read-data", "make-plot", "make-model"]
    assert report.count(SnippetStatus.EXECUTED) == 3
    assert "```\nDATA\n```" in report.rendered


def test_upstream_edit_does_not_invalidate_dependents(store: CacheStore) -> None:
    _ = _build(REPORT, store)

    engine, _ = _build(REPORT.replace("data\n", "data_v2\n"), store)

    assert engine.calls == ["read-data"]


def test_uncached_snippets_always_run_and_never_commit(store: CacheStore) -> None:
    text = "```{python a}\nx\n```\n"
    _ = _build(text, store)

    engine, _ = _build(text, store)

    assert engine.calls == ["a"]
    assert store.entries() == []


def test_eval_false_skips_without_output(store: CacheStore) -> None:
    text = "```{python a, eval=FALSE}\nx\n```\n```{python b, dependson='a'}\ny\n```\n"
    engine = RecordingEngine()

    report = DocumentBuilder(engine=engine, cache=store).build(parse_document(text))

    assert engine.calls == ["b"]
    assert engine.received["b"] == {}
    skipped = report.result_for("a")
    assert skipped is not None
    assert skipped.status is SnippetStatus.SKIPPED
    assert skipped.output is None


def test_failure_stops_build_and_keeps_earlier_commits(store: CacheStore) -> None:
    engine = RecordingEngine(fail_on="make-plot")

    with pytest.raises(SnippetExecutionError) as excinfo:
        _ = DocumentBuilder(engine=engine, cache=store).build(parse_document(REPORT))

    assert excinfo.value.snippet_id == "make-plot"
    assert excinfo.value.diagnostic == "RuntimeError: boom"
    assert engine.calls == ["read-data", "make-plot"]
    assert [entry.snippet_id for entry in store.entries()] == ["read-data"]


def test_resolution_errors_happen_before_execution(store: CacheStore) -> None:
    engine = RecordingEngine()
    builder = DocumentBuilder(engine=engine, cache=store)

    with pytest.raises(CycleError):
        _ = builder.build(parse_document("```{python a, dependson='b'}\n```\n```{python b, dependson='a'}\n```\n"))
    with pytest.raises(SnippetNotFoundError):
        _ = builder.build(parse_document("```{python a, dependson='ghost'}\n```\n"))

    assert engine.calls == []


def test_plan_reports_reasons_without_executing(store: CacheStore) -> None:
    _ = _build(REPORT, store)
    text = REPORT.replace("model\n", "model2\n") + "\n```{python extra, eval=FALSE}\nz\n```\n```{python live}\nq\n```\n"
    engine = RecordingEngine()

    items = DocumentBuilder(engine=engine, cache=store).plan(parse_document(text))

    assert [(item.snippet.id, item.status, item.reason) for item in items] == [
        ("read-data", SnippetStatus.CACHED, "cache hit"),
        ("make-plot", SnippetStatus.CACHED, "cache hit"),
        ("make-model", SnippetStatus.EXECUTED, "source changed"),
        ("extra", SnippetStatus.SKIPPED, "eval=false"),
        ("live", SnippetStatus.EXECUTED, "cache disabled"),
    ]
    assert engine.calls == []


def test_plan_reports_missing_entries(store: CacheStore) -> None:
    items = DocumentBuilder(engine=RecordingEngine(), cache=store).plan(parse_document(REPORT))

    assert {item.reason for item in items} == {"no cache entry"}
