"""Tests for chunk header parsing and option folding."""

import logging

import pytest

from knitcache.features.document.domain.options import (
    build_options,
    parse_chunk_header,
    parse_value,
    split_top_level,
)
from knitcache.shared.errors import DocumentParseError
from knitcache.shared.snippet import ResultsFormat, SnippetOptions


def test_split_top_level_respects_quotes_and_brackets() -> None:
    parts = split_top_level('python a, dependson=c("x", "y"), note="1,2"')
    assert parts == ["python a", ' dependson=c("x", "y")', ' note="1,2"']


def test_split_top_level_rejects_unbalanced_input() -> None:
    with pytest.raises(DocumentParseError):
        _ = split_top_level('label="open')


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("TRUE", True),
        ("F", False),
        ("True", True),
        ("NULL", None),
        ("5", 5),
        ("4.5", 4.5),
        ('"text"', "text"),
        ("'single'", "single"),
        ('c("a", "b")', ["a", "b"]),
        ('["a", "b"]', ["a", "b"]),
        ("c()", []),
        ("bare", "bare"),
    ],
)
def test_parse_value_literals(raw: str, expected: object) -> None:
    assert parse_value(raw) == expected


def test_parse_chunk_header_with_label_and_options() -> None:
    header = parse_chunk_header('python make-plot, cache=TRUE, dependson="load-data"')
    assert header.engine == "python"
    assert header.label == "make-plot"
    assert header.raw_options == (("cache", True), ("dependson", "load-data"))


def test_parse_chunk_header_accepts_separate_label_token_and_label_option() -> None:
    assert parse_chunk_header("python, setup").label == "setup"
    assert parse_chunk_header('r, label="fit", echo=FALSE').label == "fit"


def test_parse_chunk_header_defaults_engine_when_empty() -> None:
    header = parse_chunk_header("", default_engine="py")
    assert header.engine == "py"
    assert header.label is None


def test_parse_chunk_header_rejects_stray_bare_token() -> None:
    with pytest.raises(DocumentParseError, match="key=value"):
        _ = parse_chunk_header("python a, eval=TRUE, oops")


def test_build_options_maps_aliases() -> None:
    options = build_options(
        (
            ("eval", False),
            ("echo", False),
            ("cache", True),
            ("dependson", ["a", "b", "a"]),
            ("fig.width", 5),
            ("fig_height", 3.5),
            ("results", "asis"),
        )
    )
    assert options.evaluate is False
    assert options.echo is False
    assert options.cache is True
    assert options.dependson == ("a", "b")
    assert options.fig_width == 5.0
    assert options.fig_height == 3.5
    assert options.results is ResultsFormat.ASIS


def test_build_options_applies_defaults() -> None:
    defaults = SnippetOptions(fig_width=4.0)
    options = build_options({"cache": True}, defaults=defaults)
    assert options.fig_width == 4.0
    assert options.cache is True


def test_build_options_keeps_unknown_options_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="knitcache"):
        options = build_options({"comment": "#>"})
    assert options.extra == (("comment", "#>"),)
    assert "comment" in caplog.text


@pytest.mark.parametrize(
    "raw_options",
    [
        {"eval": "yes"},
        {"fig.width": -1},
        {"fig.width": True},
        {"dependson": [1]},
        {"results": "latex"},
    ],
)
def test_build_options_rejects_invalid_values(raw_options: dict[str, object]) -> None:
    with pytest.raises(DocumentParseError):
        _ = build_options(raw_options)
