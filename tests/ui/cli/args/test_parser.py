"""Tests for command line argument parser."""

import logging
from argparse import Namespace
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from knitcache.platform.logging import DEFAULT_LOG_FILE
from knitcache.ui.cli.args import ArgumentParser, CacheClearArgs, CacheListArgs, CompileArgs, PlanArgs


@pytest.fixture
def document(tmp_path: Path) -> Path:
    """Create a minimal document on disk."""

    path = tmp_path / "report.Rmd"
    _ = path.write_text("```{python a}\nx = 1\n```\n", encoding="utf-8")
    return path


@pytest.fixture
def mock_setup_logger(mocker: MockerFixture) -> MagicMock:
    mock_config = mocker.patch("knitcache.ui.cli.args.parser.Config")
    mock_config.load.return_value.log_file = None
    return mocker.patch("knitcache.ui.cli.args.parser.setup_logger")


def test_create_parser() -> None:
    """Argument parser should expose expected subcommands and options."""

    parser = ArgumentParser.create_parser()

    compile_args: Namespace = parser.parse_args(
        ["compile", "doc.Rmd", "--output", "out.md", "--clear-cache", "--verbose"]
    )
    assert compile_args.command == "compile"
    assert compile_args.document == "doc.Rmd"
    assert compile_args.output == "out.md"
    assert compile_args.clear_cache and compile_args.verbose

    plan_args: Namespace = parser.parse_args(["plan", "doc.Rmd", "--quiet"])
    assert plan_args.command == "plan"
    assert plan_args.quiet

    clear_args: Namespace = parser.parse_args(["cache", "clear", "doc.Rmd", "--snippet", "fit"])
    assert clear_args.command == "cache"
    assert clear_args.cache_command == "clear"
    assert clear_args.snippet == "fit"


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        _ = ArgumentParser.create_parser().parse_args([])


def test_process_args_compile(document: Path, mock_setup_logger: MagicMock) -> None:
    """Compile arguments are coerced into paths and set the console level."""

    args = ArgumentParser.process_args(["compile", str(document)])

    assert isinstance(args, CompileArgs)
    assert args.document_path == document
    assert args.output_path is None
    assert not args.clear_cache
    assert mock_setup_logger.call_args.kwargs["console_level"] == logging.INFO
    assert mock_setup_logger.call_args.kwargs["log_file"] == DEFAULT_LOG_FILE

    args = ArgumentParser.process_args(
        ["compile", str(document), "--output", "rendered.md", "--clear-cache", "--quiet"]
    )
    assert isinstance(args, CompileArgs)
    assert args.output_path == Path("rendered.md")
    assert args.clear_cache
    assert mock_setup_logger.call_args.kwargs["console_level"] == logging.ERROR


def test_process_args_plan_and_list(document: Path, mock_setup_logger: MagicMock) -> None:
    plan = ArgumentParser.process_args(["plan", str(document), "--verbose"])
    listing = ArgumentParser.process_args(["cache", "list", str(document)])

    assert isinstance(plan, PlanArgs)
    assert plan.verbose
    assert mock_setup_logger.call_count == 2
    assert isinstance(listing, CacheListArgs)
    assert listing.document_path == document


def test_process_args_clear_allows_missing_document(tmp_path: Path, mock_setup_logger: MagicMock) -> None:
    _ = mock_setup_logger
    missing = tmp_path / "gone.Rmd"

    args = ArgumentParser.process_args(["cache", "clear", str(missing), "--snippet", "fit"])

    assert isinstance(args, CacheClearArgs)
    assert args.document_path == missing
    assert args.snippet_id == "fit"


def test_process_args_missing_document_exits(tmp_path: Path, mock_setup_logger: MagicMock) -> None:
    _ = mock_setup_logger

    with pytest.raises(SystemExit) as excinfo:
        _ = ArgumentParser.process_args(["compile", str(tmp_path / "missing.Rmd")])

    assert excinfo.value.code == 1


def test_process_args_uses_configured_log_file(document: Path, mocker: MockerFixture) -> None:
    mock_config = mocker.patch("knitcache.ui.cli.args.parser.Config")
    mock_config.load.return_value.log_file = Path("/var/log/knitcache.log")
    mock_setup_logger = mocker.patch("knitcache.ui.cli.args.parser.setup_logger")

    _ = ArgumentParser.process_args(["plan", str(document)])

    assert mock_setup_logger.call_args.kwargs["log_file"] == Path("/var/log/knitcache.log")
